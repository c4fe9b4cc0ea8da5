from datetime import date

import pytest

from cz2epg.exceptions import CacheIOError, FetchError
from cz2epg.utils import CacheManager, TimeUtils

from .conftest import FALLBACK_URL, PLACEHOLDER_HTML, FakeDownloader

URL = "http://provider.test/android/v5-program.php?datum=2024-05-01&id_tv=1"


def test_get_downloads_once_per_key(tmp_path) -> None:
    downloader = FakeDownloader({URL: b"<x/>"})
    cache = CacheManager(tmp_path, downloader=downloader, fallback_url=FALLBACK_URL)

    first = cache.get(URL, "1-20240501.xml")
    second = cache.get(URL, "1-20240501.xml")

    assert first == second == b"<x/>"
    assert downloader.calls == [URL]
    assert (tmp_path / "1-20240501.xml").read_bytes() == b"<x/>"
    assert cache.fetches == 1
    assert cache.hits == 1


def test_get_reads_existing_entry_without_network(tmp_path) -> None:
    (tmp_path / "channels.xml").write_bytes(b"cached")
    downloader = FakeDownloader()
    cache = CacheManager(tmp_path, downloader=downloader)

    assert cache.get("http://provider.test/channels", "channels.xml") == b"cached"
    assert downloader.calls == []


def test_provider_error_caches_placeholder(tmp_path) -> None:
    downloader = FakeDownloader({FALLBACK_URL: PLACEHOLDER_HTML})
    cache = CacheManager(tmp_path, downloader=downloader, fallback_url=FALLBACK_URL)

    assert cache.get(URL, "1-20240501.xml") == PLACEHOLDER_HTML
    assert downloader.calls == [URL, FALLBACK_URL]
    assert (tmp_path / "1-20240501.xml").read_bytes() == PLACEHOLDER_HTML
    assert cache.fallbacks == 1


def test_failed_fallback_leaves_no_entry(tmp_path) -> None:
    cache = CacheManager(tmp_path, downloader=FakeDownloader(), fallback_url=FALLBACK_URL)

    with pytest.raises(FetchError):
        cache.get(URL, "1-20240501.xml")
    assert not (tmp_path / "1-20240501.xml").exists()


def test_write_failure_raises_cache_io_error(tmp_path) -> None:
    cache = CacheManager(tmp_path / "missing", downloader=FakeDownloader({URL: b"<x/>"}))

    with pytest.raises(CacheIOError) as excinfo:
        cache.get(URL, "1-20240501.xml")
    assert excinfo.value.key == "1-20240501.xml"


def test_clean_removes_only_past_date_keyed_entries(tmp_path) -> None:
    names = [
        "channels.xml",
        "1-20240430.xml",
        "1-20240430063000.xml",
        "1-20240501.xml",
        "1-20240501220000.xml",
        "804-20240502.xml",
        "foo-bar.xml",
        "1-2024.xml",
    ]
    for name in names:
        (tmp_path / name).write_bytes(b"<x/>")

    removed = CacheManager(tmp_path).clean(today=date(2024, 5, 1))

    assert removed == 2
    assert sorted(p.name for p in tmp_path.iterdir()) == sorted(
        set(names) - {"1-20240430.xml", "1-20240430063000.xml"}
    )


@pytest.mark.parametrize(
    "key, expected",
    [
        ("1-20240501.xml", date(2024, 5, 1)),
        ("804-20240501063500.xml", date(2024, 5, 1)),
        ("channels.xml", None),
        ("foo-bar.xml", None),
        ("1-20241399.xml", None),
    ],
)
def test_parse_key_date(key: str, expected) -> None:
    assert TimeUtils.parse_key_date(key) == expected


def test_guide_days_start_today() -> None:
    days = list(TimeUtils.guide_days(3, date(2024, 12, 31)))

    assert days == [date(2024, 12, 31), date(2025, 1, 1), date(2025, 1, 2)]


def test_conv_time_keeps_digits_and_appends_offset() -> None:
    assert TimeUtils.conv_time("2024-05-01 06:00:00", "+0200") == "20240501060000 +0200"
