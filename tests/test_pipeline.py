import xml.etree.ElementTree as ET

import pytest

from cz2epg.exceptions import ParseError
from cz2epg.parser import DataParser
from cz2epg.progress import ProgressReporter
from cz2epg.utils import CacheManager

from .conftest import (
    ALIAS_CHANNELS_XML,
    DESCRIPTION_XML,
    FALLBACK_URL,
    GUIDE_DAY,
    LISTING_XML,
    PLACEHOLDER_HTML,
    FakeDownloader,
    channels_url,
    description_url,
    listing_url,
)


class RecordingProgress(ProgressReporter):
    def __init__(self):
        self.events = []

    def start(self, title, total):
        self.events.append(("start", total))

    def advance(self, label=""):
        self.events.append(("advance", label))

    def finish(self):
        self.events.append(("finish",))


def _run(config, downloader, days=1, progress=None):
    cache = CacheManager(config.cache_dir, downloader=downloader, fallback_url=config.fallback_url)
    data_parser = DataParser(cache, config, progress=progress)
    report = data_parser.run(days, start=GUIDE_DAY)
    return data_parser, report


def test_end_to_end_single_channel(config, provider_documents) -> None:
    progress = RecordingProgress()
    data_parser, report = _run(config, FakeDownloader(provider_documents), progress=progress)

    document = data_parser.get_schedule().render()
    root = ET.fromstring(document.encode("utf-8"))

    programmes = root.findall("programme")
    assert len(programmes) == 1
    assert programmes[0].get("channel") == "1-ct1"
    assert programmes[0].findtext("episode-num") == "2.1/6.0/1"
    assert programmes[0].findtext("title") == "Some Show"
    assert [c.get("id") for c in root.findall("channel")] == ["1-ct1"]

    assert report.channels == 1
    assert report.days == 1
    assert report.programmes == 1
    assert report.skipped == []
    assert progress.events == [("start", 1), ("advance", "ČT1"), ("finish",)]


def test_second_run_is_served_from_cache(config, provider_documents) -> None:
    _run(config, FakeDownloader(provider_documents))

    downloader = FakeDownloader(provider_documents)
    data_parser, report = _run(config, downloader)

    assert downloader.calls == []
    assert report.programmes == 1
    assert sorted(p.name for p in config.cache_dir.glob("*.xml")) == [
        "1-20240501.xml",
        "1-20240501060000.xml",
        "channels.xml",
    ]


def test_broken_description_is_skipped(config, provider_documents) -> None:
    provider_documents[listing_url("1")] = b"""<x>
      <p o="2024-05-01 05:00:00"><t>S</t></p>
      <p o="2024-05-01 06:00:00"><t>S</t></p>
    </x>"""
    downloader = FakeDownloader(provider_documents)

    data_parser, report = _run(config, downloader)

    # 05:00 description answers 404, the placeholder page is cached and fails to parse
    assert description_url("1", "20240501050000") in downloader.calls
    assert (config.cache_dir / "1-20240501050000.xml").read_bytes() == PLACEHOLDER_HTML
    assert report.programmes == 1
    assert len(report.skipped) == 1
    skipped = report.skipped[0]
    assert (skipped.channel_id, skipped.day, skipped.reference) == (
        "1",
        "2024-05-01",
        "2024-05-01 05:00:00",
    )
    assert len(data_parser.get_schedule().programmes) == 1


def test_broken_listing_day_is_skipped(config, provider_documents) -> None:
    data_parser, report = _run(config, FakeDownloader(provider_documents), days=2)

    assert report.days == 1
    assert report.programmes == 1
    assert [(s.day, s.reference) for s in report.skipped] == [("2024-05-02", None)]


def test_alias_channel_is_merged(config) -> None:
    documents = {
        channels_url(): ALIAS_CHANNELS_XML,
        listing_url("804"): LISTING_XML,
        description_url("804", "20240501060000"): DESCRIPTION_XML,
        FALLBACK_URL: PLACEHOLDER_HTML,
    }
    downloader = FakeDownloader(documents)

    data_parser, report = _run(config, downloader)
    document = data_parser.get_schedule().render()
    root = ET.fromstring(document.encode("utf-8"))

    assert [c.get("id") for c in root.findall("channel")] == ["804-ct-d"]
    assert {p.get("channel") for p in root.findall("programme")} == {"804-ct-d"}
    assert not any("id_tv=805" in url for url in downloader.calls)
    assert "805" not in document
    assert report.channels == 1


def test_unusable_channel_list_is_fatal(config) -> None:
    downloader = FakeDownloader({FALLBACK_URL: PLACEHOLDER_HTML})

    with pytest.raises(ParseError):
        _run(config, downloader)
