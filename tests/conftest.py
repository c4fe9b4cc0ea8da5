from datetime import date

import pytest

from cz2epg.config import GrabberConfig
from cz2epg.exceptions import ProviderHTTPError

BASE_URL = "http://provider.test/android/"
FALLBACK_URL = "http://fallback.test/"
GUIDE_DAY = date(2024, 5, 1)

CHANNELS_XML = """<?xml version="1.0" encoding="utf-8"?>
<x>
  <s loga="http://logos.test/"/>
  <a id="1"><n>ČT1</n><o>ct1.png</o><p>České</p></a>
  <a id="99"><n>Polsat</n><o>polsat.png</o><p>Polské</p></a>
</x>
""".encode("utf-8")

ALIAS_CHANNELS_XML = """<?xml version="1.0" encoding="utf-8"?>
<x>
  <s loga="http://logos.test/"/>
  <a id="804"><n>ČT :D</n><o>ctd.png</o><p>České</p></a>
  <a id="805"><n>ČT art</n><o>ctart.png</o><p>České</p></a>
</x>
""".encode("utf-8")

LISTING_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<x>
  <p o="2024-05-01 06:00:00"><t>S</t></p>
</x>
"""

DESCRIPTION_XML = """<?xml version="1.0" encoding="utf-8"?>
<x>
  <a>
    <n>Some Show (2/6) III</n>
    <b>Pilot</b>
    <p><d>Popis dílu.</d></p>
    <i>
      <t>Seriál</t>
      <st><tt>komedie</tt><tt>rodinný</tt></st>
      <z>ČR/SR, USA</z>
      <d>45</d>
      <r>2019</r>
      <p>12</p>
      <l>
        <o t="h"><j role="Pepa / ...">Ivan Trojan</j><j role="">Anna Geislerová</j></o>
        <o t="r"><j>Jan Hřebejk</j></o>
      </l>
    </i>
    <s o="2024-05-01 06:00:00" d="2024-05-01 06:45:00"/>
  </a>
</x>
""".encode("utf-8")

PLACEHOLDER_HTML = b"<!DOCTYPE html><html><body>Search"


def channels_url():
    return f"{BASE_URL}v5-tv.php?locale=cz"


def listing_url(channel_id, day=GUIDE_DAY):
    return f"{BASE_URL}v5-program.php?datum={day:%Y-%m-%d}&id_tv={channel_id}"


def description_url(channel_id, digits):
    return f"{BASE_URL}v5-porad.php?datum={digits}&id_tv={channel_id}"


class FakeDownloader:
    """Serves canned documents; unknown URLs answer HTTP 404"""

    def __init__(self, documents=None):
        self.documents = dict(documents or {})
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        if url not in self.documents:
            raise ProviderHTTPError(url, 404)
        return self.documents[url]


@pytest.fixture
def config(tmp_path):
    return GrabberConfig(
        output=tmp_path / "guide.xml",
        cache_dir=tmp_path,
        days=1,
        base_url=BASE_URL,
        fallback_url=FALLBACK_URL,
        generator_url="http://generator.test/",
    )


@pytest.fixture
def provider_documents():
    return {
        channels_url(): CHANNELS_XML,
        listing_url("1"): LISTING_XML,
        description_url("1", "20240501060000"): DESCRIPTION_XML,
        FALLBACK_URL: PLACEHOLDER_HTML,
    }
