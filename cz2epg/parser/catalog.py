"""
Catalog parsers for cz2epg

Pure parsing of the three provider documents (channel list, day listing,
show description). No HTTP or caching here; callers pass raw bytes.

Provider dialect (element names are single letters):
    channel list:  <s loga="..."/> <a id="1"><n>name</n><o>logo</o><p>group</p></a>
    day listing:   <p o="2024-05-01 06:00:00"><t>Z</t></p>
    description:   <a><n>title</n><b>subtitle</b><p><d>text</d></p>
                   <i><t>category</t><st><tt>genre</tt></st><z>country</z>
                      <d>length</d><r>year</r><p>rating</p>
                      <l><o t="r"><j>name</j></o></l></i>
                   <s o="start" d="stop"/></a>
"""

import xml.etree.ElementTree as ET
from typing import Collection, List, Optional, Tuple

from ..exceptions import ParseError
from ..models import Channel, CreditEntry, ListingEntry, ShowDescription

CREDIT_ROLES = {
    "r": "director",
    "s": "writer",
    "m": "music",
    "k": "camera",
    "p": "producer",
    "h": "actor",
}


def _parse_xml(content: bytes, document: str) -> ET.Element:
    if not content or not content.strip():
        raise ParseError(f"Empty {document} document")
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise ParseError(f"Malformed {document} document: {e}") from e


def _text(element: ET.Element, path: str) -> Optional[str]:
    """Stripped text of the first element at path, None when missing or blank"""
    found = element.find(path)
    if found is None:
        return None
    text = "".join(found.itertext()).strip()
    return text or None


def parse_channels(
    content: bytes, wanted_groups: Optional[Collection[str]] = None
) -> Tuple[str, List[Channel]]:
    """
    Parse the provider channel list

    Args:
        content: Raw channel list document
        wanted_groups: Regional groups to keep; channels without a group are kept

    Returns:
        Tuple of (logo base URL, channels in document order)
    """
    root = _parse_xml(content, "channel list")

    settings = root if root.tag == "s" else root.find(".//s")
    logo_base = settings.get("loga", "") if settings is not None else ""

    channels = []
    for element in root.iter("a"):
        channel_id = (element.get("id") or "").strip()
        name = _text(element, "n")
        if not channel_id or not name:
            raise ParseError("Channel entry without id or name")

        group = _text(element, "p")
        if wanted_groups and group is not None and group not in wanted_groups:
            continue

        channels.append(
            Channel(id=channel_id, name=name, logo=_text(element, "o") or "", group=group or "")
        )

    return logo_base, channels


def parse_listing(content: bytes) -> List[ListingEntry]:
    """Parse a per-day channel listing into its show references"""
    root = _parse_xml(content, "listing")

    entries = []
    for element in root.iter("p"):
        reference = (element.get("o") or "").strip()
        if not reference:
            raise ParseError("Listing entry without show reference")
        entries.append(ListingEntry(air_date_ref=reference, category=_text(element, "t")))

    return entries


def parse_credits(show: ET.Element) -> List[CreditEntry]:
    credits = []
    info = show.find("i")
    if info is None:
        return credits

    for crew in info.iter("l"):
        for group in crew.iter("o"):
            role = CREDIT_ROLES.get(group.get("t", ""))
            if not role:
                continue
            for person in group.iter("j"):
                name = "".join(person.itertext()).strip()
                if not name:
                    continue
                character = person.get("role") if role == "actor" else None
                credits.append(CreditEntry(role=role, name=name, character=character))

    return credits


def parse_description(content: bytes) -> ShowDescription:
    """Parse a show description document"""
    root = _parse_xml(content, "description")

    show = root if root.tag == "a" else root.find(".//a")
    if show is None:
        raise ParseError("Description document has no show element")

    title = _text(show, "n")
    if not title:
        raise ParseError("Show description without title")

    schedule = show.find("s")
    start = schedule.get("o") if schedule is not None else None
    stop = schedule.get("d") if schedule is not None else None
    if not start or not stop:
        raise ParseError(f"Show '{title}' has no start/stop time")

    genres = []
    for genre in show.findall("i/st/tt"):
        text = "".join(genre.itertext()).strip()
        if text:
            genres.append(text)

    return ShowDescription(
        title=title,
        start=start,
        stop=stop,
        subtitle=_text(show, "b"),
        desc=_text(show, "p/d"),
        category=_text(show, "i/t"),
        genres=genres,
        country=_text(show, "i/z"),
        length=_text(show, "i/d"),
        year=_text(show, "i/r"),
        rating=_text(show, "i/p"),
        credits=parse_credits(show),
    )
