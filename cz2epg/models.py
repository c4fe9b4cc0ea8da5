"""
cz2epg.models - Guide records

Typed records produced by the catalog parsers and consumed by the
XMLTV generator.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class Channel:
    """Channel entry from the provider channel list"""
    id: str
    name: str
    logo: str = ""
    group: str = ""


@dataclass
class ListingEntry:
    """One show in a per-day channel listing"""
    air_date_ref: str
    category: Optional[str] = None

    @property
    def ref_digits(self) -> str:
        """Digits of the show reference, used in description URLs and cache keys"""
        return "".join(c for c in self.air_date_ref if c.isdigit())


@dataclass
class CreditEntry:
    role: str
    name: str
    character: Optional[str] = None


@dataclass
class ShowDescription:
    """Full description of a single show"""
    title: str
    start: str
    stop: str
    subtitle: Optional[str] = None
    desc: Optional[str] = None
    category: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    country: Optional[str] = None
    length: Optional[str] = None
    year: Optional[str] = None
    rating: Optional[str] = None
    credits: List[CreditEntry] = field(default_factory=list)


@dataclass
class NormalizedTitle:
    title: str
    series: Optional[int] = None
    episode_num: Optional[str] = None
    premiere: bool = False
    repeat: bool = False


@dataclass
class ProgrammeRecord:
    """Assembled programme, ready for XMLTV output"""
    channel: str
    start: str
    stop: str
    title: str
    subtitle: Optional[str] = None
    desc: Optional[str] = None
    categories: List[Tuple[str, str]] = field(default_factory=list)
    length: Optional[str] = None
    year: Optional[str] = None
    countries: List[str] = field(default_factory=list)
    episode_num: Optional[str] = None
    rating: Optional[str] = None
    premiere: bool = False
    repeat: bool = False
    credits: List[CreditEntry] = field(default_factory=list)


@dataclass
class SkippedItem:
    """Diagnostic for a listing day or programme left out of the guide"""
    channel_id: str
    day: str
    reference: Optional[str]
    reason: str


@dataclass
class RunReport:
    """Statistics for one grabber run"""
    channels: int = 0
    days: int = 0
    programmes: int = 0
    skipped: List[SkippedItem] = field(default_factory=list)

    def skip(self, channel_id: str, day: str, reference: Optional[str], reason: str):
        self.skipped.append(SkippedItem(channel_id, day, reference, reason))
