"""
Core orchestrator for downloading and parsing

The DataParser walks channel list -> day listings -> show descriptions,
pulling every document through the cache and feeding parsed records into
the XMLTV generator. A broken listing day or show description is skipped
and recorded; the run carries on.
"""

import logging
from datetime import date
from typing import List, Optional

from ..config import GrabberConfig
from ..exceptions import FetchError, ParseError
from ..models import Channel, ListingEntry, RunReport
from ..progress import ProgressReporter
from ..utils import CacheManager, TimeUtils
from ..xmltv import XmltvGenerator, canonical_channels
from .catalog import parse_channels, parse_description, parse_listing

CHANNELS_KEY = "channels.xml"


class DataParser:
    """Main orchestrator - drives the channel x day traversal"""

    def __init__(
        self,
        cache_manager: CacheManager,
        config: GrabberConfig,
        generator: Optional[XmltvGenerator] = None,
        progress: Optional[ProgressReporter] = None,
    ):
        self.cache_manager = cache_manager
        self.config = config
        self.generator = generator or XmltvGenerator(
            utc_offset=config.utc_offset,
            generator_name=config.generator_name,
            generator_url=config.generator_url,
        )
        self.progress = progress or ProgressReporter()
        self.report = RunReport()

    # Provider URLs and cache keys

    def channel_list_url(self) -> str:
        return f"{self.config.base_url}v5-tv.php?locale={self.config.locale}"

    def listing_url(self, channel_id: str, day: date) -> str:
        return f"{self.config.base_url}v5-program.php?datum={day:%Y-%m-%d}&id_tv={channel_id}"

    def description_url(self, channel_id: str, entry: ListingEntry) -> str:
        return f"{self.config.base_url}v5-porad.php?datum={entry.ref_digits}&id_tv={channel_id}"

    @staticmethod
    def listing_key(channel_id: str, day: date) -> str:
        return f"{channel_id}-{day:%Y%m%d}.xml"

    @staticmethod
    def description_key(channel_id: str, entry: ListingEntry) -> str:
        return f"{channel_id}-{entry.ref_digits}.xml"

    def load_channels(self) -> List[Channel]:
        """
        Download and parse the channel list

        Raises:
            ParseError: channel list is unusable, nothing can be built
        """
        content = self.cache_manager.get(self.channel_list_url(), CHANNELS_KEY)
        logo_base, channels = parse_channels(content, self.config.wanted_groups)
        self.generator.logo_base = logo_base

        channels = canonical_channels(channels)
        logging.info("Channel list: %d channels selected", len(channels))
        return channels

    def run(self, days: int, start: Optional[date] = None) -> RunReport:
        """
        Build the guide for days days starting at start (today by default)

        Returns:
            RunReport with counts and skipped items
        """
        channels = self.load_channels()
        for channel in channels:
            self.generator.add_channel(channel)

        self.report.channels = len(channels)
        self.progress.start("Parsing EPG", len(channels))

        for channel in channels:
            self.progress.advance(channel.name)
            for day in TimeUtils.guide_days(days, start):
                self._process_day(channel, day)

        self.progress.finish()
        self._log_statistics()
        return self.report

    def _process_day(self, channel: Channel, day: date):
        day_label = f"{day:%Y-%m-%d}"
        try:
            content = self.cache_manager.get(
                self.listing_url(channel.id, day), self.listing_key(channel.id, day)
            )
            entries = parse_listing(content)
        except (ParseError, FetchError) as e:
            logging.warning("Skipping %s on %s: %s", channel.name, day_label, str(e))
            self.report.skip(channel.id, day_label, None, str(e))
            return

        self.report.days += 1
        logging.debug("%s %s: %d shows", channel.name, day_label, len(entries))

        for entry in entries:
            self._process_show(channel, day_label, entry)

    def _process_show(self, channel: Channel, day_label: str, entry: ListingEntry):
        if not entry.ref_digits:
            reason = f"Show reference without digits: {entry.air_date_ref!r}"
            logging.warning("Skipping show on %s %s: %s", channel.name, day_label, reason)
            self.report.skip(channel.id, day_label, entry.air_date_ref, reason)
            return

        try:
            content = self.cache_manager.get(
                self.description_url(channel.id, entry), self.description_key(channel.id, entry)
            )
            description = parse_description(content)
            self.generator.add_programme(channel.id, entry, description)
        except (ParseError, FetchError, ValueError) as e:
            logging.warning(
                "Skipping show %s on %s %s: %s", entry.air_date_ref, channel.name, day_label, str(e)
            )
            self.report.skip(channel.id, day_label, entry.air_date_ref, str(e))
            return

        self.report.programmes += 1

    def _log_statistics(self):
        logging.info(
            "Guide parsed: %d channels, %d listing days, %d programmes, %d skipped",
            self.report.channels,
            self.report.days,
            self.report.programmes,
            len(self.report.skipped),
        )
        logging.info(
            "Cache: %d hits, %d downloads, %d placeholder fallbacks",
            self.cache_manager.hits,
            self.cache_manager.fetches,
            self.cache_manager.fallbacks,
        )

    def get_schedule(self) -> XmltvGenerator:
        return self.generator
