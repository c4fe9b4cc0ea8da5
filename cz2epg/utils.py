"""
cz2epg.utils - Utilities and cache management

Provides the provider document cache, time utilities, and text helpers
for XMLTV output.
"""

import html
import logging
import re
import unicodedata
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterator, Optional

from .exceptions import CacheIOError, ProviderHTTPError


class TimeUtils:
    """Time and date utilities"""

    @staticmethod
    def conv_time(raw: str, utc_offset: str) -> str:
        """Convert provider timestamp ("2024-05-01 06:00:00") to XMLTV format"""
        digits = re.sub(r"[^0-9]", "", raw or "")
        return f"{digits} {utc_offset}"

    @staticmethod
    def guide_days(days: int, start: Optional[date] = None) -> Iterator[date]:
        """Yield the calendar days covered by the guide, today first"""
        first = start or date.today()
        for offset in range(1, days + 1):
            yield first + timedelta(days=offset - 1)

    @staticmethod
    def parse_key_date(key: str) -> Optional[date]:
        """
        Date embedded in a cache key ("804-20240501.xml", "804-20240501063500.xml")

        Returns:
            The date, or None when the key carries no parseable date
        """
        name = key[:-4] if key.endswith(".xml") else key
        if "-" not in name:
            return None
        suffix = name.rsplit("-", 1)[1]
        if len(suffix) < 8 or not suffix.isdigit():
            return None
        try:
            return datetime.strptime(suffix[:8], "%Y%m%d").date()
        except ValueError:
            return None


class CacheManager:
    """Disk cache of provider documents, keyed by file name"""

    def __init__(self, cache_dir: Path, downloader=None, fallback_url: Optional[str] = None):
        self.cache_dir = Path(cache_dir)
        self.downloader = downloader
        self.fallback_url = fallback_url

        # Statistics
        self.hits = 0
        self.fetches = 0
        self.fallbacks = 0

    def path_for(self, key: str) -> Path:
        return self.cache_dir / key

    def get(self, url: str, key: str) -> bytes:
        """
        Return the cached document for key, downloading url on a miss

        A provider HTTP error caches the fallback URL response under key instead.

        Raises:
            CacheIOError: cache entry cannot be read or written
            FetchError: download failed (including the fallback download)
        """
        file_path = self.path_for(key)

        if file_path.exists():
            try:
                data = file_path.read_bytes()
            except OSError as e:
                raise CacheIOError(key, str(e)) from e
            self.hits += 1
            logging.debug("Using cached: %s", key)
            return data

        logging.debug("Downloading %s -> %s", url, key)
        try:
            data = self.downloader.fetch(url)
        except ProviderHTTPError as e:
            if not self.fallback_url:
                raise
            logging.warning(
                "Provider error for %s (%s), caching placeholder from %s as %s",
                url,
                e.reason,
                self.fallback_url,
                key,
            )
            data = self.downloader.fetch(self.fallback_url)
            self.fallbacks += 1

        try:
            file_path.write_bytes(data)
        except OSError as e:
            raise CacheIOError(key, str(e)) from e

        self.fetches += 1
        return data

    def clean(self, today: Optional[date] = None) -> int:
        """
        Remove date-keyed entries older than today

        Entries without a parseable date suffix are kept.

        Returns:
            Number of removed entries
        """
        today = today or date.today()
        cleaned_count = 0
        kept_count = 0

        for cache_file in sorted(self.cache_dir.glob("*-*")):
            file_date = TimeUtils.parse_key_date(cache_file.name)
            if file_date is None:
                logging.debug("Cache entry without date kept: %s", cache_file.name)
                continue

            if file_date < today:
                try:
                    cache_file.unlink()
                except OSError as e:
                    raise CacheIOError(cache_file.name, str(e)) from e
                logging.debug("Deleted old cache entry: %s", cache_file.name)
                cleaned_count += 1
            else:
                kept_count += 1

        logging.info("Cache cleanup: %d removed, %d kept", cleaned_count, kept_count)
        return cleaned_count


class HtmlUtils:
    """HTML/XML utilities"""

    @staticmethod
    def conv_html(data) -> str:
        """Convert data to an XML-safe string with normalized entities"""
        if data is None:
            return ""

        data = html.unescape(str(data))

        data = data.replace("&", "&amp;")
        data = data.replace('"', "&quot;")
        data = data.replace("'", "&apos;")
        data = data.replace("<", "&lt;")
        data = data.replace(">", "&gt;")

        return data

    @staticmethod
    def strip_diacritics(text: str) -> str:
        normalized = unicodedata.normalize("NFKD", text)
        return "".join(c for c in normalized if not unicodedata.combining(c))

    @staticmethod
    def slugify(name: str) -> str:
        """Channel slug: "ČT :D" -> "ct-d", "Nova+ 1" -> "novaplus-1" """
        slug = HtmlUtils.strip_diacritics(name.lower())
        slug = re.sub(r"[\s.]", "-", slug)
        slug = re.sub(r"[:()!?,'\"]", "", slug)
        slug = slug.replace("+", "plus")
        return re.sub(r"[^a-z0-9-]", "", slug)
