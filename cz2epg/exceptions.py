"""
cz2epg.exceptions - Error types

ParseError and FetchError are recoverable per programme or per day;
CacheIOError means the cache directory is unusable and ends the run.
"""


class Cz2EpgError(Exception):
    """Base class for all cz2epg errors"""


class ParseError(Cz2EpgError):
    """Provider document is malformed or misses a required field"""


class CacheIOError(Cz2EpgError):
    """Reading or writing a cache entry failed"""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Cache entry '{key}': {reason}")
        self.key = key
        self.reason = reason


class FetchError(Cz2EpgError):
    """Network transfer failed"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ProviderHTTPError(FetchError):
    """Provider answered with an HTTP error status"""

    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"HTTP {status_code}")
        self.status_code = status_code
