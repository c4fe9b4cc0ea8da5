"""
cz2epg.downloader - HTTP download manager

Handles HTTP downloads from the provider with connection reuse,
connection-level retries and a polite delay between requests.
"""

import logging
import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import FetchError, ProviderHTTPError

USER_AGENT = "Mozilla/5.0 (Linux; Android 10; K) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"


class OptimizedDownloader:
    """Download manager with a persistent session"""

    def __init__(self, timeout: float = 10.0, min_delay: float = 0.2, retries: int = 2):
        self.session: Optional[requests.Session] = None
        self.timeout = timeout
        self.min_delay = min_delay
        self.retries = retries
        self.last_request_time = 0.0

        # Statistics
        self.total_requests = 0
        self.failed_requests = 0
        self.bytes_downloaded = 0

        self.init_session()

    def init_session(self):
        """Initialize session with connection reuse and connection-level retries"""
        if self.session:
            self.session.close()

        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": USER_AGENT,
                "Accept": "application/xml, text/xml, */*",
                "Accept-Language": "cs-CZ,cs;q=0.9,sk;q=0.8,en;q=0.7",
                "Connection": "keep-alive",
            }
        )

        # Status codes are not retried here; the cache decides what to do with them
        retry_strategy = Retry(
            total=self.retries, connect=self.retries, read=self.retries, status=0, backoff_factor=0.5
        )
        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=1, max_retries=retry_strategy)

        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        logging.debug("HTTP session initialized (timeout: %.1fs)", self.timeout)

    def polite_delay(self):
        """Keep at least min_delay between two requests"""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.min_delay:
            time.sleep(self.min_delay - elapsed)
        self.last_request_time = time.time()

    def fetch(self, url: str) -> bytes:
        """
        Download url and return the response body

        Raises:
            ProviderHTTPError: server answered with an error status
            FetchError: transport failure (DNS, connection, timeout)
        """
        self.total_requests += 1
        self.polite_delay()

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.failed_requests += 1
            logging.warning("  Request error for %s: %s", url, str(e))
            raise FetchError(url, str(e)) from e

        if response.status_code >= 400:
            self.failed_requests += 1
            logging.warning("  HTTP %d received for %s", response.status_code, url)
            raise ProviderHTTPError(url, response.status_code)

        self.bytes_downloaded += len(response.content)
        logging.debug("  Success: %d bytes received", len(response.content))
        return response.content

    def close(self):
        """Clean shutdown"""
        if self.session:
            self.session.close()
            self.session = None

    def get_stats(self) -> Dict[str, Any]:
        """Get download statistics"""
        return {
            "total_requests": self.total_requests,
            "failed_requests": self.failed_requests,
            "bytes_downloaded": self.bytes_downloaded,
        }

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
