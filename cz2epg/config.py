"""
cz2epg.config - Configuration management

Builds the run configuration from built-in defaults, CZ2EPG_* environment
variables and command line arguments, in that order of precedence.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

DEFAULT_BASE_URL = "http://programandroid.365dni.cz/android/"
DEFAULT_FALLBACK_URL = "http://www.google.com"
DEFAULT_GENERATOR_URL = "https://github.com/cz2epg/cz2epg"
DEFAULT_WANTED_GROUPS = ("Slovenské", "České", "Ostatní")
CACHE_DIR_NAME = ".cz2epg-cache"

UTC_OFFSET_PATTERN = re.compile(r"^[+-]\d{4}$")


def default_cache_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """$HOME/.cz2epg-cache"""
    environ = os.environ if environ is None else environ
    home = environ.get("HOME") or str(Path.home())
    return Path(home).expanduser() / CACHE_DIR_NAME


@dataclass
class GrabberConfig:
    """Settings for one grabber run"""
    output: Optional[Path] = None
    cache_dir: Path = field(default_factory=default_cache_dir)
    days: int = 7
    base_url: str = DEFAULT_BASE_URL
    fallback_url: str = DEFAULT_FALLBACK_URL
    locale: str = "cz"
    wanted_groups: Tuple[str, ...] = DEFAULT_WANTED_GROUPS
    utc_offset: str = "+0200"
    timeout: float = 10.0
    compress: bool = True
    generator_name: str = "cz2epg"
    generator_url: str = DEFAULT_GENERATOR_URL


class ConfigManager:
    """Merges defaults, environment and command line into a GrabberConfig"""

    ENV_PREFIX = "CZ2EPG_"

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def load(self, args=None) -> GrabberConfig:
        config = GrabberConfig(cache_dir=default_cache_dir(self.environ))
        self._apply_environment(config)
        if args is not None:
            self._apply_arguments(config, args)
        return config

    def _env(self, name: str) -> Optional[str]:
        value = self.environ.get(self.ENV_PREFIX + name)
        return value.strip() if value else None

    def _apply_environment(self, config: GrabberConfig):
        base_url = self._env("BASE_URL")
        if base_url:
            config.base_url = base_url if base_url.endswith("/") else base_url + "/"

        fallback_url = self._env("FALLBACK_URL")
        if fallback_url:
            config.fallback_url = fallback_url

        utc_offset = self._env("UTC_OFFSET")
        if utc_offset:
            if UTC_OFFSET_PATTERN.match(utc_offset):
                config.utc_offset = utc_offset
            else:
                logging.warning(
                    "Invalid %sUTC_OFFSET %r, using default %s",
                    self.ENV_PREFIX, utc_offset, config.utc_offset,
                )

        timeout = self._env("TIMEOUT")
        if timeout:
            try:
                config.timeout = float(timeout)
            except ValueError:
                logging.warning(
                    "Invalid %sTIMEOUT %r, using default %.1f",
                    self.ENV_PREFIX, timeout, config.timeout,
                )

        compress = self._env("COMPRESS")
        if compress:
            config.compress = compress.lower() == "true"

    @staticmethod
    def _apply_arguments(config: GrabberConfig, args):
        if getattr(args, "days", None) is not None:
            config.days = args.days
        if getattr(args, "output", None) is not None:
            config.output = Path(args.output).expanduser()
        if getattr(args, "cache", None) is not None:
            config.cache_dir = Path(args.cache).expanduser()
