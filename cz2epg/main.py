#!/usr/bin/env python3
"""
cz2epg - Czech/Slovak TV Guide Grabber

Command line entry point: validates paths, cleans the cache, builds the
guide and writes the XMLTV file plus its .xz copy.
"""

import logging
import logging.handlers
import lzma
import shutil
import sys
import time
from pathlib import Path
from typing import Optional

from .args import ArgumentParser
from .config import ConfigManager, GrabberConfig
from .downloader import OptimizedDownloader
from .exceptions import CacheIOError, Cz2EpgError
from .parser import DataParser
from .progress import LoggingProgress
from .utils import CacheManager

from . import __version__


def setup_logging(logging_config: dict):
    """Setup logging on the root logger according to the selected level"""
    if logging_config["level"] == "warning":
        level = logging.WARNING
    elif logging_config["level"] == "debug":
        level = logging.DEBUG
    else:  # default
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    log_file: Optional[Path] = logging_config.get("log_file")
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(message)s", datefmt="%Y/%m/%d %H:%M:%S")
        )
        root_logger.addHandler(file_handler)

    # Console output goes to stderr
    if logging_config["console"]:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(console_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())


def check_paths(config: GrabberConfig, validator) -> Optional[str]:
    """Startup checks; returns the error message of the first failing one"""
    valid, error = validator.validate_output(config.output)
    if not valid:
        return error

    valid, error = validator.validate_cache_dir(config.cache_dir)
    if not valid:
        return error

    return None


def compress_output(xmltv_file: Path) -> Path:
    """Write an xz-compressed copy next to the XMLTV file"""
    xz_file = xmltv_file.with_name(xmltv_file.name + ".xz")
    with open(xmltv_file, "rb") as source, lzma.open(xz_file, "wb") as target:
        shutil.copyfileobj(source, target)
    logging.info("Compressed copy written: %s (%d bytes)", xz_file.name, xz_file.stat().st_size)
    return xz_file


def main(argv=None):
    """Main application entry point"""
    start_time = time.time()

    arg_parser = ArgumentParser()
    args = arg_parser.parse_args(argv)

    try:
        setup_logging(arg_parser.get_logging_config(args))
    except OSError as e:
        print(f"Cannot open log file: {e}", file=sys.stderr)
        return 1

    config = ConfigManager().load(args)

    error = check_paths(config, arg_parser.validator)
    if error:
        print(error, file=sys.stderr)
        return 1

    logging.info("=" * 60)
    logging.info("cz2epg session started - Version %s", __version__)
    logging.info("Building guide for %d days", config.days)
    logging.info("Caching directory: %s", config.cache_dir)

    try:
        with OptimizedDownloader(timeout=config.timeout) as downloader:
            cache_manager = CacheManager(
                config.cache_dir, downloader=downloader, fallback_url=config.fallback_url
            )
            cache_manager.clean()

            data_parser = DataParser(cache_manager, config, progress=LoggingProgress())
            report = data_parser.run(config.days)

            data_parser.get_schedule().write(config.output)
            if config.compress:
                compress_output(config.output)

            stats = downloader.get_stats()

        logging.info("=" * 60)
        logging.info("SUMMARY:")
        logging.info("  Total execution time: %.2f seconds", time.time() - start_time)
        logging.info("  Channels: %d", report.channels)
        logging.info("  Programmes: %d", report.programmes)
        logging.info("  Skipped items: %d", len(report.skipped))
        logging.info("  Total requests: %d", stats["total_requests"])
        if stats["bytes_downloaded"] > 0:
            logging.info("  Data downloaded: %.2f MB", stats["bytes_downloaded"] / (1024 * 1024))
        logging.info("XMLTV output written to: %s", config.output)
        logging.info("cz2epg session ended successfully")
        logging.info("=" * 60)
        return 0

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 1
    except CacheIOError as e:
        logging.error("Cache directory unusable: %s", str(e))
        return 1
    except Cz2EpgError as e:
        logging.error("Guide build failed: %s", str(e))
        return 1
    except OSError as e:
        logging.error("Cannot write output: %s", str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
