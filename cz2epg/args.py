"""
cz2epg.args - Command line arguments

Argument parsing and the startup checks that must pass before any
network activity.
"""

import argparse
import re
import sys
from pathlib import Path
from typing import Optional, Tuple


class ArgumentValidator:
    """Validates command-line arguments"""

    DAYS_PATTERN = re.compile(r"^[1-9]$|^1[0-4]$")  # 1-14 days

    @classmethod
    def validate_days(cls, days: Optional[int]) -> Tuple[bool, Optional[str]]:
        """
        Validate days parameter

        Returns:
            Tuple of (is_valid, error_message)
        """
        if days is None:
            return True, None

        if not cls.DAYS_PATTERN.match(str(days)):
            return False, f"Parameter [--days] must be 1-14, got: {days}"

        return True, None

    @staticmethod
    def validate_output(output: Optional[Path]) -> Tuple[bool, Optional[str]]:
        """Output file is required and its directory must exist"""
        if output is None:
            return False, "No output file defined"

        directory = Path(output).expanduser().parent
        if not directory.is_dir():
            return False, f"Path '{directory}' doesn't exist"

        return True, None

    @staticmethod
    def validate_cache_dir(cache_dir: Path) -> Tuple[bool, Optional[str]]:
        if not Path(cache_dir).expanduser().is_dir():
            return False, f"Cache directory '{cache_dir}' doesn't exist"
        return True, None


class ArgumentParser:
    """Command line argument parser for cz2epg"""

    def __init__(self):
        self.parser = self._create_parser()
        self.validator = ArgumentValidator()

    def _create_parser(self):
        parser = argparse.ArgumentParser(
            prog="cz2epg",
            description="Czech/Slovak TV guide grabber (programandroid.365dni.cz)",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_epilog_text(),
        )

        parser.add_argument(
            "--days", "-d", type=int, default=7,
            help="Build guide for n days (1-14, default: 7)",
        )
        parser.add_argument(
            "--output", "-o", type=Path,
            help="Output XMLTV file (required); a .xz copy is written beside it",
        )
        parser.add_argument(
            "--cache", "-c", type=Path,
            help="Cache directory (default: $HOME/.cz2epg-cache, must exist)",
        )
        parser.add_argument(
            "--version", action="store_true",
            help="Show version and exit",
        )

        # Log level selection
        level_group = parser.add_mutually_exclusive_group()
        level_group.add_argument(
            "--warning", "-w", action="store_true",
            help="Only log warnings and errors",
        )
        level_group.add_argument(
            "--debug", action="store_true",
            help="Log debug information (very verbose)",
        )

        parser.add_argument(
            "--quiet", "-q", action="store_true",
            help="No console logging",
        )
        parser.add_argument(
            "--log-file", type=Path,
            help="Also write the log to this file (rotated at 1 MB)",
        )

        return parser

    def _get_epilog_text(self):
        return """
Examples:
  cz2epg --output ~/epg/guide.xml
  cz2epg --days 3 --output /srv/epg/guide.xml --cache /var/cache/cz2epg
  cz2epg -d 7 -o guide.xml --debug --log-file cz2epg.log

Environment:
  CZ2EPG_BASE_URL      Provider base URL
  CZ2EPG_FALLBACK_URL  URL cached in place of documents the provider refuses
  CZ2EPG_UTC_OFFSET    Offset appended to programme times (default: +0200)
  CZ2EPG_TIMEOUT       HTTP timeout in seconds (default: 10)
  CZ2EPG_COMPRESS      Write the .xz copy (true/false, default: true)
        """

    def parse_args(self, args=None):
        """Parse command line arguments with validation"""
        args = self.parser.parse_args(args)

        if args.version:
            from . import __version__

            print(__version__)
            sys.exit(0)

        valid, error = self.validator.validate_days(args.days)
        if not valid:
            self.parser.error(error)

        return args

    def get_logging_config(self, args) -> dict:
        if args.warning:
            level = "warning"
        elif args.debug:
            level = "debug"
        else:
            level = "default"

        return {"level": level, "console": not args.quiet, "log_file": args.log_file}
