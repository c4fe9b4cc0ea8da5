"""
cz2epg.parser - Data parsing module

Pure parsers for provider documents and titles, plus the DataParser
orchestrator that feeds them from the cache.
"""

from .title import normalize_title, roman_to_int, int_to_roman
from .catalog import parse_channels, parse_listing, parse_description
from .base import DataParser

__all__ = [
    "DataParser",          # Main orchestrator
    "normalize_title",     # Series/episode extraction
    "roman_to_int",
    "int_to_roman",
    "parse_channels",      # Channel list
    "parse_listing",       # Day listing
    "parse_description",   # Show description
]
