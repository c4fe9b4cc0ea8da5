"""
cz2epg - Czech/Slovak TV Guide Grabber

A modular Python implementation for downloading TV guide data from
programandroid.365dni.cz with a resumable disk cache and XMLTV output.
"""

__version__ = "1.0.0"
__author__ = "cz2epg contributors"
__license__ = "GPL-3.0"

from .args import ArgumentParser
from .config import ConfigManager, GrabberConfig
from .downloader import OptimizedDownloader
from .parser import DataParser
from .utils import CacheManager
from .xmltv import XmltvGenerator
from .dictionaries import map_category, map_genre, category_pairs

__all__ = [
    "ArgumentParser",
    "ConfigManager",
    "GrabberConfig",
    "OptimizedDownloader",
    "DataParser",
    "CacheManager",
    "XmltvGenerator",
    "map_category",
    "map_genre",
    "category_pairs",
]
