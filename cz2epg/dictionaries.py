"""
cz2epg.dictionaries - Category translation tables

Maps the provider's Czech categories and genre tags to the English
XMLTV/DVB genre labels. Unknown keys have no English counterpart; the
Czech label is still emitted on its own.
"""

from types import MappingProxyType
from typing import Iterable, List, Optional, Tuple

SOURCE_LANGUAGE = "cz"
TARGET_LANGUAGE = "en"

# Listing category code for news programmes
NEWS_MARKER = "Z"
NEWS_CATEGORY = ("Zprávy", "News / Current affairs")

CATEGORY_TRANSLATIONS = MappingProxyType(
    {
        "Dětem": "Children's / Youth programmes",
        "Dokument": "Documentary",
        "Film": "Movie / Drama",
        "Sport": "Sports",
        "Zábava": "Show / Game show",
        "Zprávy": "News / Current affairs",
    }
)

_ADVENTURE = "Adventure / Western / War"
_SERIOUS = "Serious / Classical / Religious / Historical movie / Drama"
_FANTASY = "Science fiction / Fantasy / Horror"
_DETECTIVE = "Detective / Thriller"

GENRE_TRANSLATIONS = MappingProxyType(
    {
        "dobrodružný": _ADVENTURE,
        "western": _ADVENTURE,
        "válečný": _ADVENTURE,
        "komedie": "Comedy",
        "historický": _SERIOUS,
        "drama": _SERIOUS,
        "psychologický": _SERIOUS,
        "romantický": "Romance",
        "rodinný": "Soap / Melodrama / Folkloric",
        "erotický": "Adult movie / Drama",
        "pohádka": "Cartoons / Puppets",
        "sci-fi": _FANTASY,
        "fantasy": _FANTASY,
        "horor": _FANTASY,
        "krimi": _DETECTIVE,
        "mysteriozní": _DETECTIVE,
        "thriller": _DETECTIVE,
    }
)


def map_category(label: Optional[str]) -> Optional[str]:
    """English label for a primary category, None when unmapped"""
    if not label:
        return None
    return CATEGORY_TRANSLATIONS.get(label.strip())


def map_genre(tag: Optional[str]) -> Optional[str]:
    """English genre cluster for a genre tag, None when unmapped"""
    if not tag:
        return None
    return GENRE_TRANSLATIONS.get(tag.strip().lower())


def category_pairs(
    listing_category: Optional[str], category: Optional[str], genres: Iterable[str]
) -> List[Tuple[str, str]]:
    """
    Build the ordered (lang, label) category list of a programme

    Args:
        listing_category: Category code from the day listing (news marker is "Z")
        category: Primary category of the show description
        genres: Genre tags of the show description

    Returns:
        List of (language, label) pairs, Czech label first, English after it
    """
    pairs: List[Tuple[str, str]] = []

    if listing_category == NEWS_MARKER:
        pairs.append((SOURCE_LANGUAGE, NEWS_CATEGORY[0]))
        pairs.append((TARGET_LANGUAGE, NEWS_CATEGORY[1]))

    if category and (SOURCE_LANGUAGE, category) not in pairs:
        pairs.append((SOURCE_LANGUAGE, category))
        english = map_category(category)
        if english:
            pairs.append((TARGET_LANGUAGE, english))

    for genre in genres:
        if not genre:
            continue
        pairs.append((SOURCE_LANGUAGE, genre.capitalize()))
        english = map_genre(genre)
        if english:
            pairs.append((TARGET_LANGUAGE, english))

    return pairs
