"""
Title normalization for cz2epg

Provider titles carry the series and episode numbering inline, for example
"Návrat domů III (12/26)" or "Zprávy /R/". This module splits those
annotations off the displayed title and turns them into an xmltv_ns
episode number plus premiere/repeat flags.
"""

import re
from typing import Optional, Tuple

from ..models import NormalizedTitle

FILM_CATEGORY = "film"

ROMAN_VALUES = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)
ROMAN_DIGITS = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}

_ROMAN = r"M*(?:C[MD]|D?C{0,3})(?:X[CL]|L?X{0,3})(?:I[XV]|V?I{0,3})"
ROMAN_PATTERN = re.compile(rf"^(?=[MDCLXVI]){_ROMAN}$")
SERIES_PATTERN = re.compile(rf"\s((?=[MDCLXVI]){_ROMAN})$")

# "(12" opens the episode marker, "/26)" optionally closes it with the total
EPISODE_PATTERN = re.compile(r"\((\d+)(?:/(\d+)\))?")
EPISODE_ANNOTATION_PATTERN = re.compile(r"\s*\(\d.*$")
PARENTHESIS_PATTERN = re.compile(r"\([^)]*(?:\)|$)")

REPEAT_PATTERN = re.compile(r"\(R\)|/R/")
PREMIERE_PATTERN = re.compile(r"\(P\)|/P/")
MARKER_PATTERN = re.compile(r"\s*(?:\(R\)|/R/|\(P\)|/P/)")


def roman_to_int(numeral: str) -> int:
    """Decode a Roman numeral (subtractive pairs honored)"""
    if not numeral or not ROMAN_PATTERN.match(numeral):
        raise ValueError(f"Invalid Roman numeral: {numeral!r}")

    total = 0
    for index, char in enumerate(numeral):
        value = ROMAN_DIGITS[char]
        following = numeral[index + 1] if index + 1 < len(numeral) else None
        if following and ROMAN_DIGITS[following] > value:
            total -= value
        else:
            total += value
    return total


def int_to_roman(number: int) -> str:
    """Encode 1..3999 as a Roman numeral"""
    if not 1 <= number <= 3999:
        raise ValueError(f"Roman numerals cover 1-3999, got: {number}")

    parts = []
    for value, symbol in ROMAN_VALUES:
        count, number = divmod(number, value)
        parts.append(symbol * count)
    return "".join(parts)


def is_film(category: Optional[str]) -> bool:
    return bool(category) and category.strip().casefold() == FILM_CATEGORY


def find_series_marker(title: str) -> Tuple[Optional[str], Optional[int]]:
    """
    Find the trailing Roman-numeral series marker of a title

    Parenthetical groups such as "(12/26)" or "(HD)" are ignored, so the
    marker is found on both sides of the episode annotation.

    Returns:
        Tuple of (marker token, 1-based series number), (None, None) if absent
    """
    stripped = PARENTHESIS_PATTERN.sub(" ", title).rstrip()
    match = SERIES_PATTERN.search(stripped)
    if not match:
        return None, None
    token = match.group(1)
    return token, roman_to_int(token)


def find_episode(title: str) -> Tuple[Optional[int], str]:
    """
    Find the episode marker of a title

    Returns:
        Tuple of (zero-based episode or None, "/total" suffix or "")
    """
    match = EPISODE_PATTERN.search(title)
    if not match:
        return None, ""

    episode = max(int(match.group(1)) - 1, 0)
    total = f"/{match.group(2)}" if match.group(2) else ""
    return episode, total


def format_episode_num(series: Optional[int], episode: Optional[int], total: str) -> Optional[str]:
    """Build the xmltv_ns episode number from a 1-based series and zero-based episode"""
    if series is not None and episode is not None:
        return f"{series - 1}.{episode}{total}.0/1"
    if series is not None:
        return f"{series - 1}.0.0/1"
    if episode is not None:
        return f"0.{episode}{total}.0/1"
    return None


def normalize_title(title: str, category: Optional[str] = None) -> NormalizedTitle:
    """
    Split series/episode annotations and repeat/premiere markers off a title

    Args:
        title: Raw provider title
        category: Primary category of the show; films keep their title intact
                  and get no episode number

    Returns:
        NormalizedTitle with the display title, zero-based series, episode
        number string and premiere/repeat flags
    """
    repeat = bool(REPEAT_PATTERN.search(title))
    premiere = bool(PREMIERE_PATTERN.search(title))

    display = MARKER_PATTERN.sub("", title)
    token, series = find_series_marker(display)
    episode, total = find_episode(display)

    episode_num = None
    if not is_film(category):
        display = EPISODE_ANNOTATION_PATTERN.sub("", display)
        if token:
            display = re.sub(rf"\s{token}\.?\s*$", "", display)
        episode_num = format_episode_num(series, episode, total)

    return NormalizedTitle(
        title=display.strip(),
        series=series - 1 if series is not None else None,
        episode_num=episode_num,
        premiere=premiere,
        repeat=repeat,
    )
