import pytest

from cz2epg.dictionaries import (
    CATEGORY_TRANSLATIONS,
    GENRE_TRANSLATIONS,
    category_pairs,
    map_category,
    map_genre,
)


def test_map_category_known_label() -> None:
    assert map_category("Sport") == "Sports"
    assert map_category("Dětem") == "Children's / Youth programmes"


def test_map_category_unknown_label() -> None:
    assert map_category("unknown-category") is None
    assert map_category("Seriál") is None
    assert map_category(None) is None


def test_category_table_is_total() -> None:
    assert len(CATEGORY_TRANSLATIONS) == 6
    for label in CATEGORY_TRANSLATIONS:
        assert map_category(label)


def test_genre_table_is_total() -> None:
    for genre in GENRE_TRANSLATIONS:
        assert map_genre(genre)
        assert map_genre(genre.capitalize()) == GENRE_TRANSLATIONS[genre]


def test_tables_are_immutable() -> None:
    with pytest.raises(TypeError):
        CATEGORY_TRANSLATIONS["Seriál"] = "Show / Game show"


def test_category_pairs_for_news_listing() -> None:
    pairs = category_pairs("Z", None, [])

    assert pairs == [("cz", "Zprávy"), ("en", "News / Current affairs")]


def test_category_pairs_news_listing_with_news_category() -> None:
    pairs = category_pairs("Z", "Zprávy", ["publicistický"])

    assert pairs[:2] == [("cz", "Zprávy"), ("en", "News / Current affairs")]
    assert pairs.count(("cz", "Zprávy")) == 1
    assert pairs.count(("en", "News / Current affairs")) == 1
    assert pairs[2] == ("cz", "Publicistický")


def test_category_pairs_order_and_unmapped_entries() -> None:
    pairs = category_pairs("F", "Film", ["krimi", "životopisný"])

    assert pairs == [
        ("cz", "Film"),
        ("en", "Movie / Drama"),
        ("cz", "Krimi"),
        ("en", "Detective / Thriller"),
        ("cz", "Životopisný"),
    ]
