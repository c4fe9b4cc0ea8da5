"""
cz2epg.xmltv - XMLTV generation

Collects channels and programmes and renders the XMLTV document. Programme
titles are normalized (series/episode numbering, repeat/premiere markers)
and categories get their English counterparts on the way in.
"""

import logging
import re
from collections import OrderedDict
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .dictionaries import SOURCE_LANGUAGE, category_pairs
from .models import Channel, CreditEntry, ListingEntry, ProgrammeRecord, ShowDescription
from .parser.title import normalize_title
from .utils import HtmlUtils, TimeUtils

# ČT :D and ČT art share one channel; 805 is published under 804
CHANNEL_ALIASES = {"805": "804"}

CREDIT_ORDER = ("director", "writer", "music", "camera", "producer", "actor")

CHARACTER_SUFFIX_PATTERN = re.compile(r"\s?/\s\.\.\.")
COUNTRY_SEPARATOR_PATTERN = re.compile(r"/|,\s")
EMPTY_CREDITS_PATTERN = re.compile(r"[^\n]*<credits/>\n")
EMPTY_ROLE_PATTERN = re.compile(r'\srole=""')


def resolve_channel_id(channel_id: str) -> str:
    return CHANNEL_ALIASES.get(channel_id, channel_id)


def canonical_channels(channels: Iterable[Channel]) -> List[Channel]:
    """
    Collapse aliased channels onto their canonical id

    The canonical channel keeps its own name and logo; an alias only stands
    in for it when the canonical channel is missing from the list.
    """
    result: "OrderedDict[str, Channel]" = OrderedDict()

    for channel in channels:
        canonical_id = resolve_channel_id(channel.id)
        if channel.id == canonical_id:
            result[canonical_id] = channel
        elif canonical_id not in result:
            result[canonical_id] = replace(channel, id=canonical_id)
        else:
            logging.debug("Channel %s merged into %s", channel.id, canonical_id)

    return list(result.values())


def split_countries(country: Optional[str]) -> List[str]:
    if not country:
        return []
    return [part.strip() for part in COUNTRY_SEPARATOR_PATTERN.split(country) if part.strip()]


def clean_character(character: Optional[str]) -> str:
    """Strip the trailing " / ..." the provider appends to character names"""
    if not character:
        return ""
    return CHARACTER_SUFFIX_PATTERN.sub("", character).strip()


def finalize_document(text: str) -> str:
    """Final text pass over the serialized document"""
    text = text.replace("_", "-")
    text = EMPTY_CREDITS_PATTERN.sub("", text)
    return EMPTY_ROLE_PATTERN.sub("", text)


class XmltvGenerator:
    """Assembles the XMLTV document from parsed guide records"""

    def __init__(
        self,
        utc_offset: str = "+0200",
        logo_base: str = "",
        generator_name: str = "cz2epg",
        generator_url: str = "",
    ):
        self.utc_offset = utc_offset
        self.logo_base = logo_base
        self.generator_name = generator_name
        self.generator_url = generator_url

        self.channels: "OrderedDict[str, Channel]" = OrderedDict()
        self.programmes: List[ProgrammeRecord] = []

    @staticmethod
    def channel_xmltv_id(channel: Channel) -> str:
        return f"{resolve_channel_id(channel.id)}-{HtmlUtils.slugify(channel.name)}"

    def add_channel(self, channel: Channel) -> bool:
        """Register a channel; returns False when its canonical id is already known"""
        channel_id = resolve_channel_id(channel.id)
        if channel_id in self.channels:
            return False
        self.channels[channel_id] = replace(channel, id=channel_id)
        return True

    def add_programme(
        self, channel_id: str, listing: Optional[ListingEntry], description: ShowDescription
    ) -> ProgrammeRecord:
        """
        Enrich a show description and queue it as a programme

        Args:
            channel_id: Provider channel id (aliases are resolved)
            listing: Day listing entry the show came from
            description: Parsed show description

        Returns:
            The queued ProgrammeRecord
        """
        channel = self.channels.get(resolve_channel_id(channel_id))
        if channel is None:
            raise KeyError(f"Unknown channel: {channel_id}")

        normalized = normalize_title(description.title, description.category)

        record = ProgrammeRecord(
            channel=self.channel_xmltv_id(channel),
            start=TimeUtils.conv_time(description.start, self.utc_offset),
            stop=TimeUtils.conv_time(description.stop, self.utc_offset),
            title=normalized.title,
            subtitle=description.subtitle,
            desc=description.desc,
            categories=category_pairs(
                listing.category if listing else None, description.category, description.genres
            ),
            length=description.length,
            year=description.year,
            countries=split_countries(description.country),
            episode_num=normalized.episode_num,
            rating=description.rating,
            premiere=normalized.premiere,
            repeat=normalized.repeat,
            credits=self._sorted_credits(description.credits),
        )
        self.programmes.append(record)
        return record

    @staticmethod
    def _sorted_credits(credits: List[CreditEntry]) -> List[CreditEntry]:
        result = []
        for role in CREDIT_ORDER:
            for credit in credits:
                if credit.role != role:
                    continue
                if role == "actor":
                    credit = replace(credit, character=clean_character(credit.character))
                result.append(credit)
        return result

    def _header_lines(self) -> List[str]:
        return [
            '<?xml version="1.0" encoding="utf-8"?>',
            f'<tv generator-info-name="{HtmlUtils.conv_html(self.generator_name)}" '
            f'generator-info-url="{HtmlUtils.conv_html(self.generator_url)}">',
        ]

    def _channel_lines(self, channel: Channel) -> List[str]:
        lines = [
            f'\t<channel id="{self.channel_xmltv_id(channel)}">',
            f'\t\t<display-name lang="{SOURCE_LANGUAGE}">{HtmlUtils.conv_html(channel.name)}</display-name>',
        ]
        if channel.logo:
            icon = HtmlUtils.conv_html(self.logo_base + channel.logo)
            lines.append(f'\t\t<icon src="{icon}"/>')
        lines.append("\t</channel>")
        return lines

    def _credits_lines(self, credits: List[CreditEntry]) -> List[str]:
        if not credits:
            return ["\t\t<credits/>"]

        lines = ["\t\t<credits>"]
        for credit in credits:
            name = HtmlUtils.conv_html(credit.name)
            if credit.role == "actor":
                character = HtmlUtils.conv_html(credit.character)
                lines.append(f'\t\t\t<actor role="{character}">{name}</actor>')
            else:
                lines.append(f"\t\t\t<{credit.role}>{name}</{credit.role}>")
        lines.append("\t\t</credits>")
        return lines

    def _programme_lines(self, programme: ProgrammeRecord) -> List[str]:
        lang = SOURCE_LANGUAGE
        lines = [
            f'\t<programme start="{programme.start}" stop="{programme.stop}" '
            f'channel="{programme.channel}">',
            f'\t\t<title lang="{lang}">{HtmlUtils.conv_html(programme.title)}</title>',
        ]

        if programme.subtitle:
            lines.append(
                f'\t\t<sub-title lang="{lang}">{HtmlUtils.conv_html(programme.subtitle)}</sub-title>'
            )
        if programme.desc:
            lines.append(f'\t\t<desc lang="{lang}">{HtmlUtils.conv_html(programme.desc)}</desc>')

        lines.extend(self._credits_lines(programme.credits))

        if programme.year:
            lines.append(f"\t\t<date>{HtmlUtils.conv_html(programme.year)}</date>")

        for category_lang, label in programme.categories:
            lines.append(
                f'\t\t<category lang="{category_lang}">{HtmlUtils.conv_html(label)}</category>'
            )

        if programme.length:
            lines.append(
                f'\t\t<length units="minutes">{HtmlUtils.conv_html(programme.length)}</length>'
            )

        for country in programme.countries:
            lines.append(f'\t\t<country lang="{lang}">{HtmlUtils.conv_html(country)}</country>')

        if programme.episode_num:
            lines.append(
                f'\t\t<episode-num system="xmltv_ns">{programme.episode_num}</episode-num>'
            )

        if programme.repeat:
            lines.append("\t\t<previously-shown/>")
        if programme.premiere:
            lines.append("\t\t<premiere/>")

        if programme.rating:
            lines.append("\t\t<rating>")
            lines.append(f"\t\t\t<value>{HtmlUtils.conv_html(programme.rating)}</value>")
            lines.append("\t\t</rating>")

        lines.append("\t</programme>")
        return lines

    def render(self) -> str:
        """Serialize the document and apply the final text pass"""
        lines = self._header_lines()
        for channel in self.channels.values():
            lines.extend(self._channel_lines(channel))
        for programme in self.programmes:
            lines.extend(self._programme_lines(programme))
        lines.append("</tv>")

        return finalize_document("\n".join(lines) + "\n")

    def write(self, xmltv_file: Path) -> int:
        """Write the document; returns its size in bytes"""
        logging.info("Writing XMLTV file: %s", xmltv_file)
        data = self.render().encode("utf-8")
        Path(xmltv_file).write_bytes(data)
        logging.info(
            "XMLTV file created: %s (%d channels, %d programmes, %d bytes)",
            Path(xmltv_file).name,
            len(self.channels),
            len(self.programmes),
            len(data),
        )
        return len(data)

    def get_statistics(self) -> Dict[str, int]:
        return {"channels": len(self.channels), "programmes": len(self.programmes)}
