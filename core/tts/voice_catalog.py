"""Voice catalog construction.

Turns the engine's raw voice list into display-ready entries. Only voices usable offline are
kept. Display names are derived from the raw voice name, trying these rules in order:

1. gender token ("female_2" -> "Female Voice 2")
2. quality keyword ("...-hq" -> "High Quality Voice")
3. first plausible name token ("en-us-x-iol-local" -> "Iol Voice")
4. the locale's language ("English Voice")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from models.locale_models import LocaleInfo
from models.re_models import GENDER_TOKEN_PATTERN, VOICE_NAME_SEPARATOR_PATTERN
from models.voice_models import VoiceCatalogEntry, VoiceDescriptor
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable
    from re import Match


__all__: list[str] = ["QUALITY_LABELS", "VoiceCatalogBuilder"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

# Checked in this order
QUALITY_LABELS: Final[tuple[tuple[str, str], ...]] = (
    ("hq", "High Quality"),
    ("premium", "Premium"),
    ("enhanced", "Enhanced"),
    ("standard", "Standard"),
    ("compact", "Compact"),
)

_MIN_TOKEN_LENGTH: Final[int] = 2
_MAX_TOKEN_LENGTH: Final[int] = 10
_IGNORED_TOKENS: Final[frozenset[str]] = frozenset({"local", "x"})


class VoiceCatalogBuilder:
    """Builds the sorted voice catalog from raw engine voice descriptors."""

    @staticmethod
    def build(raw_voices: Iterable[VoiceDescriptor]) -> list[VoiceCatalogEntry]:
        """Filter, name and sort voices.

        Args:
            raw_voices (Iterable[VoiceDescriptor]): Voices as reported by the engine.

        Returns:
            list[VoiceCatalogEntry]: Local voices sorted by language label. Equal labels keep input order.
        """
        entries: list[VoiceCatalogEntry] = []
        for voice in raw_voices:
            if not voice.is_local:
                logger.debug("Skipping voice that is not usable offline: '%s'", voice.identifier)
                continue
            locale: LocaleInfo = LocaleInfo.parse(voice.locale)
            entries.append(
                VoiceCatalogEntry(
                    identifier=voice.identifier,
                    display_name=VoiceCatalogBuilder.display_name(voice.name, locale),
                    language_label=locale.display_name,
                )
            )

        # list.sort is stable
        entries.sort(key=lambda entry: entry.language_label)
        logger.info("Voice catalog built with %d voice(s)", len(entries))
        return entries

    @staticmethod
    def display_name(raw_name: str, locale: LocaleInfo) -> str:
        """Derive a human-readable voice name; the first matching rule wins."""
        raw_name = StringUtils.ensure_str(raw_name)
        return (
            VoiceCatalogBuilder._name_from_gender(raw_name)
            or VoiceCatalogBuilder._name_from_quality(raw_name)
            or VoiceCatalogBuilder._name_from_token(raw_name, locale)
            or f"{locale.display_language} Voice"
        )

    @staticmethod
    def _name_from_gender(raw_name: str) -> str | None:
        match: Match[str] | None = GENDER_TOKEN_PATTERN.search(raw_name)
        if match is None:
            return None
        name: str = f"{match.group('gender').capitalize()} Voice"
        if match.group("number"):
            name = f"{name} {match.group('number')}"
        return name

    @staticmethod
    def _name_from_quality(raw_name: str) -> str | None:
        lowered: str = raw_name.lower()
        for keyword, label in QUALITY_LABELS:
            if keyword in lowered:
                return f"{label} Voice"
        return None

    @staticmethod
    def _name_from_token(raw_name: str, locale: LocaleInfo) -> str | None:
        excluded: set[str] = set(_IGNORED_TOKENS)
        if locale.language:
            excluded.add(locale.language.lower())
        if locale.country:
            excluded.add(locale.country.lower())

        for token in VOICE_NAME_SEPARATOR_PATTERN.split(raw_name):
            if not (_MIN_TOKEN_LENGTH <= len(token) <= _MAX_TOKEN_LENGTH):
                continue
            if token.isdigit() or token.lower() in excluded:
                continue
            return f"{StringUtils.capitalize_first(token)} Voice"
        return None
