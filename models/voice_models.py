"""Data models for synthesis voices.

This module defines:
- VoiceDescriptor: A voice as reported by the synthesis engine.
- VoiceCatalogEntry: A display-ready description of a locally installed voice.
"""

from __future__ import annotations

from dataclasses import dataclass

from dataclasses_json import DataClassJsonMixin, LetterCase, dataclass_json

__all__: list[str] = [
    "VoiceCatalogEntry",
    "VoiceDescriptor",
]


@dataclass(frozen=True)
class VoiceDescriptor:
    """Raw voice information supplied by the engine.

    Attributes:
        identifier (str): Opaque engine identifier, only used to select the voice later.
        name (str): Raw voice name; the display-name heuristics work on this string.
        locale (str): Locale tag such as "en-US" or "de_DE". May be empty.
        network_required (bool): The voice needs network connectivity.
        not_installed (bool): The voice data is not installed locally.
    """

    identifier: str
    name: str
    locale: str = ""
    network_required: bool = False
    not_installed: bool = False

    @property
    def is_local(self) -> bool:
        return not (self.network_required or self.not_installed)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class VoiceCatalogEntry(DataClassJsonMixin):
    """Display-ready voice entry.

    Attributes:
        identifier (str): Opaque engine identifier of the voice.
        display_name (str): Derived human-readable name, e.g. "Female Voice 2".
        language_label (str): Locale display name, e.g. "English (United States)".
    """

    identifier: str
    display_name: str
    language_label: str
