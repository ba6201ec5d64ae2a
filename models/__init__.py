"""Data models for docspeak.

This package contains dataclass definitions for configuration, playback, voices and locales,
plus the lookup tables and regular expression patterns used by the text preprocessor.
"""

from __future__ import annotations

from models.config_models import Config, Engine, General, Speech
from models.lexicon_models import (
    CONTEXT_ABBREVIATIONS,
    MEDICAL_INDICATORS,
    TECHNICAL_INDICATORS,
    UNIVERSAL_ABBREVIATIONS,
)
from models.locale_models import LocaleInfo
from models.playback_models import (
    Block,
    DocumentContext,
    NotificationKind,
    PlaybackState,
    SynthesisNotification,
)
from models.re_models import (
    GENDER_TOKEN_PATTERN,
    PATTERN_RULES,
    UNIT_NUMBER_PATTERN,
    PatternRule,
)
from models.voice_models import VoiceCatalogEntry, VoiceDescriptor

__all__: list[str] = [
    "CONTEXT_ABBREVIATIONS",
    "GENDER_TOKEN_PATTERN",
    "MEDICAL_INDICATORS",
    "PATTERN_RULES",
    "TECHNICAL_INDICATORS",
    "UNIT_NUMBER_PATTERN",
    "UNIVERSAL_ABBREVIATIONS",
    "Block",
    "Config",
    "DocumentContext",
    "Engine",
    "General",
    "LocaleInfo",
    "NotificationKind",
    "PatternRule",
    "PlaybackState",
    "Speech",
    "SynthesisNotification",
    "VoiceCatalogEntry",
    "VoiceDescriptor",
]
