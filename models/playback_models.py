"""Data models for block-by-block speech playback.

This module defines:
- DocumentContext: Classification governing ambiguous abbreviation expansion.
- PlaybackState: Idle / Playing / Paused.
- Block: Smallest addressable unit of document text.
- NotificationKind, SynthesisNotification: Messages sent by a synthesis engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

__all__: list[str] = [
    "Block",
    "DocumentContext",
    "NotificationKind",
    "PlaybackState",
    "SynthesisNotification",
]


class DocumentContext(StrEnum):
    """Document classification used by the text preprocessor."""

    TECHNICAL = "technical"
    MEDICAL = "medical"
    GENERAL = "general"

    @property
    def description(self) -> str:
        """Human-readable label for the context."""
        return {
            DocumentContext.TECHNICAL: "Technical/Programming",
            DocumentContext.MEDICAL: "Medical/Scientific",
            DocumentContext.GENERAL: "General",
        }[self]


class PlaybackState(StrEnum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True)
class Block:
    """A block of document text addressed by id.

    Ids need not be contiguous or sorted. Lookups are by equality and the first match wins.

    Attributes:
        id (int): Block identifier; also used as the utterance correlation id.
        text (str): Plain text content as produced by the document parser.
    """

    id: int
    text: str


class NotificationKind(StrEnum):
    STARTED = "started"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class SynthesisNotification:
    """A progress report from a synthesis engine.

    Attributes:
        kind (NotificationKind): What happened to the utterance.
        correlation_id (int | None): Id the utterance was submitted with, None if unparseable.
        code (int | None): Engine error code, for ERROR notifications.
        message (str): Engine error detail, for ERROR notifications.
    """

    kind: NotificationKind
    correlation_id: int | None
    code: int | None = None
    message: str = ""
