"""Configuration data models for docspeak.

Each dataclass mirrors one section of the INI file; field names are the INI keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Config",
    "Engine",
    "General",
    "Speech",
]


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    SCRIPT_NAME: str = ""


@dataclass
class Speech:
    RATE: float = 1.0
    VOICE: str = ""
    # "auto" enables detection; any other value pins the document context
    CONTEXT: str = "auto"


@dataclass
class Engine:
    NAME: str = "pyttsx3"
    # Words per minute at rate 1.0; 0 keeps the engine's own default
    BASE_RATE: int = 0


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    SPEECH: Speech = field(default_factory=Speech)
    ENGINE: Engine = field(default_factory=Engine)
