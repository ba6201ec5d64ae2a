"""Document read-aloud: engine contract, playback sequencing and voice catalog.

This package drives a pluggable synthesis engine block by block, feeding it text that has
passed through the speakable-text preprocessor, and builds the catalog of installed voices.
"""

from core.tts.interface import (
    BlockNotFoundError,
    EngineNotReadyError,
    InitializationFailureError,
    Interface,
    SynthesisFailureError,
    TTSExceptionError,
)
from core.tts.manager import TTSManager
from core.tts.playback_engine import PlaybackCallbacks, PlaybackEngine
from core.tts.voice_catalog import VoiceCatalogBuilder

__all__: list[str] = [
    "BlockNotFoundError",
    "EngineNotReadyError",
    "InitializationFailureError",
    "Interface",
    "PlaybackCallbacks",
    "PlaybackEngine",
    "SynthesisFailureError",
    "TTSExceptionError",
    "TTSManager",
    "VoiceCatalogBuilder",
]
