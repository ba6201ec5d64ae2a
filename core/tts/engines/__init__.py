"""Text-to-speech engine implementations.

This package contains concrete implementations of the Interface. Importing the package
registers every engine under its distinguished name.

Modules:
- Pyttsx3Engine: Offline synthesis through pyttsx3 (SAPI5, NSSpeechSynthesizer, espeak).
"""

from core.tts.engines.pyttsx3_engine import Pyttsx3Engine

__all__: list[str] = ["Pyttsx3Engine"]
