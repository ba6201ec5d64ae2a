"""Unit tests for docspeak.

This package contains test modules for all components of docspeak.
Tests use pytest with asyncio support; speech engines are replaced by in-memory fakes or a
patched pyttsx3 driver, so no audio device is needed.
"""
