"""Text handling utilities for docspeak.

This package provides the speakable-text preprocessor with its document context detection.
"""

from handlers.text_preprocessor import ContextScore, TextPreprocessor

__all__: list[str] = ["ContextScore", "TextPreprocessor"]
