"""Speakable-text preprocessing.

Rewrites block text into a form a synthesis engine pronounces naturally. The pipeline runs
five stages in a fixed order:

1. Pattern rules (paths, versions, code spans, camelCase, operators, hashtags, ...)
2. Context-sensitive abbreviation expansion ("ML" -> "machine learning" / "milliliter")
3. Universal abbreviation expansion ("API" -> "A P I")
4. Unit-suffixed numbers ("5GB" -> "5 gigabytes")
5. Whitespace normalisation

The pipeline is not idempotent: an expansion may itself contain a token that a later run
would expand again. Only stage 5 is guaranteed to be stable under repetition.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final, NamedTuple

from models.lexicon_models import (
    CONTEXT_ABBREVIATIONS,
    MEDICAL_INDICATORS,
    MIN_CONTEXT_SCORE,
    TECHNICAL_INDICATORS,
    UNIVERSAL_ABBREVIATIONS,
)
from models.playback_models import DocumentContext
from models.re_models import ABBREVIATION_TEMPLATE, PATTERN_RULES, UNIT_NUMBER_PATTERN
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from re import Match, Pattern


__all__: list[str] = ["ContextScore", "TextPreprocessor"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def _abbreviation_pattern(key: str) -> Pattern[str]:
    return re.compile(ABBREVIATION_TEMPLATE.format(key=re.escape(key)), re.IGNORECASE)


# Compiled once; table order is preserved because later entries see earlier expansions
_CONTEXT_RULES: Final[tuple[tuple[Pattern[str], dict[DocumentContext, str]], ...]] = tuple(
    (_abbreviation_pattern(key), meanings) for key, meanings in CONTEXT_ABBREVIATIONS.items()
)
_UNIVERSAL_RULES: Final[tuple[tuple[Pattern[str], str], ...]] = tuple(
    (_abbreviation_pattern(key), expansion) for key, expansion in UNIVERSAL_ABBREVIATIONS.items()
)


class ContextScore(NamedTuple):
    """Number of distinct indicator keywords found for each context."""

    technical: int
    medical: int


class TextPreprocessor:
    """Context-aware speakable-text rewriter.

    Holds the current document context. It is GENERAL initially, changed by detect_context()
    or overridden by set_context(). Apart from that selection the class is stateless.
    """

    def __init__(self, context: DocumentContext = DocumentContext.GENERAL) -> None:
        self._context: DocumentContext = context

    @property
    def context(self) -> DocumentContext:
        return self._context

    @property
    def context_description(self) -> str:
        return self._context.description

    def set_context(self, context: DocumentContext) -> None:
        """Override the current context, e.g. on explicit user choice."""
        logger.info("Document context set to '%s'", context)
        self._context = context

    def detect_context(self, full_text: str) -> DocumentContext:
        """Classify a whole document and make the result the current context.

        Args:
            full_text (str): All block texts of the document joined together.

        Returns:
            DocumentContext: The detected context.
        """
        context: DocumentContext = self.classify(full_text)
        self._context = context
        return context

    @staticmethod
    def score(full_text: str) -> ContextScore:
        """Count distinct technical and medical keywords occurring anywhere in the text.

        Matching is case-insensitive substring search, so "classic" counts for "class".
        """
        lowered: str = StringUtils.ensure_str(full_text).lower()
        return ContextScore(
            technical=sum(1 for keyword in TECHNICAL_INDICATORS if keyword in lowered),
            medical=sum(1 for keyword in MEDICAL_INDICATORS if keyword in lowered),
        )

    @staticmethod
    def classify(full_text: str) -> DocumentContext:
        """Pure context classification.

        A context wins only with a strictly higher score of at least MIN_CONTEXT_SCORE.
        Ties and low scores resolve to GENERAL.
        """
        score: ContextScore = TextPreprocessor.score(full_text)
        if score.technical > score.medical and score.technical >= MIN_CONTEXT_SCORE:
            context = DocumentContext.TECHNICAL
        elif score.medical > score.technical and score.medical >= MIN_CONTEXT_SCORE:
            context = DocumentContext.MEDICAL
        else:
            context = DocumentContext.GENERAL
        logger.debug("Context scores technical=%d medical=%d -> %s", score.technical, score.medical, context)
        return context

    def preprocess(self, text: str, context: DocumentContext | None = None) -> str:
        """Rewrite text into speakable form.

        Args:
            text (str): Raw block text.
            context (DocumentContext | None): Context to expand abbreviations for.
                Defaults to the current context.

        Returns:
            str: Speakable text; empty input gives an empty string.
        """
        active: DocumentContext = self._context if context is None else context
        result: str = StringUtils.ensure_str(text)

        for rule in PATTERN_RULES:
            result = rule.matcher.sub(rule.replacement, result)

        result = self._expand_context_abbreviations(result, active)
        result = self._expand_universal_abbreviations(result)
        result = UNIT_NUMBER_PATTERN.sub(self._expand_unit, result)
        return StringUtils.compress_blanks(result)

    @staticmethod
    def _expand_context_abbreviations(text: str, context: DocumentContext) -> str:
        for pattern, meanings in _CONTEXT_RULES:
            replacement: str = meanings.get(context, meanings[DocumentContext.GENERAL])
            # a callable replacement keeps expansions free of template escapes
            text = pattern.sub(lambda _match, value=replacement: value, text)
        return text

    @staticmethod
    def _expand_universal_abbreviations(text: str) -> str:
        for pattern, expansion in _UNIVERSAL_RULES:
            text = pattern.sub(lambda _match, value=expansion: value, text)
        return text

    @staticmethod
    def _expand_unit(match: Match[str]) -> str:
        number: str = match.group(1)
        unit: str = match.group(2).lower()
        return f"{number} {UNIVERSAL_ABBREVIATIONS.get(unit, unit)}"
