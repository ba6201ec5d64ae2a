"""Unit tests for handlers.text_preprocessor module."""

from __future__ import annotations

import pytest

from handlers.text_preprocessor import ContextScore, TextPreprocessor
from models.playback_models import DocumentContext

TECHNICAL_TEXT = "This Python function reads rows from the database"
MEDICAL_TEXT = "The patient received treatment and medication"


@pytest.fixture
def preprocessor() -> TextPreprocessor:
    return TextPreprocessor()


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Release v2.10.3 is out", "Release version 2 point 10 point 3 is out"),
        ("Upgrade to v1.2 now", "Upgrade to version 1 point 2 now"),
        ("Open src/main\\app", "Open src, main, app"),
        ("Call `run()` first", "Call run() first"),
        ("getUserName", "get User Name"),
        ("snake_case_name", "snake case name"),
        ("Wait... done", "Wait, done"),
        ("input -> output", "input to output"),
        ("key => value", "key maps to value"),
        ("#release by @alice", "hashtag release by at alice"),
    ],
)
def test_pattern_rules(preprocessor: TextPreprocessor, text: str, expected: str) -> None:
    assert preprocessor.preprocess(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a !== b", "a is not strictly equal to b"),
        ("a === b", "a is strictly equal to b"),
        ("a != b", "a is not equal to b"),
        ("a == b", "a equals b"),
        ("x <= y", "x less than or equal to y"),
        ("x >= y", "x greater than or equal to y"),
    ],
)
def test_comparison_operators_prefer_longest_match(preprocessor: TextPreprocessor, text: str, expected: str) -> None:
    assert preprocessor.preprocess(text) == expected


def test_three_component_version_is_not_split(preprocessor: TextPreprocessor) -> None:
    assert preprocessor.preprocess("v2.10.3") == "version 2 point 10 point 3"


def test_ml_expansion_depends_on_context(preprocessor: TextPreprocessor) -> None:
    text = "Measure 5 ML twice"

    assert preprocessor.preprocess(text, DocumentContext.TECHNICAL) == "Measure 5 machine learning twice"
    assert preprocessor.preprocess(text, DocumentContext.MEDICAL) == "Measure 5 milliliter twice"


def test_context_expansion_uses_current_context_by_default(preprocessor: TextPreprocessor) -> None:
    preprocessor.set_context(DocumentContext.MEDICAL)

    assert preprocessor.preprocess("CV risk") == "cardiovascular risk"


def test_context_expansion_falls_back_to_general(preprocessor: TextPreprocessor) -> None:
    assert preprocessor.preprocess("NN layers", DocumentContext.TECHNICAL) == "neural network layers"


def test_universal_abbreviations_are_case_insensitive(preprocessor: TextPreprocessor) -> None:
    assert preprocessor.preprocess("The Api returns JSON") == "The A P I returns jason"


def test_abbreviation_inside_word_is_not_expanded(preprocessor: TextPreprocessor) -> None:
    assert preprocessor.preprocess("html5 and xhtml pages") == "html5 and xhtml pages"


def test_abbreviation_with_trailing_period(preprocessor: TextPreprocessor) -> None:
    assert preprocessor.preprocess("Fruit, e.g. apples") == "Fruit, for example apples"


def test_path_rule_runs_before_slash_abbreviations(preprocessor: TextPreprocessor) -> None:
    assert preprocessor.preprocess("Coffee w/o sugar") == "Coffee w, o sugar"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("5GB of RAM", "5 gigabytes of RAM"),
        ("10tb disk", "10 terabytes disk"),
        ("512 mb", "512 megabytes"),
    ],
)
def test_unit_suffixed_numbers(preprocessor: TextPreprocessor, text: str, expected: str) -> None:
    assert preprocessor.preprocess(text) == expected


def test_empty_input_gives_empty_output(preprocessor: TextPreprocessor) -> None:
    assert preprocessor.preprocess("") == ""
    assert preprocessor.preprocess("   \n\t ") == ""


def test_whitespace_normalization_is_idempotent(preprocessor: TextPreprocessor) -> None:
    once: str = preprocessor.preprocess("  hello \n\n  world   again ")

    assert once == "hello world again"
    for context in DocumentContext:
        assert preprocessor.preprocess(once, context) == once


def test_score_counts_distinct_keywords() -> None:
    assert TextPreprocessor.score("python python PYTHON function") == ContextScore(technical=2, medical=0)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (TECHNICAL_TEXT, DocumentContext.TECHNICAL),
        (MEDICAL_TEXT, DocumentContext.MEDICAL),
        ("python function patient diagnosis", DocumentContext.GENERAL),
        ("python only", DocumentContext.GENERAL),
        ("", DocumentContext.GENERAL),
    ],
)
def test_classify(text: str, expected: DocumentContext) -> None:
    assert TextPreprocessor.classify(text) is expected


def test_classify_ignores_case_and_keyword_order() -> None:
    reordered: str = " ".join(reversed(MEDICAL_TEXT.split()))

    assert TextPreprocessor.classify(MEDICAL_TEXT.upper()) is DocumentContext.MEDICAL
    assert TextPreprocessor.classify(reordered) is DocumentContext.MEDICAL


def test_detect_context_sets_current_context(preprocessor: TextPreprocessor) -> None:
    assert preprocessor.context is DocumentContext.GENERAL

    detected: DocumentContext = preprocessor.detect_context(TECHNICAL_TEXT)

    assert detected is DocumentContext.TECHNICAL
    assert preprocessor.context is DocumentContext.TECHNICAL
    assert preprocessor.context_description == "Technical/Programming"


def test_set_context_overrides_detection(preprocessor: TextPreprocessor) -> None:
    preprocessor.detect_context(TECHNICAL_TEXT)
    preprocessor.set_context(DocumentContext.MEDICAL)

    assert preprocessor.context_description == "Medical/Scientific"
    assert preprocessor.preprocess("ML") == "milliliter"
