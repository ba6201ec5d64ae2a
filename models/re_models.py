"""Regular expressions for the speech text pipeline and the voice catalog.

The pattern rules are applied strictly in list order, each one operating on the output of
the previous one. Several orderings are load-bearing:
- the three-component version rule precedes the two-component one,
- comparison operators are listed longest first.
"""

from __future__ import annotations

import re
from re import Pattern
from typing import Final, NamedTuple

__all__: list[str] = [
    "ABBREVIATION_TEMPLATE",
    "CONFIG_CONTEXT_PATTERN",
    "GENDER_TOKEN_PATTERN",
    "PATTERN_RULES",
    "UNIT_NUMBER_PATTERN",
    "VOICE_NAME_SEPARATOR_PATTERN",
    "PatternRule",
]


class PatternRule(NamedTuple):
    """A (matcher, replacement template) pair.

    The replacement is an re.sub template and may reference capture groups.
    """

    matcher: Pattern[str]
    replacement: str


PATTERN_RULES: Final[tuple[PatternRule, ...]] = (
    # Path separators become a spoken pause
    # Example: "src/main/app" -> "src, main, app"
    PatternRule(re.compile(r"[/\\]"), ", "),
    # Semantic versions, three components before two
    # Example: "v2.10.3" -> "version 2 point 10 point 3"
    PatternRule(re.compile(r"v(\d+)\.(\d+)\.(\d+)"), r"version \1 point \2 point \3"),
    PatternRule(re.compile(r"v(\d+)\.(\d+)"), r"version \1 point \2"),
    # Inline code spans lose their backticks
    # Example: "`run()`" -> "run()"
    PatternRule(re.compile(r"`([^`]+)`"), r"\1"),
    # camelCase boundary
    # Example: "getUserName" -> "get User Name"
    PatternRule(re.compile(r"([a-z])([A-Z])"), r"\1 \2"),
    # snake_case
    PatternRule(re.compile(r"_"), " "),
    # Ellipsis
    PatternRule(re.compile(r"\.\.\."), ", "),
    # Arrows
    PatternRule(re.compile(r"->"), " to "),
    PatternRule(re.compile(r"=>"), " maps to "),
    # Comparison operators, longest first
    PatternRule(re.compile(r"!=="), " is not strictly equal to "),
    PatternRule(re.compile(r"==="), " is strictly equal to "),
    PatternRule(re.compile(r"!="), " is not equal to "),
    PatternRule(re.compile(r"=="), " equals "),
    PatternRule(re.compile(r"<="), " less than or equal to "),
    PatternRule(re.compile(r">="), " greater than or equal to "),
    # Hashtags and mentions
    # Example: "#release @alice" -> "hashtag release at alice"
    PatternRule(re.compile(r"#(\w+)"), r"hashtag \1"),
    PatternRule(re.compile(r"@(\w+)"), r"at \1"),
)

# Whole-word template for abbreviation keys. Lookarounds instead of \b so that keys ending in
# punctuation ("e.g.", "vs.") still match, while "html5" or "xhtml" never match "html".
ABBREVIATION_TEMPLATE: Final[str] = r"(?<!\w){key}(?!\w)"

# Numbers with a storage unit suffix
# Examples: "5GB", "512 mb"
UNIT_NUMBER_PATTERN: Final[Pattern[str]] = re.compile(r"(\d+)\s*(GB|MB|KB|TB)\b", re.IGNORECASE)

# Gender token in a raw voice name, optionally followed by a number
# Examples: "en-us-x-sfg#female_2-local", "Male3"
GENDER_TOKEN_PATTERN: Final[Pattern[str]] = re.compile(
    r"(?P<gender>female|male)(?:[_\s-]?(?P<number>\d+))?", re.IGNORECASE
)

# Separators used to split raw voice names into candidate tokens
VOICE_NAME_SEPARATOR_PATTERN: Final[Pattern[str]] = re.compile(r"[-#_]")

# Document context names accepted in the configuration file
CONFIG_CONTEXT_PATTERN: Final[Pattern[str]] = re.compile(r"^(?:auto|technical|medical|general)$", re.IGNORECASE)
