"""Locale tags and their English display names.

Engines report locales in several spellings ("en-US", "en_us", "eng", b"\\x05en-us" from
espeak). LocaleInfo.parse() normalises them and produces labels in the form
"English (United States)".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

__all__: list[str] = ["LANGUAGE_NAMES", "REGION_NAMES", "LocaleInfo"]

LANGUAGE_NAMES: Final[dict[str, str]] = {
    "af": "Afrikaans",
    "ar": "Arabic",
    "bg": "Bulgarian",
    "bn": "Bangla",
    "ca": "Catalan",
    "cs": "Czech",
    "cy": "Welsh",
    "da": "Danish",
    "de": "German",
    "el": "Greek",
    "en": "English",
    "eo": "Esperanto",
    "es": "Spanish",
    "et": "Estonian",
    "fa": "Persian",
    "fi": "Finnish",
    "fil": "Filipino",
    "fr": "French",
    "ga": "Irish",
    "gu": "Gujarati",
    "he": "Hebrew",
    "hi": "Hindi",
    "hr": "Croatian",
    "hu": "Hungarian",
    "id": "Indonesian",
    "is": "Icelandic",
    "it": "Italian",
    "ja": "Japanese",
    "jv": "Javanese",
    "km": "Khmer",
    "kn": "Kannada",
    "ko": "Korean",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "ml": "Malayalam",
    "mr": "Marathi",
    "ms": "Malay",
    "nb": "Norwegian Bokmål",
    "ne": "Nepali",
    "nl": "Dutch",
    "no": "Norwegian",
    "pa": "Punjabi",
    "pl": "Polish",
    "pt": "Portuguese",
    "ro": "Romanian",
    "ru": "Russian",
    "si": "Sinhala",
    "sk": "Slovak",
    "sl": "Slovenian",
    "sq": "Albanian",
    "sr": "Serbian",
    "su": "Sundanese",
    "sv": "Swedish",
    "sw": "Swahili",
    "ta": "Tamil",
    "te": "Telugu",
    "th": "Thai",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "ur": "Urdu",
    "vi": "Vietnamese",
    "yue": "Cantonese",
    "zh": "Chinese",
}

# ISO 639-2 codes some engines report instead of two-letter codes
_THREE_LETTER_LANGUAGES: Final[dict[str, str]] = {
    "ara": "ar",
    "deu": "de",
    "ger": "de",
    "eng": "en",
    "spa": "es",
    "fra": "fr",
    "fre": "fr",
    "hin": "hi",
    "ita": "it",
    "jpn": "ja",
    "kor": "ko",
    "nld": "nl",
    "dut": "nl",
    "pol": "pl",
    "por": "pt",
    "rus": "ru",
    "swe": "sv",
    "tur": "tr",
    "zho": "zh",
    "chi": "zh",
}

REGION_NAMES: Final[dict[str, str]] = {
    "AR": "Argentina",
    "AT": "Austria",
    "AU": "Australia",
    "BD": "Bangladesh",
    "BE": "Belgium",
    "BR": "Brazil",
    "CA": "Canada",
    "CH": "Switzerland",
    "CN": "China",
    "CO": "Colombia",
    "CZ": "Czechia",
    "DE": "Germany",
    "DK": "Denmark",
    "EG": "Egypt",
    "ES": "Spain",
    "FI": "Finland",
    "FR": "France",
    "GB": "United Kingdom",
    "GR": "Greece",
    "HK": "Hong Kong",
    "HU": "Hungary",
    "ID": "Indonesia",
    "IE": "Ireland",
    "IL": "Israel",
    "IN": "India",
    "IT": "Italy",
    "JP": "Japan",
    "KR": "South Korea",
    "MX": "Mexico",
    "MY": "Malaysia",
    "NG": "Nigeria",
    "NL": "Netherlands",
    "NO": "Norway",
    "NZ": "New Zealand",
    "PH": "Philippines",
    "PK": "Pakistan",
    "PL": "Poland",
    "PT": "Portugal",
    "RO": "Romania",
    "RU": "Russia",
    "SA": "Saudi Arabia",
    "SE": "Sweden",
    "SG": "Singapore",
    "TH": "Thailand",
    "TR": "Turkey",
    "TW": "Taiwan",
    "UA": "Ukraine",
    "US": "United States",
    "VN": "Vietnam",
    "ZA": "South Africa",
}

# Leading bytes/whitespace (espeak prefixes a priority byte), then language and optional region
_LOCALE_TAG_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[^A-Za-z]*(?P<language>[A-Za-z]{2,3})(?![A-Za-z])(?:[-_](?P<region>[A-Za-z]{2}|\d{3})(?![A-Za-z0-9]))?"
)


@dataclass(frozen=True)
class LocaleInfo:
    """A parsed locale.

    Attributes:
        language (str): Lower-case language code, "" if unknown.
        country (str): Upper-case region code, "" if absent.
    """

    language: str = ""
    country: str = ""

    @classmethod
    def parse(cls, tag: str | bytes | None) -> LocaleInfo:
        """Parse a locale tag leniently; unparseable input yields an empty LocaleInfo."""
        if tag is None:
            return cls()
        if isinstance(tag, bytes):
            tag = tag.decode("utf-8", errors="ignore")
        match: re.Match[str] | None = _LOCALE_TAG_PATTERN.match(tag.strip())
        if match is None:
            return cls()
        language: str = match.group("language").lower()
        language = _THREE_LETTER_LANGUAGES.get(language, language)
        region: str = (match.group("region") or "").upper()
        return cls(language=language, country=region)

    @property
    def display_language(self) -> str:
        """Language name, e.g. "English"; the bare code when the language is not tabulated."""
        if not self.language:
            return "Unknown"
        return LANGUAGE_NAMES.get(self.language, self.language)

    @property
    def display_name(self) -> str:
        """Language with region, e.g. "English (United States)"."""
        if not self.country:
            return self.display_language
        return f"{self.display_language} ({REGION_NAMES.get(self.country, self.country)})"
