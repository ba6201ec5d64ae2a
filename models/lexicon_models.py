"""Lookup tables for speakable-text preprocessing.

Keys are lower case and matched case-insensitively as whole words. Every context-sensitive
entry defines a GENERAL expansion, which is the fallback for contexts it does not list.
"""

from __future__ import annotations

from typing import Final

from models.playback_models import DocumentContext

__all__: list[str] = [
    "CONTEXT_ABBREVIATIONS",
    "MEDICAL_INDICATORS",
    "MIN_CONTEXT_SCORE",
    "TECHNICAL_INDICATORS",
    "UNIVERSAL_ABBREVIATIONS",
]

# A context must reach this many distinct indicator hits to win
MIN_CONTEXT_SCORE: Final[int] = 2

TECHNICAL_INDICATORS: Final[frozenset[str]] = frozenset(
    {
        "function",
        "class",
        "method",
        "variable",
        "code",
        "programming",
        "algorithm",
        "database",
        "framework",
        "library",
        "repository",
        "neural network",
        "deep learning",
        "training",
        "model",
        "dataset",
        "tensorflow",
        "pytorch",
        "kubernetes",
        "docker",
        "android",
        "kotlin",
        "python",
        "javascript",
        "typescript",
        "rust",
        "java",
        "github",
    }
)

MEDICAL_INDICATORS: Final[frozenset[str]] = frozenset(
    {
        "patient",
        "diagnosis",
        "treatment",
        "medication",
        "dosage",
        "prescription",
        "symptom",
        "clinical",
        "hospital",
        "doctor",
        "surgery",
        "blood",
        "plasma",
        "injection",
        "therapy",
        "dose",
    }
)

CONTEXT_ABBREVIATIONS: Final[dict[str, dict[DocumentContext, str]]] = {
    "ml": {
        DocumentContext.TECHNICAL: "machine learning",
        DocumentContext.MEDICAL: "milliliter",
        DocumentContext.GENERAL: "machine learning",
    },
    "ai": {
        DocumentContext.TECHNICAL: "artificial intelligence",
        DocumentContext.MEDICAL: "artificial intelligence",
        DocumentContext.GENERAL: "A I",
    },
    "dl": {
        DocumentContext.TECHNICAL: "deep learning",
        DocumentContext.MEDICAL: "deciliter",
        DocumentContext.GENERAL: "deep learning",
    },
    "nn": {
        DocumentContext.GENERAL: "neural network",
    },
    "cv": {
        DocumentContext.TECHNICAL: "computer vision",
        DocumentContext.MEDICAL: "cardiovascular",
        DocumentContext.GENERAL: "C V",
    },
    "nlp": {
        DocumentContext.TECHNICAL: "natural language processing",
        DocumentContext.MEDICAL: "neuro linguistic programming",
        DocumentContext.GENERAL: "N L P",
    },
}

UNIVERSAL_ABBREVIATIONS: Final[dict[str, str]] = {
    # Tech acronyms, spelled out or given a conventional pronunciation
    "api": "A P I",
    "cpu": "C P U",
    "gpu": "G P U",
    "tpu": "T P U",
    "ram": "RAM",
    "rom": "ROM",
    "url": "U R L",
    "uri": "U R I",
    "html": "H T M L",
    "css": "C S S",
    "json": "jason",
    "xml": "X M L",
    "yaml": "yammel",
    "sql": "sequel",
    "nosql": "no sequel",
    "gui": "gooey",
    "cli": "C L I",
    "ide": "I D E",
    "sdk": "S D K",
    "jdk": "J D K",
    "jvm": "J V M",
    "llm": "L L M",
    "gpt": "G P T",
    "rag": "R A G",
    "pdf": "P D F",
    "md": "markdown",
    "tts": "text to speech",
    "stt": "speech to text",
    "ocr": "O C R",
    "iot": "I O T",
    "aws": "A W S",
    "gcp": "G C P",
    "sso": "S S O",
    "oauth": "O auth",
    "jwt": "J W T",
    "http": "H T T P",
    "https": "H T T P S",
    "ftp": "F T P",
    "ssh": "S S H",
    "tcp": "T C P",
    "udp": "U D P",
    "ip": "I P",
    "dns": "D N S",
    "vpn": "V P N",
    "ui": "U I",
    "ux": "U X",
    "cicd": "C I C D",
    "ci/cd": "C I C D",
    "devops": "dev ops",
    "saas": "sass",
    "paas": "pass",
    "iaas": "I ass",
    "mvvm": "M V V M",
    "mvc": "M V C",
    "grpc": "G R P C",
    "graphql": "graph Q L",
    "regex": "reg ex",
    "npm": "N P M",
    "nvm": "N V M",
    # Common shortcuts
    "e.g.": "for example",
    "i.e.": "that is",
    "etc.": "et cetera",
    "vs.": "versus",
    "vs": "versus",
    "w/o": "without",
    "w/": "with",
    "btw": "by the way",
    "fyi": "for your information",
    "asap": "as soon as possible",
    "eta": "E T A",
    "faq": "F A Q",
    "diy": "D I Y",
    "tldr": "T L D R",
    "tl;dr": "too long didn't read",
    # Units
    "kb": "kilobytes",
    "mb": "megabytes",
    "gb": "gigabytes",
    "tb": "terabytes",
    "pb": "petabytes",
    "kbps": "kilobits per second",
    "mbps": "megabits per second",
    "gbps": "gigabits per second",
    "ghz": "gigahertz",
    "mhz": "megahertz",
    "khz": "kilohertz",
    "hz": "hertz",
    "ms": "milliseconds",
    "ns": "nanoseconds",
    "px": "pixels",
    "dpi": "D P I",
    "fps": "frames per second",
    "mg": "milligram",
    "mcg": "microgram",
    "kg": "kilogram",
    "cm": "centimeter",
    "mm": "millimeter",
}
