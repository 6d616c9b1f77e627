"""
English Sentence Splitter for the Chunking Engine

Regex-based sentence boundary detection for manuscript research material.
Protects common honorifics, initials, decimal numbers and Latin
abbreviations from triggering false splits, without requiring external NLP
libraries.

Design:
- Split at sentence-ending punctuation (.!?), optionally followed by a
  closing quote or bracket, then whitespace and an uppercase letter,
  opening quote or opening parenthesis
- Protected periods are swapped for a placeholder before splitting and
  restored afterwards

Usage:
    from html_chunking.sentence_splitter import split_sentences

    sentences = split_sentences("Dr. Smith went home. He was tired.")
    # ["Dr. Smith went home.", "He was tired."]
"""

import re
from typing import Optional

# Placeholder character used to protect dots from sentence splitting.
_DOT_PLACEHOLDER = "\x00"

# Titles and abbreviations that never end a sentence (case-sensitive).
ABBREVIATIONS = (
    "Dr", "Mr", "Mrs", "Ms", "Prof", "Jr", "Sr",
    "Inc", "Ltd", "Corp", "Co",
    "vs", "etc", "al", "ed", "vol",
    "Rev", "Gen", "Gov",
)

_ABBREV_PATTERN = re.compile(r"\b(?:" + "|".join(ABBREVIATIONS) + r")\.")

# Initials: "J. Smith"
_INITIAL_PATTERN = re.compile(r"\b[A-Z]\.")

# Decimal numbers and numbered items: "3.14", "Figure 2."
_DIGIT_PATTERN = re.compile(r"\d\.")

# Latin abbreviations and page references
_LATIN_PATTERN = re.compile(r"\b(?:e\.g\.|i\.e\.)")
_PAGE_PATTERN = re.compile(r"\bp\.\s")

# Boundary: .!? with an optional closing quote/bracket, whitespace, then a
# capital letter or an opening quote/parenthesis. Python lookbehinds must be
# fixed width, hence the two alternatives.
_BOUNDARY_PATTERN = re.compile(
    r"""(?:(?<=[.!?])|(?<=[.!?]["')\]]))\s+(?=[A-Z"(])"""
)


def _hide_dots(match: re.Match) -> str:
    return match.group().replace(".", _DOT_PLACEHOLDER)


def _protect_dots(text: str) -> str:
    """Replace dots in abbreviations and special patterns with placeholders."""
    for pattern in (
        _ABBREV_PATTERN,
        _INITIAL_PATTERN,
        _DIGIT_PATTERN,
        _LATIN_PATTERN,
        _PAGE_PATTERN,
    ):
        text = pattern.sub(_hide_dots, text)
    return text


def _restore_dots(text: str) -> str:
    """Restore placeholder characters back to dots."""
    return text.replace(_DOT_PLACEHOLDER, ".")


def split_sentences(text: Optional[str]) -> list[str]:
    """
    Split text into sentences at proper sentence boundaries.

    Args:
        text: Plain text (already stripped of HTML).

    Returns:
        List of sentence strings. Empty/whitespace input returns empty list.
        Each sentence is stripped of leading/trailing whitespace.
    """
    if not text or not text.strip():
        return []

    protected = _protect_dots(text)
    parts = _BOUNDARY_PATTERN.split(protected)

    sentences = []
    for part in parts:
        restored = _restore_dots(part).strip()
        if restored:
            sentences.append(restored)

    return sentences
