"""
Heuristic heading detection for flat HTML.

PDF-derived HTML arrives as a run of <p> tags with no heading markup. A
paragraph is treated as a heading when it is short (< 10 words) and either
ALL CAPS, or lacks closing punctuation and is followed by a longer
paragraph.

Usage:
    from html_chunking.heading_detector import detect_sections
    from html_chunking.html_parser import parse_block_elements

    sections = detect_sections(parse_block_elements(html))
    for section in sections:
        print(section.label, len(section.elements))
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .html_parser import BlockElement

logger = logging.getLogger(__name__)

MAX_HEADING_WORDS = 10

_TERMINAL_PUNCTUATION = (".", "!", "?")


@dataclass
class DetectedSection:
    """A run of body elements under one (possibly inferred) heading."""
    heading: Optional[str]
    elements: list[BlockElement] = field(default_factory=list)
    position: int = 0
    total_sections: int = 0

    @property
    def label(self) -> str:
        """The heading, or a positional label when none was detected."""
        if self.heading:
            return self.heading
        return f"Section {self.position + 1} of {self.total_sections}"


def is_all_caps(text: str) -> bool:
    # Caseless scripts survive upper() unchanged, so require a cased letter.
    return text == text.upper() and text != text.lower()


def looks_like_heading(element: BlockElement, next_element: Optional[BlockElement]) -> bool:
    """Apply the short-line / ALL-CAPS / no-trailing-punctuation heuristics."""
    word_count = element.word_count
    if word_count >= MAX_HEADING_WORDS:
        return False

    if is_all_caps(element.text):
        return True

    ends_with_punctuation = element.text.strip().endswith(_TERMINAL_PUNCTUATION)
    next_is_longer = next_element is not None and next_element.word_count > word_count
    return not ends_with_punctuation and next_is_longer


def detect_sections(elements: Sequence[BlockElement]) -> list[DetectedSection]:
    """
    Group flat elements into sections using heuristic heading detection.

    A section is only recorded once it holds body content, so a heading
    directly followed by another heading is superseded by the later one.

    Args:
        elements: Parsed block elements in document order.

    Returns:
        Sections in document order, each with total_sections set to the
        final section count.
    """
    sections: list[DetectedSection] = []
    current_heading: Optional[str] = None
    current_elements: list[BlockElement] = []

    for i, element in enumerate(elements):
        next_element = elements[i + 1] if i + 1 < len(elements) else None

        if looks_like_heading(element, next_element):
            if current_elements:
                sections.append(DetectedSection(
                    heading=current_heading,
                    elements=current_elements,
                    position=len(sections),
                ))
            logger.debug("Detected heading %r", element.text)
            current_heading = element.text
            current_elements = []
        else:
            current_elements.append(element)

    if current_elements:
        sections.append(DetectedSection(
            heading=current_heading,
            elements=current_elements,
            position=len(sections),
        ))

    for section in sections:
        section.total_sections = len(sections)

    return sections
