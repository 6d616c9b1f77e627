"""
Lightweight HTML helpers for the chunking engine.

Block-level elements are found with a single non-greedy regex rather than a
real HTML parser. Upstream ingestion already sanitizes the HTML; anything
malformed or oddly nested simply fails to match and is skipped.

Usage:
    from html_chunking.html_parser import parse_block_elements, strip_html

    for element in parse_block_elements("<h1>Intro</h1><p>Hello.</p>"):
        print(element.tag, element.heading_level, element.text)
"""

import re
from dataclasses import dataclass

BLOCK_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "table", "ul", "ol", "blockquote")

_BLOCK_PATTERN = re.compile(
    r"<(h[1-6]|p|li|table|ul|ol|blockquote)(?:\s[^>]*)?>[\s\S]*?</\1>",
    re.IGNORECASE,
)
_TAG_PATTERN = re.compile(r"<[^>]+>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_HEADING_TAG_PATTERN = re.compile(r"^h[1-6]$")

# Only the entities emitted by the upstream converters are decoded.
_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
)


@dataclass(frozen=True)
class BlockElement:
    """A block-level HTML element reduced to its tag and plain text."""
    tag: str
    content: str
    text: str
    offset: int = 0

    @property
    def is_heading(self) -> bool:
        return bool(_HEADING_TAG_PATTERN.match(self.tag))

    @property
    def heading_level(self) -> int:
        return int(self.tag[1]) if self.is_heading else 0

    @property
    def word_count(self) -> int:
        return count_words(self.text)


def strip_html(html: str) -> str:
    """Strip HTML tags, decode basic entities and collapse whitespace."""
    if not html:
        return ""
    text = _TAG_PATTERN.sub(" ", html)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    if not text:
        return 0
    return len(text.split())


def parse_block_elements(html: str) -> list[BlockElement]:
    """
    Parse HTML into a sequence of block-level elements.

    Args:
        html: HTML fragment or document.

    Returns:
        Elements in document order. Elements without any text after
        stripping are discarded.
    """
    if not html:
        return []

    elements: list[BlockElement] = []
    for match in _BLOCK_PATTERN.finditer(html):
        content = match.group(0)
        text = strip_html(content)
        if not text:
            continue
        elements.append(BlockElement(
            tag=match.group(1).lower(),
            content=content,
            text=text,
            offset=match.start(),
        ))

    return elements
