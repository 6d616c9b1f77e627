"""
HTML Chunking - heading-aware, sentence-aligned chunking of source documents

Splits converted source HTML into bounded, overlapping chunks annotated with
their heading chain, for full-text indexing, embedding and prompt assembly.

Quick Start:
    from html_chunking import chunk_html, html_type_from_mime

    mode = html_type_from_mime("application/pdf")
    chunks = chunk_html("src-1", "Field Notes", html, mode)
    for chunk in chunks:
        print(chunk.id, " > ".join(chunk.heading_chain), chunk.word_count)
"""

__version__ = "1.0.0"

from .accumulator import ChunkAccumulator
from .chunker import (
    DocumentChunker,
    chunk_flat_html,
    chunk_html,
    chunk_structured_html,
    html_type_from_mime,
)
from .config import ChunkingServiceConfig
from .exceptions import ChunkingError, InvalidModeError, SourceNotFoundError
from .heading_detector import DetectedSection, detect_sections
from .html_parser import BlockElement, count_words, parse_block_elements, strip_html
from .models import (
    Chunk,
    ChunkingConfig,
    ChunkingResult,
    ChunkingStats,
    ChunkMode,
)
from .sentence_splitter import split_sentences
from .service import ChunkingService

__all__ = [
    "__version__",
    "ChunkAccumulator",
    "DocumentChunker",
    "chunk_flat_html",
    "chunk_html",
    "chunk_structured_html",
    "html_type_from_mime",
    "ChunkingService",
    "ChunkingServiceConfig",
    "ChunkingError",
    "InvalidModeError",
    "SourceNotFoundError",
    "DetectedSection",
    "detect_sections",
    "BlockElement",
    "count_words",
    "parse_block_elements",
    "strip_html",
    "Chunk",
    "ChunkingConfig",
    "ChunkingResult",
    "ChunkingStats",
    "ChunkMode",
    "split_sentences",
]
