"""
HTML Chunker - mode dispatch for the chunking engine

Takes HTML produced by the ingestion pipeline and returns sentence-aligned,
overlapping, heading-annotated chunks.

Algorithm:
1. Parse the HTML into block elements (headings, paragraphs, lists, tables).
2. Find section boundaries:
   - structured: real <h1>-<h6> tags drive a heading stack
   - flat: short / ALL CAPS paragraphs are detected as headings
3. Feed each element's text through the ChunkAccumulator, flushing at every
   section boundary and once more at the end of input.

Usage:
    from html_chunking import DocumentChunker, html_type_from_mime

    mode = html_type_from_mime(source.mime_type)
    chunks = DocumentChunker().chunk(source.id, source.title, source.html, mode)
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from .accumulator import ChunkAccumulator
from .exceptions import InvalidModeError, SourceNotFoundError
from .heading_detector import detect_sections
from .html_parser import BlockElement, parse_block_elements
from .models import (
    Chunk,
    ChunkingConfig,
    ChunkingResult,
    ChunkingStats,
    ChunkMode,
)

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
UNTITLED_SOURCE = "Untitled source"

ChunkingOptions = Union[ChunkingConfig, Mapping[str, Any], None]


def html_type_from_mime(mime_type: Optional[str]) -> ChunkMode:
    """
    Determine the chunking mode from a source's MIME type.

    PDF conversion produces flat <p>-only HTML; every other converter
    (DOCX, Markdown, plain text, Google Docs) keeps real headings.
    """
    base_type = (mime_type or "").split(";", 1)[0].strip().lower()
    if base_type == PDF_MIME_TYPE:
        return ChunkMode.FLAT
    return ChunkMode.STRUCTURED


def resolve_mode(mode: Union[ChunkMode, str]) -> ChunkMode:
    """Validate a caller-supplied mode, raising InvalidModeError if unknown."""
    try:
        return ChunkMode(mode)
    except ValueError:
        raise InvalidModeError(mode) from None


def resolve_config(options: ChunkingOptions = None) -> ChunkingConfig:
    """Merge option overrides over the default configuration."""
    if options is None:
        return ChunkingConfig()
    if isinstance(options, ChunkingConfig):
        return options
    overrides = {k: v for k, v in options.items() if v is not None}
    return ChunkingConfig(**overrides)


# -------------------------------------------------------------------------
# Mode implementations
# -------------------------------------------------------------------------

def _run_structured(
    source_id: str,
    source_title: str,
    elements: list[BlockElement],
    config: ChunkingConfig,
) -> ChunkAccumulator:
    heading_stack: list[tuple[int, str]] = []

    def heading_chain() -> list[str]:
        # Content before the first heading sits under the source title.
        if not heading_stack:
            return [source_title or UNTITLED_SOURCE]
        return [text for _, text in heading_stack]

    accumulator = ChunkAccumulator(source_id, source_title, heading_chain, config)

    offset = 0
    for element in elements:
        if element.is_heading:
            accumulator.flush_at_boundary(offset)
            level = element.heading_level
            while heading_stack and heading_stack[-1][0] >= level:
                heading_stack.pop()
            heading_stack.append((level, element.text))
        else:
            accumulator.add_element(element.text, offset)
        offset += len(element.content)

    accumulator.flush_at_boundary(offset)
    return accumulator


def _run_flat(
    source_id: str,
    source_title: str,
    elements: list[BlockElement],
    config: ChunkingConfig,
) -> ChunkAccumulator:
    sections = detect_sections(elements)
    current_chain: list[str] = []

    accumulator = ChunkAccumulator(
        source_id, source_title, lambda: list(current_chain), config
    )

    # Offsets are not tracked in flat mode. The pending text belongs to the
    # previous section, so flush before switching the chain.
    for section in sections:
        accumulator.flush_at_boundary(0)
        current_chain = [section.label]
        for element in section.elements:
            accumulator.add_element(element.text, 0)

    accumulator.flush_at_boundary(0)
    return accumulator


_RUNNERS = {
    ChunkMode.STRUCTURED: _run_structured,
    ChunkMode.FLAT: _run_flat,
}


def chunk_structured_html(
    source_id: str,
    source_title: str,
    html: str,
    options: ChunkingOptions = None,
) -> list[Chunk]:
    """Chunk HTML whose heading tags define the section hierarchy."""
    elements = parse_block_elements(html)
    return _run_structured(source_id, source_title, elements, resolve_config(options)).chunks


def chunk_flat_html(
    source_id: str,
    source_title: str,
    html: str,
    options: ChunkingOptions = None,
) -> list[Chunk]:
    """Chunk <p>-only HTML using heuristic heading detection."""
    elements = parse_block_elements(html)
    return _run_flat(source_id, source_title, elements, resolve_config(options)).chunks


def chunk_html(
    source_id: str,
    source_title: str,
    html: str,
    mode: Union[ChunkMode, str],
    options: ChunkingOptions = None,
) -> list[Chunk]:
    """
    Chunk HTML in the given mode.

    Args:
        source_id: Source material ID (opaque)
        source_title: Human-readable source title
        html: HTML content of the source
        mode: "structured" for DOCX/MD, "flat" for PDF
        options: ChunkingConfig or a mapping of overrides

    Returns:
        Chunks in emission order.

    Raises:
        InvalidModeError: If mode is not "structured" or "flat".
    """
    return DocumentChunker(resolve_config(options)).chunk(
        source_id, source_title, html, mode
    )


class DocumentChunker:
    """
    Splits source HTML into overlapping, sentence-aligned chunks carrying
    their heading chain.
    """

    def __init__(self, config: Optional[ChunkingConfig] = None):
        self.config = config or ChunkingConfig()

    def chunk(
        self,
        source_id: str,
        source_title: str,
        html: str,
        mode: Union[ChunkMode, str],
    ) -> list[Chunk]:
        """Chunk one source and return the chunk list."""
        return self._run(source_id, source_title, html, mode)[1].chunks

    def chunk_document(
        self,
        source_id: str,
        source_title: str,
        html: str,
        mode: Union[ChunkMode, str],
    ) -> ChunkingResult:
        """
        Chunk one source and return chunks together with statistics.

        Returns:
            ChunkingResult with all chunks and statistics.
        """
        resolved = resolve_mode(mode)
        elements, accumulator = self._run(source_id, source_title, html, resolved)
        chunks = accumulator.chunks

        if resolved is ChunkMode.FLAT:
            total_headings = sum(1 for s in detect_sections(elements) if s.heading)
        else:
            total_headings = sum(1 for e in elements if e.is_heading)

        stats = self._compute_stats(chunks, elements, accumulator, total_headings)
        logger.info(
            "Chunked %s (%s): %d elements -> %d chunks",
            source_id, resolved.value, len(elements), len(chunks),
        )

        return ChunkingResult(
            source_id=source_id,
            source_title=source_title,
            mode=resolved,
            config=self.config,
            chunks=chunks,
            stats=stats,
        )

    def chunk_from_file(
        self,
        html_path: str,
        mime_type: Optional[str] = None,
        source_title: Optional[str] = None,
    ) -> ChunkingResult:
        """
        Load an HTML file and chunk it.

        Args:
            html_path: Path to the converted HTML file.
            mime_type: MIME type of the original source (selects the mode).
            source_title: Display title; defaults to the file stem.

        Returns:
            ChunkingResult with all chunks.
        """
        path = Path(html_path)
        if not path.is_file():
            raise SourceNotFoundError(str(html_path))

        source_id = self._make_source_id(str(html_path))
        html = path.read_text(encoding="utf-8")
        return self.chunk_document(
            source_id,
            source_title or source_id,
            html,
            html_type_from_mime(mime_type),
        )

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _run(
        self,
        source_id: str,
        source_title: str,
        html: str,
        mode: Union[ChunkMode, str],
    ) -> tuple[list[BlockElement], ChunkAccumulator]:
        runner = _RUNNERS[resolve_mode(mode)]
        elements = parse_block_elements(html)
        return elements, runner(source_id, source_title, elements, self.config)

    def _make_source_id(self, source_file: str) -> str:
        """Generate a source ID from the file path."""
        normalized = source_file.replace("\\", "/")
        return Path(normalized).stem

    def _compute_stats(
        self,
        chunks: list[Chunk],
        elements: list[BlockElement],
        accumulator: ChunkAccumulator,
        total_headings: int,
    ) -> ChunkingStats:
        """Compute statistics about the chunking result."""
        if not chunks:
            return ChunkingStats(
                total_elements=len(elements),
                total_headings=total_headings,
            )

        word_counts = [c.word_count for c in chunks]
        return ChunkingStats(
            total_chunks=len(chunks),
            total_words=sum(word_counts),
            avg_chunk_words=sum(word_counts) / len(word_counts),
            min_chunk_words=min(word_counts),
            max_chunk_words=max(word_counts),
            total_elements=len(elements),
            total_headings=total_headings,
            total_sentences=accumulator.sentence_count,
            merged_fragments=accumulator.merge_count,
            word_count_distribution=word_count_distribution(word_counts),
        )


def word_count_distribution(word_counts: list[int]) -> dict[str, int]:
    """Bucket chunk word counts the way the chunk quality checks report them."""
    return {
        "under_50": sum(1 for w in word_counts if w < 50),
        "50_199": sum(1 for w in word_counts if 50 <= w < 200),
        "200_299": sum(1 for w in word_counts if 200 <= w < 300),
        "300_400": sum(1 for w in word_counts if 300 <= w <= 400),
        "over_400": sum(1 for w in word_counts if w > 400),
    }
