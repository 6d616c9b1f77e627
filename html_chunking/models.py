"""
Data Models for the Chunking Engine

Defines:
1. ChunkMode - structured (real headings) vs. flat (PDF-derived) HTML
2. ChunkingConfig - word budgets and sentence overlap
3. Chunk - a single heading-annotated text chunk
4. ChunkingStats / ChunkingResult - chunking output with statistics

Design Principles:
- Pydantic v2 for validation and serialization
- Chunks are frozen: they are never mutated after being returned
- Save/load pattern for offline inspection of chunking runs

Usage:
    config = ChunkingConfig(target_words=200, max_words=300)
    result = DocumentChunker(config).chunk_document("src-1", "Notes", html, "structured")
    result.save("chunks.json")
"""

import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChunkMode(str, Enum):
    """How section boundaries are found in the source HTML."""
    STRUCTURED = "structured"
    FLAT = "flat"


class ChunkingConfig(BaseModel):
    """
    Configuration for the chunking engine.

    300 target words keeps a chunk inside a 512-token embedding budget with
    margin; 400 is the hard ceiling that forces a flush before a sentence is
    added; fragments under 50 words are folded into the previous chunk; two
    sentences of overlap carry context across chunk boundaries.
    """
    model_config = ConfigDict(extra="forbid")

    target_words: int = Field(
        300,
        description="Flush once a chunk reaches this many words",
        ge=1,
    )
    max_words: int = Field(
        400,
        description="Flush before adding a sentence that would exceed this",
        ge=1,
    )
    min_words: int = Field(
        50,
        description="Fragments below this are merged into the previous chunk",
        ge=0,
    )
    overlap_sentences: int = Field(
        2,
        description="Trailing sentences carried into the next chunk's text",
        ge=0,
    )


class Chunk(BaseModel):
    """
    A bounded, heading-annotated excerpt of a source document.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Composite key (format: {source_id}:{index})",
    )
    source_id: str = Field(
        ...,
        description="Identifier of the originating source",
    )
    source_title: str = Field(
        ...,
        description="Display title of the source",
    )
    heading_chain: list[str] = Field(
        default_factory=list,
        description="Section path active when the chunk began, outermost first",
    )
    text: str = Field(
        ...,
        description="Plain text, including overlap from the previous chunk",
        min_length=1,
    )
    html: str = Field(
        ...,
        description="HTML fragment of the chunk's own content (no overlap)",
    )
    word_count: int = Field(
        ...,
        description="Word count of text",
        ge=1,
    )
    start_offset: int = Field(
        0,
        description="Approximate character offset in the source HTML",
        ge=0,
    )
    end_offset: int = Field(
        0,
        description="Approximate character offset in the source HTML",
        ge=0,
    )

    @property
    def index(self) -> int:
        return int(self.id.rsplit(":", 1)[1])

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ChunkingStats(BaseModel):
    """Statistics about a chunking run."""
    total_chunks: int = 0
    total_words: int = 0
    avg_chunk_words: float = 0.0
    min_chunk_words: int = 0
    max_chunk_words: int = 0
    total_elements: int = 0
    total_headings: int = 0
    total_sentences: int = 0
    merged_fragments: int = 0
    word_count_distribution: dict[str, int] = Field(default_factory=dict)


class ChunkingResult(BaseModel):
    """
    Complete result of chunking one source.

    Ready for downstream indexing and embedding.
    """
    source_id: str = Field(
        ...,
        description="Identifier of the originating source",
    )
    source_title: str = Field(
        ...,
        description="Display title of the source",
    )
    mode: ChunkMode = Field(
        ...,
        description="Mode used to find section boundaries",
    )
    config: ChunkingConfig = Field(
        ...,
        description="Configuration used for chunking",
    )
    chunks: list[Chunk] = Field(
        default_factory=list,
        description="All chunks in emission order",
    )
    stats: ChunkingStats = Field(
        default_factory=ChunkingStats,
        description="Chunking statistics",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When chunking was performed",
    )

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    def get_chunk_by_id(self, chunk_id: str) -> Optional[Chunk]:
        """Find a chunk by its ID."""
        for chunk in self.chunks:
            if chunk.id == chunk_id:
                return chunk
        return None

    def get_neighbors(self, chunk_id: str) -> tuple[Optional[Chunk], Optional[Chunk]]:
        """Get the previous and next chunks for context expansion."""
        chunk = self.get_chunk_by_id(chunk_id)
        if not chunk:
            return None, None
        i = chunk.index
        prev_chunk = self.chunks[i - 1] if i > 0 else None
        next_chunk = self.chunks[i + 1] if i + 1 < len(self.chunks) else None
        return prev_chunk, next_chunk

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save chunking result to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "ChunkingResult":
        """Load chunking result from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)
