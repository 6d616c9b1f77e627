"""Quality checks for chunking output."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Sequence, Union

from .chunker import resolve_mode, word_count_distribution
from .models import Chunk, ChunkingConfig, ChunkMode
from .token_counter import DEFAULT_ENCODING, EMBEDDING_TOKEN_LIMIT, count_tokens_batch

# Allowance on top of max_words for overlap and merged fragments.
OVERLAP_TOLERANCE_WORDS = 50

_SENTENCE_END = re.compile(r"""[.!?]["')\]]?\s*$""")
_CLOSING_PAREN = re.compile(r"\)\s*$")
_TRAILING_WORD = re.compile(r"\b\w+\s*$")


@dataclass
class QualityReport:
    chunk_count: int = 0
    clean_boundaries: bool = True
    heading_coverage: float = 0.0
    heading_context_preserved: bool = False
    min_word_count: int = 0
    max_word_count: int = 0
    avg_word_count: int = 0
    max_token_count: int = 0
    within_max_words: bool = True
    within_token_limit: bool = True
    over_token_limit: list[str] = field(default_factory=list)
    no_empty_chunks: bool = True
    word_count_distribution: dict[str, int] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return (
            self.clean_boundaries
            and self.heading_context_preserved
            and self.within_max_words
            and self.no_empty_chunks
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["passed"] = self.passed
        return data


def has_clean_boundary(chunk: Chunk) -> bool:
    """True when the chunk ends at a sentence end, a citation or a section end."""
    text = chunk.text.strip()
    if _SENTENCE_END.search(text):
        return True
    if _CLOSING_PAREN.search(text):
        return True
    # List and table content flushed at a heading boundary has no final period.
    return bool(_TRAILING_WORD.search(text)) and len(chunk.heading_chain) > 0


def evaluate_chunks(
    chunks: Sequence[Chunk],
    mode: Union[ChunkMode, str],
    config: Optional[ChunkingConfig] = None,
    max_tokens: int = EMBEDDING_TOKEN_LIMIT,
    count_tokens: bool = True,
    encoding_name: str = DEFAULT_ENCODING,
) -> QualityReport:
    """
    Evaluate a chunk list against the chunking quality checks.

    Heading coverage must reach 90% for structured sources and 50% for
    flat ones. Token counts are only computed when count_tokens is set;
    chunks above max_tokens are listed by id in over_token_limit.
    """
    resolved = resolve_mode(mode)
    config = config or ChunkingConfig()

    non_empty = [c for c in chunks if c.word_count > 0 and c.text.strip()]
    report = QualityReport(
        chunk_count=len(non_empty),
        no_empty_chunks=len(non_empty) == len(chunks),
    )
    if not non_empty:
        return report

    word_counts = [c.word_count for c in non_empty]
    with_headings = sum(1 for c in non_empty if c.heading_chain)
    threshold = 0.9 if resolved is ChunkMode.STRUCTURED else 0.5

    report.clean_boundaries = all(has_clean_boundary(c) for c in non_empty)
    report.heading_coverage = with_headings / len(non_empty)
    report.heading_context_preserved = report.heading_coverage >= threshold
    report.min_word_count = min(word_counts)
    report.max_word_count = max(word_counts)
    report.avg_word_count = round(sum(word_counts) / len(word_counts))
    report.within_max_words = report.max_word_count <= config.max_words + OVERLAP_TOLERANCE_WORDS
    report.word_count_distribution = word_count_distribution(word_counts)

    if count_tokens:
        token_counts = count_tokens_batch([c.text for c in non_empty], encoding_name)
        report.max_token_count = max(token_counts)
        report.over_token_limit = [
            c.id for c, n in zip(non_empty, token_counts) if n > max_tokens
        ]
        report.within_token_limit = not report.over_token_limit

    return report
