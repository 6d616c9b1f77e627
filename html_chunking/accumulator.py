"""
Chunk Accumulator - sentence-level core shared by both chunking modes.

Sentences are appended to a pending buffer until the target word count is
reached. A sentence that would push the buffer past max_words forces a flush
before it is added, so a chunk never splits a sentence. Flushed fragments
below min_words are folded into the previous chunk. The last
overlap_sentences sentences of every flush are prepended to the text of the
next emitted chunk.

The heading chain is not stored per sentence: the accumulator asks an
injected callable for the current chain each time it emits a chunk.
"""

import logging
from typing import Callable, Optional

from .html_parser import count_words
from .models import Chunk, ChunkingConfig
from .sentence_splitter import split_sentences

logger = logging.getLogger(__name__)

HeadingChainFn = Callable[[], list[str]]


class ChunkAccumulator:
    """
    Accumulates sentences into chunks respecting word limits.

    One instance per chunking call; it is not reused across sources.
    """

    def __init__(
        self,
        source_id: str,
        source_title: str,
        heading_chain_fn: HeadingChainFn,
        config: Optional[ChunkingConfig] = None,
    ):
        self.source_id = source_id
        self.source_title = source_title
        self.heading_chain_fn = heading_chain_fn
        self.config = config or ChunkingConfig()

        self._chunks: list[Chunk] = []
        self._pending: list[str] = []
        self._pending_words = 0
        self._overlap = ""
        self._start_offset = 0

        self.sentence_count = 0
        self.merge_count = 0

    @property
    def chunks(self) -> list[Chunk]:
        """All chunks emitted so far, in order."""
        return list(self._chunks)

    def get_chunks(self) -> list[Chunk]:
        return self.chunks

    def add_element(self, text: str, offset: int) -> None:
        """
        Add the sentences of one element's text.

        Args:
            text: Plain text of the element.
            offset: Approximate character offset of the element.
        """
        for sentence in split_sentences(text):
            sentence_words = count_words(sentence)
            self.sentence_count += 1

            if self._pending and self._pending_words + sentence_words > self.config.max_words:
                self._flush(offset)

            if not self._pending:
                self._start_offset = offset

            self._pending.append(sentence)
            self._pending_words += sentence_words

            if self._pending_words >= self.config.target_words:
                self._flush(offset)

    def flush_at_boundary(self, offset: int) -> None:
        """Force a flush at a section boundary or at the end of input."""
        self._flush(offset)

    def _flush(self, end_offset: int) -> None:
        if not self._pending:
            return

        raw_text = " ".join(self._pending)
        word_count = count_words(raw_text)

        if word_count < self.config.min_words and self._chunks:
            self._merge_into_previous(raw_text, end_offset)
        elif word_count > 0:
            self._emit(raw_text, end_offset)

        n = self.config.overlap_sentences
        self._overlap = " ".join(self._pending[-n:]) if n > 0 else ""

        self._pending = []
        self._pending_words = 0

    def _emit(self, raw_text: str, end_offset: int) -> None:
        text = f"{self._overlap} {raw_text}" if self._overlap else raw_text
        chunk = Chunk(
            id=f"{self.source_id}:{len(self._chunks)}",
            source_id=self.source_id,
            source_title=self.source_title,
            heading_chain=list(self.heading_chain_fn()),
            text=text,
            html=f"<p>{raw_text}</p>",
            word_count=count_words(text),
            start_offset=self._start_offset,
            end_offset=end_offset,
        )
        self._chunks.append(chunk)
        logger.debug(
            "Emitted chunk %s (%d words, heading chain %s)",
            chunk.id, chunk.word_count, chunk.heading_chain,
        )

    def _merge_into_previous(self, raw_text: str, end_offset: int) -> None:
        # Merged chunks may grow past max_words.
        prev = self._chunks[-1]
        text = f"{prev.text} {raw_text}"
        self._chunks[-1] = prev.model_copy(update={
            "text": text,
            "html": f"{prev.html} {raw_text}",
            "word_count": count_words(text),
            "end_offset": max(prev.end_offset, end_offset),
        })
        self.merge_count += 1
        logger.debug(
            "Merged %d-word fragment into chunk %s",
            count_words(raw_text), prev.id,
        )
