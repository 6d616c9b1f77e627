"""
Pytest fixtures for chunking tests.
"""

import pytest

from html_chunking import ChunkingConfig


def make_sentences(count: int, start: int = 1) -> str:
    """Generate count sentences of exactly 13 words each."""
    return " ".join(
        f"This is sentence number {i} with some additional words to fill the space."
        for i in range(start, start + count)
    )


def wrap_in_paragraphs(texts: list[str]) -> str:
    return "\n".join(f"<p>{t}</p>" for t in texts)


@pytest.fixture
def small_config():
    """Small budgets so a few 13-word sentences exercise every trigger."""
    return ChunkingConfig(target_words=30, max_words=35, min_words=10, overlap_sentences=1)


@pytest.fixture
def structured_html():
    """A realistic structured document with two heading levels."""
    return f"""
    <h1>Chapter 1: Introduction</h1>
    <p>{make_sentences(30)}</p>
    <h2>Background</h2>
    <p>{make_sentences(30, start=31)}</p>
    <h2>Literature Review</h2>
    <p>{make_sentences(30, start=61)}</p>
    <h1>Chapter 2: Methodology</h1>
    <p>{make_sentences(30, start=91)}</p>
    <h2>Research Design</h2>
    <ul><li>Interviews with archivists</li><li>Survey of regional newspapers</li></ul>
    <p>{make_sentences(30, start=121)}</p>
    """


@pytest.fixture
def flat_html():
    """PDF-derived HTML: only paragraphs, headings in ALL CAPS."""
    return wrap_in_paragraphs([
        "INTRODUCTION",
        make_sentences(5),
        "METHODOLOGY",
        make_sentences(5, start=6),
    ])
