"""Tests for html_chunking.chunker: mode dispatch and end-to-end chunking."""

import re
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

from html_chunking import (
    ChunkingConfig,
    ChunkMode,
    DocumentChunker,
    InvalidModeError,
    SourceNotFoundError,
    chunk_flat_html,
    chunk_html,
    chunk_structured_html,
    count_words,
    html_type_from_mime,
)

from conftest import make_sentences, wrap_in_paragraphs


# ---------------------------------------------------------------------------
# Mode selection
# ---------------------------------------------------------------------------

class TestHtmlTypeFromMime:
    def test_pdf_is_flat(self):
        assert html_type_from_mime("application/pdf") == "flat"

    def test_docx_is_structured(self):
        mime = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        assert html_type_from_mime(mime) == "structured"

    def test_text_types_are_structured(self):
        assert html_type_from_mime("text/plain") == "structured"
        assert html_type_from_mime("text/markdown") == "structured"

    def test_parameters_and_case_ignored(self):
        assert html_type_from_mime("Application/PDF; charset=binary") is ChunkMode.FLAT

    def test_missing_mime_is_structured(self):
        assert html_type_from_mime("") is ChunkMode.STRUCTURED
        assert html_type_from_mime(None) is ChunkMode.STRUCTURED


class TestChunkHtmlDispatch:
    def test_dispatches_to_structured(self):
        html = f"<h1>Title</h1><p>{make_sentences(5)}</p>"
        chunks = chunk_html("s1", "S1", html, "structured")
        assert chunks[0].heading_chain == ["Title"]

    def test_dispatches_to_flat(self):
        html = f"<p>ABSTRACT</p><p>{make_sentences(5)}</p>"
        chunks = chunk_html("s2", "S2", html, ChunkMode.FLAT)
        assert chunks[0].heading_chain == ["ABSTRACT"]

    def test_flat_mode_ignores_heading_tags(self):
        html = f"<h1>Real Heading</h1><p>{make_sentences(5)}</p>"
        chunks = chunk_html("s3", "S3", html, "flat")
        # "Real Heading" is short and followed by longer text.
        assert chunks[0].heading_chain == ["Real Heading"]

    @pytest.mark.parametrize("mode", ["markdown", "", None, "STRUCTURED"])
    def test_invalid_mode_raises(self, mode):
        with pytest.raises(InvalidModeError):
            chunk_html("s4", "S4", "<p>Text.</p>", mode)

    def test_invalid_mode_is_value_error(self):
        with pytest.raises(ValueError):
            chunk_html("s5", "S5", "", "pdf")

    def test_mapping_options(self):
        html = f"<p>{make_sentences(6)}</p>"
        chunks = chunk_html(
            "s6", "S6", html, "structured",
            {"target_words": 26, "max_words": 30, "min_words": 5, "overlap_sentences": None},
        )
        assert len(chunks) == 3

    def test_config_options(self):
        html = f"<p>{make_sentences(6)}</p>"
        config = ChunkingConfig(target_words=26, max_words=30, min_words=5, overlap_sentences=0)
        chunks = chunk_html("s7", "S7", html, "structured", config)
        assert [c.word_count for c in chunks] == [26, 26, 26]

    def test_partial_override_below_default_target(self):
        # max_words alone, under the default target of 300
        html = f"<p>{make_sentences(30)}</p>"
        chunks = chunk_html("s8", "S8", html, "structured", {"max_words": 200})

        assert len(chunks) == 2
        assert chunks[0].word_count == 195
        assert "number 15 " in chunks[0].text
        assert "number 16 " not in chunks[0].text

    def test_partial_override_below_default_min(self):
        # target and max under the default min of 50
        html = f"<p>{make_sentences(6)}</p>"
        chunks = chunk_html(
            "s9", "S9", html, "structured", {"target_words": 40, "max_words": 60}
        )

        assert len(chunks) == 1
        assert chunks[0].word_count == 78

    def test_unknown_option_key_rejected(self):
        html = f"<p>{make_sentences(6)}</p>"
        with pytest.raises(ValidationError):
            chunk_html("s10", "S10", html, "structured", {"targetWords": 200})


# ---------------------------------------------------------------------------
# Structured mode
# ---------------------------------------------------------------------------

class TestStructuredMode:
    def test_basic_chunks(self):
        html = f"""
          <h1>Introduction</h1>
          <p>{make_sentences(5)}</p>
          <h2>Background</h2>
          <p>{make_sentences(5)}</p>
        """
        chunks = chunk_structured_html("src-1", "Test Source", html)

        assert len(chunks) == 2
        for chunk in chunks:
            assert chunk.source_id == "src-1"
            assert chunk.source_title == "Test Source"
            assert chunk.word_count > 0

    def test_heading_hierarchy(self):
        html = f"<h1>Chapter 1</h1><h2>Section A</h2><p>{make_sentences(5)}</p>"
        chunks = chunk_structured_html("src-2", "Heading Test", html)
        assert chunks[0].heading_chain == ["Chapter 1", "Section A"]

    def test_heading_stack_pops_same_and_deeper_levels(self):
        html = f"""
          <h1>Part</h1>
          <h2>A</h2><p>{make_sentences(5)}</p>
          <h2>B</h2><p>{make_sentences(5, start=6)}</p>
          <h1>Next</h1><p>{make_sentences(5, start=11)}</p>
        """
        chunks = chunk_structured_html("src-3", "Stack", html)
        assert [c.heading_chain for c in chunks] == [["Part", "A"], ["Part", "B"], ["Next"]]

    def test_skipped_heading_level(self):
        html = f"""
          <h1>Book</h1><h3>Aside</h3><p>{make_sentences(5)}</p>
          <h2>Chapter</h2><p>{make_sentences(5, start=6)}</p>
        """
        chunks = chunk_structured_html("src-4", "Levels", html)
        assert [c.heading_chain for c in chunks] == [["Book", "Aside"], ["Book", "Chapter"]]

    def test_content_before_first_heading_uses_source_title(self):
        html = f"<p>{make_sentences(5)}</p><h1>Later</h1><p>{make_sentences(5, start=6)}</p>"
        chunks = chunk_structured_html("src-5", "My Notes", html)
        assert [c.heading_chain for c in chunks] == [["My Notes"], ["Later"]]

    def test_flushes_at_heading_boundaries(self):
        html = f"""
          <h1>Chapter 1</h1><p>{make_sentences(10)}</p>
          <h1>Chapter 2</h1><p>{make_sentences(10, start=11)}</p>
        """
        chunks = chunk_structured_html("src-6", "Boundary", html)
        assert len(chunks) == 2
        assert "number 10 " in chunks[0].html
        assert "number 11 " not in chunks[0].html
        assert chunks[1].heading_chain == ["Chapter 2"]

    def test_overlap_between_chunks(self):
        html = f"<h1>Title</h1><p>{make_sentences(60)}</p>"
        chunks = chunk_structured_html("src-7", "Overlap", html)

        assert len(chunks) == 3
        overlap = f"{make_sentences(1, start=23)} {make_sentences(1, start=24)}"
        assert chunks[1].text.startswith(overlap)
        assert "number 24 " not in chunks[1].html
        assert chunks[1].html.startswith("<p>This is sentence number 25 ")
        assert chunks[1].word_count == 338

    def test_small_fragment_merges_into_previous_chunk(self):
        html = f"""
          <h1>Title</h1>
          <p>{make_sentences(25)}</p>
          <h2>Short</h2>
          <p>Just a few words.</p>
        """
        chunks = chunk_structured_html("src-8", "Merge", html)

        assert len(chunks) == 1
        assert all("Short" not in c.heading_chain for c in chunks)
        assert chunks[0].text.endswith("Just a few words.")
        assert chunks[0].word_count == 25 * 13 + 4

    def test_lists_and_tables_are_chunked(self):
        html = """
          <h1>Data</h1>
          <ul><li>Parish registers</li><li>Census returns</li></ul>
          <table><tr><td>Year</td><td>1851</td></tr></table>
        """
        chunks = chunk_structured_html("src-9", "Lists", html)
        assert len(chunks) == 1
        assert chunks[0].text == "Parish registers Census returns Year 1851"

    def test_offsets_are_monotonic(self, structured_html):
        chunks = chunk_structured_html("src-10", "Offsets", structured_html)

        assert len(chunks) > 3
        for chunk in chunks:
            assert chunk.start_offset <= chunk.end_offset
        for prev, curr in zip(chunks, chunks[1:]):
            assert prev.start_offset <= curr.start_offset
            assert prev.end_offset <= curr.end_offset

    def test_empty_html(self):
        assert chunk_structured_html("src-11", "Empty", "") == []

    def test_no_block_elements(self):
        assert chunk_structured_html("src-12", "No Blocks", "<span>inline only</span>") == []

    def test_headings_only(self):
        assert chunk_structured_html("src-13", "Headings", "<h1>One</h1><h2>Two</h2>") == []


# ---------------------------------------------------------------------------
# Flat mode
# ---------------------------------------------------------------------------

class TestFlatMode:
    def test_produces_chunks(self):
        html = wrap_in_paragraphs([make_sentences(5) for _ in range(10)])
        chunks = chunk_flat_html("pdf-1", "PDF Source", html)

        assert len(chunks) > 0
        for chunk in chunks:
            assert chunk.source_id == "pdf-1"
            assert chunk.word_count > 0

    def test_detected_headings_label_their_own_sections(self, flat_html):
        chunks = chunk_flat_html("pdf-2", "Caps", flat_html)

        assert [c.heading_chain for c in chunks] == [["INTRODUCTION"], ["METHODOLOGY"]]
        assert "number 1 " in chunks[0].text
        assert "number 10 " in chunks[1].html

    def test_positional_fallback(self):
        html = wrap_in_paragraphs([make_sentences(5) for _ in range(5)])
        chunks = chunk_flat_html("pdf-3", "No Headings", html)

        assert len(chunks) > 0
        for chunk in chunks:
            assert len(chunk.heading_chain) == 1
            assert re.fullmatch(r"Section \d+ of \d+", chunk.heading_chain[0])

    def test_positional_label_for_leading_untitled_section(self):
        html = wrap_in_paragraphs([
            make_sentences(5),
            "RESULTS",
            make_sentences(5, start=6),
        ])
        chunks = chunk_flat_html("pdf-4", "Mixed", html)
        assert [c.heading_chain for c in chunks] == [["Section 1 of 2"], ["RESULTS"]]

    def test_offsets_are_zero(self, flat_html):
        chunks = chunk_flat_html("pdf-5", "Offsets", flat_html)
        assert all(c.start_offset == 0 and c.end_offset == 0 for c in chunks)

    def test_empty_html(self):
        assert chunk_flat_html("pdf-6", "Empty", "") == []

    def test_caseless_script_paragraphs_produce_chunks(self):
        html = (
            "<p>研究方法是本章的核心内容并且非常重要。</p>"
            "<p>我们在三个城市收集了大量的档案资料。</p>"
            "<p>结果表明区域报纸的覆盖面存在明显差异。</p>"
        )
        chunks = chunk_flat_html("pdf-7", "Caseless", html)

        assert len(chunks) == 1
        assert chunks[0].heading_chain == ["Section 1 of 1"]
        assert "档案资料" in chunks[0].text
        assert chunks[0].word_count == 3


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------

class TestChunkInvariants:
    @pytest.fixture(params=["structured", "flat"])
    def chunks(self, request, structured_html):
        return chunk_html("quality-test", "Quality Test Document", structured_html, request.param)

    def test_sequential_ids(self, chunks):
        assert len(chunks) > 1
        for i, chunk in enumerate(chunks):
            assert chunk.id == f"quality-test:{i}"

    def test_word_counts_consistent(self, chunks):
        for chunk in chunks:
            assert chunk.word_count == count_words(chunk.text)

    def test_no_empty_text(self, chunks):
        for chunk in chunks:
            assert chunk.text.strip()

    def test_heading_context(self, chunks):
        for chunk in chunks:
            assert len(chunk.heading_chain) >= 1

    def test_source_metadata(self, chunks):
        for chunk in chunks:
            assert chunk.source_id == "quality-test"
            assert chunk.source_title == "Quality Test Document"

    def test_max_words_near_respected(self):
        html = f"<p>{make_sentences(50)}</p>"
        chunks = chunk_structured_html("src-max", "Max Words", html, {"max_words": 400})
        for chunk in chunks:
            assert chunk.word_count <= 400 + 2 * 13

    def test_deterministic(self, structured_html):
        first = chunk_html("det", "Det", structured_html, "structured")
        second = chunk_html("det", "Det", structured_html, "structured")
        assert [c.to_dict() for c in first] == [c.to_dict() for c in second]

    def test_concurrent_calls_are_independent(self, structured_html, flat_html):
        jobs = [(f"src-{i}", html, mode) for i, (html, mode) in enumerate(
            [(structured_html, "structured"), (flat_html, "flat")] * 4
        )]
        expected = [chunk_html(sid, "T", html, mode) for sid, html, mode in jobs]

        with ThreadPoolExecutor(max_workers=4) as pool:
            actual = list(pool.map(lambda job: chunk_html(job[0], "T", job[1], job[2]), jobs))

        assert actual == expected


# ---------------------------------------------------------------------------
# DocumentChunker
# ---------------------------------------------------------------------------

class TestDocumentChunker:
    def test_chunk_returns_list(self, structured_html):
        chunks = DocumentChunker().chunk("doc", "Doc", structured_html, "structured")
        assert isinstance(chunks, list)
        assert chunks

    def test_chunk_document_stats(self):
        html = f"""
          <h1>Title</h1>
          <p>{make_sentences(25)}</p>
          <h2>Short</h2>
          <p>Just a few words.</p>
        """
        result = DocumentChunker().chunk_document("doc", "Doc", html, "structured")

        assert result.mode is ChunkMode.STRUCTURED
        assert result.total_chunks == 1
        assert result.stats.total_chunks == 1
        assert result.stats.total_elements == 4
        assert result.stats.total_headings == 2
        assert result.stats.total_sentences == 26
        assert result.stats.merged_fragments == 2
        assert result.stats.max_chunk_words == 329
        assert result.stats.word_count_distribution["300_400"] == 1

    def test_chunk_document_flat_headings(self, flat_html):
        result = DocumentChunker().chunk_document("doc", "Doc", flat_html, "flat")
        assert result.mode is ChunkMode.FLAT
        assert result.stats.total_headings == 2

    def test_chunk_document_empty(self):
        result = DocumentChunker().chunk_document("doc", "Doc", "", "flat")
        assert result.total_chunks == 0
        assert result.stats.total_chunks == 0

    def test_chunk_from_file(self, tmp_path, flat_html):
        path = tmp_path / "field_notes.html"
        path.write_text(flat_html, encoding="utf-8")

        result = DocumentChunker().chunk_from_file(str(path), "application/pdf")

        assert result.source_id == "field_notes"
        assert result.source_title == "field_notes"
        assert result.mode is ChunkMode.FLAT
        assert result.chunks[0].id == "field_notes:0"

    def test_chunk_from_file_with_title(self, tmp_path):
        path = tmp_path / "notes.html"
        path.write_text(f"<h1>Intro</h1><p>{make_sentences(5)}</p>", encoding="utf-8")

        result = DocumentChunker().chunk_from_file(str(path), source_title="Field Notes")

        assert result.mode is ChunkMode.STRUCTURED
        assert result.chunks[0].source_title == "Field Notes"

    def test_chunk_from_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFoundError) as exc_info:
            DocumentChunker().chunk_from_file(str(tmp_path / "missing.html"))
        assert isinstance(exc_info.value, FileNotFoundError)
