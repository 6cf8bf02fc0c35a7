"""
Tests for ChunkPlanner.

These tests verify:
1. Sections tile the source exactly (no gaps, no overlap, no stripping)
2. Every section respects the size bound when a break exists
3. Break preference: paragraph, then sentence, then word, then hard cut
4. Short and empty documents are not split
"""

import pytest

from boothdocs.analysis.chunker import ChunkPlanner
from boothdocs.analysis.errors import PlannerError
from boothdocs.analysis.types import Chunk, ChunkPlan


class TestCompleteness:
    """Concatenating the sections gives back the source."""

    def test_reassemble_matches_source(self, make_document):
        text = make_document(900)
        plan = ChunkPlanner(max_chunk_chars=20000).plan(text)

        assert plan.reassemble() == text
        assert plan.source_length == len(text)

    def test_offsets_are_contiguous(self, make_document):
        text = make_document(900)
        plan = ChunkPlanner(max_chunk_chars=20000).plan(text)

        assert plan.chunks[0].start == 0
        for previous, current in zip(plan.chunks, plan.chunks[1:]):
            assert current.start == previous.end
        assert plan.chunks[-1].end == len(text)

    def test_chunk_text_matches_offsets(self, make_document):
        text = make_document(350)
        plan = ChunkPlanner(max_chunk_chars=9000).plan(text)

        for chunk in plan.chunks:
            assert chunk.text == text[chunk.start:chunk.end]
            assert len(chunk) == len(chunk.text)

    def test_indices_are_sequential(self, make_document):
        plan = ChunkPlanner(max_chunk_chars=20000).plan(make_document(900))

        assert [c.index for c in plan.chunks] == list(range(plan.total))
        assert [c.number for c in plan.chunks] == list(range(1, plan.total + 1))


class TestParagraphDocument:
    """A 90,000-character manual of short paragraphs."""

    def test_five_sections_at_twenty_thousand(self, make_document):
        text = make_document(900)
        assert len(text) == 90000

        plan = ChunkPlanner(max_chunk_chars=20000).plan(text)

        assert plan.total == 5
        assert [len(c) for c in plan.chunks] == [20000, 20000, 20000, 20000, 10000]

    def test_sections_end_on_paragraph_breaks(self, make_document):
        plan = ChunkPlanner(max_chunk_chars=20000).plan(make_document(900))

        for chunk in plan.chunks:
            assert chunk.text.endswith("\n\n")

    def test_every_section_within_bound(self, make_document):
        bound = 7300
        plan = ChunkPlanner(max_chunk_chars=bound).plan(make_document(900))

        assert plan.total > 1
        assert all(len(c) <= bound for c in plan.chunks)

    def test_plan_is_deterministic(self, make_document):
        text = make_document(900)
        planner = ChunkPlanner(max_chunk_chars=12345)

        assert planner.plan(text) == planner.plan(text)


class TestShortDocuments:
    """Documents that fit in one section."""

    def test_empty_text_has_no_chunks(self):
        plan = ChunkPlanner().plan("")

        assert plan.total == 0
        assert plan.chunks == ()
        assert not plan.is_chunked

    def test_text_at_bound_is_one_chunk(self):
        text = "a" * 1000
        plan = ChunkPlanner(max_chunk_chars=1000).plan(text)

        assert plan.total == 1
        assert plan.chunks[0] == Chunk(index=0, start=0, end=1000, text=text)
        assert not plan.is_chunked

    def test_single_plan_helper(self):
        assert ChunkPlan.single("").total == 0
        assert ChunkPlan.single("abc").reassemble() == "abc"


class TestBreakPreference:
    """Which boundary ends a section."""

    def test_paragraph_preferred_over_later_sentence(self):
        # Paragraph break at 752 is inside the window [700, 1000]
        text = "A" * 750 + "\n\n" + "Short one. " * 40
        plan = ChunkPlanner(max_chunk_chars=1000, lookback_fraction=0.3).plan(text)

        assert plan.chunks[0].end == 752
        assert plan.reassemble() == text

    def test_paragraph_outside_window_ignored(self):
        text = "A" * 100 + "\n\n" + "Short one. " * 100
        plan = ChunkPlanner(max_chunk_chars=1000, lookback_fraction=0.3).plan(text)

        first = plan.chunks[0]
        assert first.end > 700
        assert first.text.endswith(". ")

    def test_sentence_break_when_no_paragraphs(self):
        text = "All booths must pass fire inspection. " * 100
        plan = ChunkPlanner(max_chunk_chars=1000).plan(text)

        assert plan.total > 1
        for chunk in plan.chunks[:-1]:
            assert chunk.text.endswith(". ")
            assert len(chunk) <= 1000
        assert plan.reassemble() == text

    def test_sentence_break_after_closing_quote(self):
        text = ('He said "Bring your badge." ' * 60)
        plan = ChunkPlanner(max_chunk_chars=500).plan(text)

        for chunk in plan.chunks[:-1]:
            assert chunk.text.endswith('." ')

    def test_word_break_when_no_sentences(self):
        text = "freight " * 400
        plan = ChunkPlanner(max_chunk_chars=1000).plan(text)

        for chunk in plan.chunks[:-1]:
            assert chunk.text.endswith(" ")
            assert len(chunk) <= 1000
        assert plan.reassemble() == text

    def test_hard_cut_without_whitespace(self):
        text = "x" * 2500
        plan = ChunkPlanner(max_chunk_chars=1000).plan(text)

        assert [len(c) for c in plan.chunks] == [1000, 1000, 500]
        assert plan.reassemble() == text

    def test_oversized_unit_kept_whole_without_hard_cut(self):
        text = "x" * 1500 + ". " + "y" * 10
        plan = ChunkPlanner(max_chunk_chars=1000, hard_cut=False).plan(text)

        assert plan.total == 2
        assert plan.chunks[0].end == 1502
        assert plan.chunks[1].text == "y" * 10


class TestPlannerArguments:
    """Constructor validation."""

    @pytest.mark.parametrize("bound", [0, -5])
    def test_rejects_non_positive_bound(self, bound):
        with pytest.raises(ValueError):
            ChunkPlanner(max_chunk_chars=bound)

    @pytest.mark.parametrize("fraction", [0, 1.5])
    def test_rejects_bad_lookback(self, fraction):
        with pytest.raises(ValueError):
            ChunkPlanner(lookback_fraction=fraction)

    def test_verify_rejects_gap(self):
        planner = ChunkPlanner(max_chunk_chars=10)
        broken = ChunkPlan(
            chunks=(Chunk(0, 0, 5, "aaaaa"), Chunk(1, 6, 10, "aaaa")),
            source_length=10,
        )

        with pytest.raises(PlannerError):
            planner._verify(broken, "a" * 10)
