"""
Chunk Planner for large-document analysis.

Splits normalized document text into ordered, non-overlapping sections
that each fit one backend request. Sections are cut by offset, so
concatenating them reproduces the source exactly.

Break preference within the lookback window before each size bound:
1. Paragraph boundary (blank line)
2. Sentence boundary (. ! ? followed by whitespace)
3. Word boundary (whitespace)
4. Hard character cut at the bound
"""

import re

from boothdocs.logging_config import debug_log

from .errors import PlannerError
from .types import Chunk, ChunkPlan

# Blank line, allowing trailing spaces/tabs on the empty line
_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")
# Sentence end, optional closing quote/bracket, then whitespace
_SENTENCE_BREAK = re.compile(r"[.!?][\"')\]]*\s+")
_WORD_BREAK = re.compile(r"\s+")


class ChunkPlanner:
    """
    Plans bounded sections for one document.

    Pure and deterministic: the same text and bound always give the same
    plan. Safe to share between concurrent analyses.

    Example:
        planner = ChunkPlanner(max_chunk_chars=30000)
        plan = planner.plan(text)
        for chunk in plan.chunks:
            print(chunk.number, len(chunk))
    """

    def __init__(
        self,
        max_chunk_chars: int = 30000,
        lookback_fraction: float = 0.3,
        hard_cut: bool = True,
    ):
        """
        Initialize the planner.

        Args:
            max_chunk_chars: Size bound per section
            lookback_fraction: Share of the bound searched backwards for a break
            hard_cut: If False, a unit with no break inside the window is
                emitted whole up to its next boundary instead of being cut
        """
        if max_chunk_chars <= 0:
            raise ValueError(f"max_chunk_chars must be positive, got {max_chunk_chars}")
        if not 0 < lookback_fraction <= 1:
            raise ValueError(f"lookback_fraction must be in (0, 1], got {lookback_fraction}")

        self.max_chunk_chars = max_chunk_chars
        self.lookback_chars = max(1, int(max_chunk_chars * lookback_fraction))
        self.hard_cut = hard_cut

    def plan(self, text: str) -> ChunkPlan:
        """
        Split text into sections.

        Args:
            text: Normalized document text

        Returns:
            ChunkPlan; empty for empty text, one section when the text fits
        """
        if len(text) <= self.max_chunk_chars:
            return ChunkPlan.single(text)

        chunks = []
        start = 0
        length = len(text)

        while start < length:
            end = self._find_end(text, start)
            chunks.append(Chunk(index=len(chunks), start=start, end=end, text=text[start:end]))
            start = end

        plan = ChunkPlan(chunks=tuple(chunks), source_length=length)
        self._verify(plan, text)

        sizes = [len(c) for c in chunks]
        debug_log(
            f"[ChunkPlanner] {length} chars -> {plan.total} chunks "
            f"(bound={self.max_chunk_chars}, min={min(sizes)}, max={max(sizes)})"
        )
        return plan

    def _find_end(self, text: str, start: int) -> int:
        """
        Pick the end offset of the section starting at start.

        Args:
            text: Full source text
            start: Offset where this section begins

        Returns:
            End offset, always greater than start
        """
        limit = start + self.max_chunk_chars
        if limit >= len(text):
            return len(text)

        window_start = max(start + 1, limit - self.lookback_chars)

        for pattern in (_PARAGRAPH_BREAK, _SENTENCE_BREAK, _WORD_BREAK):
            end = self._last_break(pattern, text, start, window_start, limit)
            if end is not None:
                return end

        if self.hard_cut:
            debug_log(f"[ChunkPlanner] No break near offset {limit}; hard cut")
            return limit

        return self._next_break(text, limit)

    def _last_break(
        self,
        pattern: re.Pattern,
        text: str,
        start: int,
        window_start: int,
        limit: int,
    ) -> int | None:
        """
        Offset just past the last match of pattern ending inside [window_start, limit].

        Args:
            pattern: Boundary pattern
            text: Full source text
            start: Offset where the current section begins
            window_start: Earliest acceptable end offset
            limit: Latest acceptable end offset (the size bound)

        Returns:
            End offset, or None if the window holds no such boundary
        """
        last = None
        for match in pattern.finditer(text, start, limit):
            if match.end() >= window_start:
                last = match.end()
        return last

    def _next_break(self, text: str, limit: int) -> int:
        """End of the oversized unit: the first boundary after the bound, or end of text."""
        for pattern in (_PARAGRAPH_BREAK, _SENTENCE_BREAK):
            match = pattern.search(text, limit)
            if match:
                debug_log(f"[ChunkPlanner] Oversized unit emitted whole up to offset {match.end()}")
                return match.end()
        return len(text)

    def _verify(self, plan: ChunkPlan, text: str) -> None:
        """
        Check that sections tile the source exactly.

        Raises:
            PlannerError: If offsets are not contiguous or text differs
        """
        expected_start = 0
        for chunk in plan.chunks:
            if chunk.start != expected_start or chunk.end <= chunk.start:
                raise PlannerError(
                    f"Chunk {chunk.index} spans {chunk.start}..{chunk.end}, expected start {expected_start}"
                )
            expected_start = chunk.end
        if expected_start != len(text):
            raise PlannerError(f"Plan covers {expected_start} of {len(text)} characters")
