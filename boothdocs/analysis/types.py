"""
Data types for the document analysis pipeline.

All of these live only for the duration of one DocumentAnalyzer.analyze()
call; nothing here is persisted or shared between calls.

Key Types:
    AnalysisKind - Closed set of supported analyses
    AnalysisRequest - One call into the pipeline
    Chunk / ChunkPlan - Bounded sections of the source text
    PartialResult - Output (or failure) of analyzing one section
    ProgressEvent - (current, total, stage) notification
    AnalysisResult - Final output returned to the caller
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from queue import Queue
from typing import Callable, Union

from .errors import AnalysisFailure, InvalidRequestError


class AnalysisKind(Enum):
    """Analysis requested for a document."""

    EXTRACT_DEADLINES = "extract_deadlines"
    EXTRACT_REQUIREMENTS = "extract_requirements"
    SUMMARIZE = "summarize"
    CUSTOM = "custom"

    @property
    def is_extraction(self) -> bool:
        """Extraction kinds can fall back to concatenated section results."""
        return self in (AnalysisKind.EXTRACT_DEADLINES, AnalysisKind.EXTRACT_REQUIREMENTS)

    @classmethod
    def parse(cls, value: AnalysisKind | str) -> AnalysisKind:
        """Accept an enum member or its wire string ("extract_deadlines", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise InvalidRequestError(f"Unknown analysis type '{value}'. Expected one of: {valid}")


@dataclass(frozen=True)
class ProgressEvent:
    """
    One progress notification.

    Attributes:
        current: Completed steps (0 before the first section finishes)
        total: Number of sections in the plan
        stage: Human-readable label, e.g. "Analyzing section 2 of 5"
    """

    current: int
    total: int
    stage: str

    def __post_init__(self):
        if not 0 <= self.current <= self.total:
            raise ValueError(f"Progress current={self.current} outside 0..{self.total}")


# A progress sink is either a callback or a queue receiving ("progress", ProgressEvent)
ProgressSink = Union[Callable[[ProgressEvent], None], Queue]


@dataclass
class AnalysisRequest:
    """
    One call into the pipeline.

    Attributes:
        document_text: Already-extracted plain text of the document
        kind: Which analysis to run
        question: Free-form question; required when kind is CUSTOM
        on_progress: Optional progress sink (callable or Queue)
        cancel_event: Optional event checked between sections
    """

    document_text: str
    kind: AnalysisKind
    question: str | None = None
    on_progress: ProgressSink | None = None
    cancel_event: threading.Event | None = None

    def __post_init__(self):
        self.kind = AnalysisKind.parse(self.kind)

    def validate(self) -> None:
        """
        Reject malformed requests before any backend call.

        Raises:
            InvalidRequestError: If the text is not a string or a custom
                analysis has no question
        """
        if not isinstance(self.document_text, str):
            raise InvalidRequestError("Document text must be a string.")
        if self.kind is AnalysisKind.CUSTOM and not (self.question and self.question.strip()):
            raise InvalidRequestError("A question is required for custom analysis.")

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


@dataclass(frozen=True)
class Chunk:
    """
    One bounded section of the source text.

    Attributes:
        index: Zero-based position in the plan
        start: Offset of the first character in the source
        end: Offset one past the last character in the source
        text: source[start:end]
    """

    index: int
    start: int
    end: int
    text: str

    @property
    def number(self) -> int:
        """One-based section number used in prompts and progress labels."""
        return self.index + 1

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ChunkPlan:
    """
    Ordered, non-overlapping sections covering the whole source text.

    Attributes:
        chunks: Sections in source order
        source_length: Length of the text that was planned
    """

    chunks: tuple[Chunk, ...] = ()
    source_length: int = 0

    @classmethod
    def single(cls, text: str) -> ChunkPlan:
        """Plan for a document that needs no chunking."""
        if not text:
            return cls(chunks=(), source_length=0)
        return cls(chunks=(Chunk(index=0, start=0, end=len(text), text=text),), source_length=len(text))

    @property
    def total(self) -> int:
        return len(self.chunks)

    @property
    def is_chunked(self) -> bool:
        return self.total > 1

    def reassemble(self) -> str:
        """Concatenate the sections back into the source text."""
        return "".join(chunk.text for chunk in self.chunks)


@dataclass(frozen=True)
class PartialResult:
    """
    Output of analyzing one section.

    Exactly one of text/failure is set; a failed section is kept in the
    list with its failure instead of being dropped.

    Attributes:
        chunk_index: Index of the originating Chunk
        text: Backend output for the section
        failure: Final failure after retries
        attempts: Backend calls spent on this section
    """

    chunk_index: int
    text: str | None = None
    failure: AnalysisFailure | None = None
    attempts: int = 1

    def __post_init__(self):
        if (self.text is None) == (self.failure is None):
            raise ValueError("PartialResult needs exactly one of text or failure")

    @property
    def succeeded(self) -> bool:
        return self.failure is None


@dataclass
class AnalysisResult:
    """
    Final output of one analysis.

    Attributes:
        text: Result text returned to the caller
        kind: Analysis that was run
        chunk_count: Number of sections in the plan (1 when not chunked)
        failed_chunks: Sections that failed terminally
        method: "direct" (single call), "synthesized" (combining call),
            "concatenated" (combining call unavailable, sections joined),
            or "empty" (nothing to analyze)
        failures: Final failures of the failed sections, in section order
        timing: Milliseconds per phase
    """

    text: str
    kind: AnalysisKind
    chunk_count: int = 1
    failed_chunks: int = 0
    method: str = "direct"
    failures: list[AnalysisFailure] = field(default_factory=list)
    timing: dict = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return self.failed_chunks > 0

    @property
    def warning_message(self) -> str | None:
        """Note for the user when some sections are missing from the result."""
        if not self.is_partial:
            return None
        return (
            f"Note: {self.failed_chunks} of {self.chunk_count} document sections "
            f"could not be analyzed, so this result may be incomplete."
        )

    @property
    def total_time_ms(self) -> float:
        return sum(self.timing.values())

    def to_display_text(self) -> str:
        """Result text with the partial-failure note appended when needed."""
        note = self.warning_message
        if note is None:
            return self.text
        return f"{self.text}\n\n{note}"
