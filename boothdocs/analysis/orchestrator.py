"""
Pipeline Orchestrator for document analysis.

Entry point for analyzing one document:

    PLANNING -> NO_CHUNKING_NEEDED -> REDUCING -> DONE
    PLANNING -> CHUNKING -> REDUCING -> DONE
    any state -> FAILED

1. PLAN: normalize text; chunk only above the size threshold
2. ANALYZE: one backend call per section, in order, each with its own
   retry budget; progress after every section
3. REDUCE: identity for one section, otherwise one combining call

Sections run one at a time, in order. Per-call state lives in local
variables, so one DocumentAnalyzer may serve concurrent calls.
"""

from enum import Enum
from typing import Callable

from boothdocs.config import AnalysisSettings
from boothdocs.logging_config import Timer, debug_log, error, info
from boothdocs.sanitization import TextNormalizer

from .chunker import ChunkPlanner
from .client import AnalysisClient, BackendCredentials
from .errors import AnalysisCancelledError, AnalysisError, BackendAuthError, FailureKind
from .progress import COMBINING_STAGE, PREPARING_STAGE, ProgressEmitter, section_stage
from .reducer import ResultReducer
from .retry import RetryController
from .types import AnalysisKind, AnalysisRequest, AnalysisResult, Chunk, ChunkPlan, PartialResult


class PipelineState(Enum):
    """Where one analysis currently is."""

    PLANNING = "planning"
    NO_CHUNKING_NEEDED = "no-chunking-needed"
    CHUNKING = "chunking"
    REDUCING = "reducing"
    DONE = "done"
    FAILED = "failed"


class DocumentAnalyzer:
    """
    Main coordinator for large-document analysis.

    Example:
        analyzer = DocumentAnalyzer.from_credentials(credentials)

        result = analyzer.analyze(AnalysisRequest(
            document_text=manual_text,
            kind=AnalysisKind.EXTRACT_DEADLINES,
            on_progress=lambda e: print(f"{e.current}/{e.total} {e.stage}"),
        ))

        print(result.to_display_text())
    """

    def __init__(
        self,
        client: AnalysisClient,
        settings: AnalysisSettings | None = None,
        planner: ChunkPlanner | None = None,
        retry: RetryController | None = None,
        reducer: ResultReducer | None = None,
        normalizer: TextNormalizer | None = None,
    ):
        """
        Initialize the analyzer.

        Args:
            client: Configured backend client
            settings: Thresholds and retry policy (defaults from config)
            planner: Section planner (built from settings if None)
            retry: Retry policy (built from settings if None)
            reducer: Result reducer (built around client and retry if None)
            normalizer: Text normalizer applied before planning
        """
        settings = settings or AnalysisSettings()

        self.client = client
        self.chunk_threshold = settings.chunk_threshold_chars
        self.planner = planner or ChunkPlanner(
            max_chunk_chars=settings.max_chunk_chars,
            lookback_fraction=settings.lookback_fraction,
        )
        self.retry = retry or RetryController(
            max_attempts=settings.max_attempts,
            base_delay=settings.base_delay_seconds,
            max_delay=settings.max_delay_seconds,
            jitter=settings.jitter_fraction,
        )
        self.reducer = reducer or ResultReducer(client, self.retry)
        self.normalizer = normalizer or TextNormalizer()

        debug_log(
            f"[DocumentAnalyzer] Initialized: threshold={self.chunk_threshold}, "
            f"bound={self.planner.max_chunk_chars}, attempts={self.retry.max_attempts}"
        )

    @classmethod
    def from_credentials(
        cls,
        credentials: BackendCredentials,
        settings: AnalysisSettings | None = None,
    ) -> "DocumentAnalyzer":
        """Build an analyzer and its client from a credentials handle."""
        settings = settings or AnalysisSettings()
        client = AnalysisClient(
            credentials,
            timeout=settings.timeout_seconds,
            max_tokens=settings.max_tokens,
        )
        return cls(client, settings=settings)

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyze one document.

        Args:
            request: Document text, analysis kind, optional question and sinks

        Returns:
            AnalysisResult; failed_chunks > 0 marks a partial result

        Raises:
            InvalidRequestError: Before any backend call, for malformed requests
            BackendAuthError: As soon as any call is rejected for auth
            AllChunksFailedError: If no section could be analyzed
            SynthesisFailedError: If combining failed for summaries/questions
            AnalysisCancelledError: If the request's cancel event was set
            AnalysisError: For a single-call document that failed terminally
        """
        request.validate()
        emitter = ProgressEmitter(request.on_progress)
        timing = {}
        state = PipelineState.PLANNING

        try:
            with Timer("DocumentAnalysis planning", auto_log=False) as t:
                plan = self._phase_plan(request.document_text)
            timing["planning"] = t.duration_ms

            if plan.total == 0:
                debug_log("[DocumentAnalyzer] Empty document; nothing to analyze")
                state = PipelineState.DONE
                return AnalysisResult(text="", kind=request.kind, chunk_count=0, method="empty", timing=timing)

            state = PipelineState.CHUNKING if plan.is_chunked else PipelineState.NO_CHUNKING_NEEDED
            debug_log(f"[DocumentAnalyzer] {request.kind.value}: state={state.value}, sections={plan.total}")

            with Timer("DocumentAnalysis sections", auto_log=False) as t:
                if plan.is_chunked:
                    partials = self._phase_analyze_sections(plan, request, emitter)
                else:
                    partials = [self._analyze_whole(plan.chunks[0], request)]
            timing["sections"] = t.duration_ms

            state = PipelineState.REDUCING
            with Timer("DocumentAnalysis reducing", auto_log=False) as t:
                result = self.reducer.reduce(
                    partials,
                    request.kind,
                    request.question,
                    before_synthesis=self._before_synthesis(plan, request, emitter),
                )
            timing["reducing"] = t.duration_ms

            result.timing = timing
            state = PipelineState.DONE
            info(
                f"[DocumentAnalyzer] {request.kind.value} complete: {result.chunk_count} section(s), "
                f"{result.failed_chunks} failed, method={result.method}, "
                f"{result.total_time_ms / 1000:.1f}s"
            )
            return result

        except AnalysisError as e:
            error(
                f"[DocumentAnalyzer] {state.value} -> {PipelineState.FAILED.value}: "
                f"{e.kind.value}: {e} {e.detail}".rstrip()
            )
            raise

    def _phase_plan(self, text: str) -> ChunkPlan:
        """
        Normalize and split the document.

        Text at or under the threshold becomes a single section even when
        it is longer than the section bound.
        """
        normalized = self.normalizer.normalize(text)
        if len(normalized) <= self.chunk_threshold:
            return ChunkPlan.single(normalized)
        return self.planner.plan(normalized)

    def _analyze_whole(self, chunk: Chunk, request: AnalysisRequest) -> PartialResult:
        """
        Single-call path for documents under the threshold.

        Raises:
            AnalysisError: The classified failure, surfaced directly
        """
        if request.is_cancelled:
            raise AnalysisCancelledError()

        outcome = self.retry.run(
            lambda: self.client.analyze_chunk(chunk, request.kind, request.question, total_chunks=1),
            label="document",
        )
        if not outcome.succeeded:
            raise outcome.value.to_error()
        return PartialResult(chunk_index=0, text=outcome.value, attempts=outcome.attempts)

    def _phase_analyze_sections(
        self,
        plan: ChunkPlan,
        request: AnalysisRequest,
        emitter: ProgressEmitter,
    ) -> list[PartialResult]:
        """
        Analyze every section in order.

        Each section is retried independently; a section that still fails
        is recorded and the rest continue, except for auth failures, which
        stop the run since every remaining call would fail the same way.

        Returns:
            One PartialResult per section, in section order

        Raises:
            BackendAuthError: On the first auth failure
            AnalysisCancelledError: If cancelled between sections
        """
        total = plan.total
        emitter.emit(0, total, PREPARING_STAGE)

        partials = []
        for chunk in plan.chunks:
            if request.is_cancelled:
                raise AnalysisCancelledError()

            outcome = self.retry.run(
                lambda: self.client.analyze_chunk(chunk, request.kind, request.question, total_chunks=total),
                label=f"section {chunk.number}/{total}",
            )

            if outcome.succeeded:
                partial = PartialResult(chunk_index=chunk.index, text=outcome.value, attempts=outcome.attempts)
            else:
                failure = outcome.value
                if failure.kind is FailureKind.AUTH_FAILURE:
                    debug_log(f"[DocumentAnalyzer] Auth failure on section {chunk.number}; skipping the rest")
                    raise BackendAuthError(detail=failure.message)
                debug_log(f"[DocumentAnalyzer] Section {chunk.number} failed: {failure.kind.value}")
                partial = PartialResult(chunk_index=chunk.index, failure=failure, attempts=outcome.attempts)

            partials.append(partial)
            emitter.emit(chunk.number, total, section_stage(chunk.number, total))

        return partials

    def _before_synthesis(
        self,
        plan: ChunkPlan,
        request: AnalysisRequest,
        emitter: ProgressEmitter,
    ) -> Callable[[], None]:
        """Hook run right before the combining call: cancellation check, then progress."""

        def hook():
            if request.is_cancelled:
                raise AnalysisCancelledError()
            emitter.emit(plan.total, plan.total, COMBINING_STAGE)

        return hook


def analyze_document(
    document_text: str,
    analysis_type: AnalysisKind | str,
    custom_query: str | None = None,
    on_progress=None,
    *,
    credentials: BackendCredentials,
    settings: AnalysisSettings | None = None,
) -> str:
    """
    Analyze a document and return display text.

    Partial results carry a note naming how many sections were skipped.

    Args:
        document_text: Already-extracted plain text
        analysis_type: "extract_deadlines", "extract_requirements",
            "summarize" or "custom"
        custom_query: Question; required when analysis_type is "custom"
        on_progress: Optional callable or Queue receiving ProgressEvents
        credentials: Backend handle for the caller's organization
        settings: Optional thresholds and retry policy

    Returns:
        Result text

    Raises:
        AnalysisError: With a human-readable message
    """
    request = AnalysisRequest(
        document_text=document_text,
        kind=analysis_type,
        question=custom_query,
        on_progress=on_progress,
    )
    analyzer = DocumentAnalyzer.from_credentials(credentials, settings)
    return analyzer.analyze(request).to_display_text()
