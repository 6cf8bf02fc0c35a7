"""
Reducer/Synthesizer for section results.

Combines ordered PartialResults into one AnalysisResult:
- One section: identity, the section output is the answer.
- Several sections: successful outputs are joined with numbered
  separators, then one combining call deduplicates and orders them
  (extraction kinds) or reasons across sections (summaries, questions).

Failed sections are skipped and counted. If every section failed the
reducer raises instead of fabricating a result.

When the combining call fails, extraction kinds fall back to the joined
section lists (duplicates are acceptable, dropped items are not);
summaries and questions cannot, and raise SynthesisFailedError.
"""

from typing import Callable

from boothdocs.logging_config import debug_log, warning

from .client import AnalysisClient
from .errors import AllChunksFailedError, AnalysisFailure, FailureKind, SynthesisFailedError
from .prompts import format_section_results
from .retry import RetryController
from .types import AnalysisKind, AnalysisResult, PartialResult


class ResultReducer:
    """
    Turns section results into the final answer.

    Example:
        reducer = ResultReducer(client, RetryController())
        result = reducer.reduce(partials, AnalysisKind.EXTRACT_DEADLINES)
        print(result.text, result.failed_chunks)
    """

    def __init__(self, client: AnalysisClient, retry: RetryController | None = None):
        """
        Args:
            client: Client used for the combining call
            retry: Retry policy for the combining call
        """
        self.client = client
        self.retry = retry or RetryController()

    def reduce(
        self,
        partials: list[PartialResult],
        kind: AnalysisKind,
        question: str | None = None,
        before_synthesis: Callable[[], None] | None = None,
    ) -> AnalysisResult:
        """
        Combine section results.

        Args:
            partials: One PartialResult per section, in section order
            kind: Analysis being run
            question: User question for CUSTOM analyses
            before_synthesis: Called right before the combining call

        Returns:
            AnalysisResult with failed_chunks recorded

        Raises:
            AllChunksFailedError: If no section succeeded
            BackendAuthError: If the combining call was rejected for auth
            SynthesisFailedError: If combining failed for a non-extraction kind
        """
        if not partials:
            return AnalysisResult(text="", kind=kind, chunk_count=0, method="empty")

        successes = [p for p in partials if p.succeeded]
        failures = [p.failure for p in partials if not p.succeeded]

        if not successes:
            raise AllChunksFailedError(len(partials))

        if len(partials) == 1:
            return AnalysisResult(text=successes[0].text, kind=kind, chunk_count=1, method="direct")

        if failures:
            warning(f"[ResultReducer] Proceeding with {len(successes)} of {len(partials)} sections")

        combined = self.concatenate(successes)

        if before_synthesis is not None:
            before_synthesis()

        outcome = self.retry.run(
            lambda: self.client.synthesize(combined, kind, question),
            label="synthesis",
        )

        if outcome.succeeded:
            text, method = outcome.value, "synthesized"
        else:
            text, method = self._fallback(outcome.value, kind, combined), "concatenated"

        debug_log(
            f"[ResultReducer] {kind.value}: {len(successes)}/{len(partials)} sections, "
            f"method={method}, {len(text)} chars"
        )

        return AnalysisResult(
            text=text,
            kind=kind,
            chunk_count=len(partials),
            failed_chunks=len(failures),
            method=method,
            failures=failures,
        )

    def concatenate(self, partials: list[PartialResult]) -> str:
        """Join successful section outputs, labelled by their section number."""
        return format_section_results([(p.chunk_index + 1, p.text) for p in partials if p.succeeded])

    def _fallback(self, failure: AnalysisFailure, kind: AnalysisKind, combined: str) -> str:
        """
        Decide what to return when the combining call failed.

        Raises:
            BackendAuthError: Auth failures are never papered over
            SynthesisFailedError: For summaries and custom questions
        """
        if failure.kind is FailureKind.AUTH_FAILURE:
            raise failure.to_error()
        if not kind.is_extraction:
            raise SynthesisFailedError(failure)

        warning(
            f"[ResultReducer] Combining call failed ({failure.kind.value}); "
            f"returning concatenated section results"
        )
        return combined
