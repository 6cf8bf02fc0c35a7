"""
Failure taxonomy for document analysis.

Failures are classified where they are produced (HTTP status, timeout,
blank body). Retry policy and user messages key off FailureKind.

Two shapes:
- AnalysisFailure: a value returned across the AnalysisClient boundary.
- AnalysisError and subclasses: raised from the orchestrator edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(Enum):
    """Why a backend call or an analysis did not produce a result."""

    AUTH_FAILURE = "auth-failure"
    RATE_LIMITED = "rate-limited"
    TRANSIENT_NETWORK = "transient-network"
    BACKEND_ERROR = "backend-error"
    EMPTY_RESPONSE = "empty-response"
    ALL_CHUNKS_FAILED = "all-chunks-failed"
    PLANNER_ERROR = "planner-error"
    INVALID_REQUEST = "invalid-request"
    CANCELLED = "cancelled"

    @property
    def retryable(self) -> bool:
        """Whether a single call that failed this way may be attempted again."""
        return self in _RETRYABLE_KINDS


_RETRYABLE_KINDS = frozenset({
    FailureKind.RATE_LIMITED,
    FailureKind.TRANSIENT_NETWORK,
    FailureKind.EMPTY_RESPONSE,
})


# Messages shown to the user; the UI prefixes them with "Error:"
USER_MESSAGES = {
    FailureKind.AUTH_FAILURE: "Invalid or missing API key. Please check your AI settings.",
    FailureKind.RATE_LIMITED: "API rate limit exceeded. Please try again later.",
    FailureKind.TRANSIENT_NETWORK: "Could not reach the AI service. Please check your connection and try again.",
    FailureKind.BACKEND_ERROR: "The AI service failed to generate content. Please try again.",
    FailureKind.EMPTY_RESPONSE: "The AI service returned an empty response.",
    FailureKind.ALL_CHUNKS_FAILED: "None of the document sections could be analyzed.",
    FailureKind.PLANNER_ERROR: "The document could not be split into sections.",
    FailureKind.INVALID_REQUEST: "The analysis request is invalid.",
    FailureKind.CANCELLED: "The analysis was cancelled.",
}


@dataclass(frozen=True)
class AnalysisFailure:
    """
    A classified failure of one backend call.

    Attributes:
        kind: Failure classification
        message: Detail for logs (never contains credentials)
        status_code: HTTP status when the backend answered, else None
        retry_after: Seconds the backend asked us to wait, if it said so
    """

    kind: FailureKind
    message: str = ""
    status_code: int | None = None
    retry_after: float | None = None

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def to_error(self) -> AnalysisError:
        """Convert into the matching exception for the caller."""
        if self.kind is FailureKind.AUTH_FAILURE:
            return BackendAuthError(detail=self.message)
        return AnalysisError(
            USER_MESSAGES[self.kind],
            kind=self.kind,
            detail=self.message,
        )


class AnalysisError(Exception):
    """
    Base for all analysis errors.

    str(error) is a human-readable message safe to show in the UI;
    detail carries diagnostic text for logs.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: FailureKind = FailureKind.BACKEND_ERROR,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.detail = detail or ""

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


class InvalidRequestError(AnalysisError):
    """Request rejected before any backend call (e.g. custom query missing)."""

    def __init__(self, message: str, **kwargs: object) -> None:
        super().__init__(message, kind=FailureKind.INVALID_REQUEST, **kwargs)


class BackendAuthError(AnalysisError):
    """API key missing or rejected. Never retried."""

    def __init__(self, message: str = USER_MESSAGES[FailureKind.AUTH_FAILURE], **kwargs: object) -> None:
        super().__init__(message, kind=FailureKind.AUTH_FAILURE, **kwargs)


class AllChunksFailedError(AnalysisError):
    """Every section failed terminally; nothing to reduce."""

    def __init__(self, total_chunks: int, **kwargs: object) -> None:
        super().__init__(
            f"None of the {total_chunks} document sections could be analyzed. Please try again.",
            kind=FailureKind.ALL_CHUNKS_FAILED,
            **kwargs,
        )
        self.total_chunks = total_chunks


class SynthesisFailedError(AnalysisError):
    """The combining call failed for a kind that cannot fall back to concatenation."""

    def __init__(self, failure: AnalysisFailure) -> None:
        super().__init__(
            f"Sections were analyzed but could not be combined: {USER_MESSAGES[failure.kind]}",
            kind=failure.kind,
            detail=failure.message,
        )
        self.failure = failure


class AnalysisCancelledError(AnalysisError):
    """The caller set the request's cancel event."""

    def __init__(self, message: str = USER_MESSAGES[FailureKind.CANCELLED], **kwargs: object) -> None:
        super().__init__(message, kind=FailureKind.CANCELLED, **kwargs)


class PlannerError(AnalysisError):
    """Chunk plan does not tile the source text. Programming error, not user input."""

    def __init__(self, message: str, **kwargs: object) -> None:
        super().__init__(message, kind=FailureKind.PLANNER_ERROR, **kwargs)
