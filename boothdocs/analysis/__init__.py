"""
Large-document analysis for BoothDocs.

Runs one analysis (deadlines, requirements, summary, or a custom question)
over a trade show document of any length using a Map-Reduce pattern:

- ChunkPlanner: Boundary-aware splitting of long text into sections
- AnalysisClient: One request/response exchange with the generate route
- RetryController: Bounded exponential backoff for retryable failures
- ProgressEmitter: (current, total, stage) events to a callback or queue
- ResultReducer: Combine section results into the final answer
- DocumentAnalyzer: Coordinates the full pipeline

The Map-Reduce pattern:
1. PLAN: Documents over 40,000 characters are split into sections
2. MAP: Each section is analyzed in order, with its own retry budget
3. REDUCE: One combining call deduplicates and orders the section results

Usage:
    from boothdocs.analysis import DocumentAnalyzer, AnalysisRequest, BackendCredentials

    analyzer = DocumentAnalyzer.from_credentials(
        BackendCredentials(api_base="https://app.example.com", api_key=key, org_id=org)
    )
    result = analyzer.analyze(AnalysisRequest(text, "extract_deadlines"))
    print(result.to_display_text())
"""

from .chunker import ChunkPlanner
from .client import AnalysisClient, BackendCredentials
from .errors import (
    AllChunksFailedError,
    AnalysisCancelledError,
    AnalysisError,
    AnalysisFailure,
    BackendAuthError,
    FailureKind,
    InvalidRequestError,
    PlannerError,
    SynthesisFailedError,
)
from .orchestrator import DocumentAnalyzer, PipelineState, analyze_document
from .progress import ProgressEmitter
from .reducer import ResultReducer
from .retry import RetryController, RetryOutcome
from .types import (
    AnalysisKind,
    AnalysisRequest,
    AnalysisResult,
    Chunk,
    ChunkPlan,
    PartialResult,
    ProgressEvent,
)

__all__ = [
    # Data types
    "AnalysisKind",
    "AnalysisRequest",
    "AnalysisResult",
    "Chunk",
    "ChunkPlan",
    "PartialResult",
    "ProgressEvent",
    # Pipeline components
    "ChunkPlanner",
    "AnalysisClient",
    "BackendCredentials",
    "RetryController",
    "RetryOutcome",
    "ProgressEmitter",
    "ResultReducer",
    "DocumentAnalyzer",
    "PipelineState",
    "analyze_document",
    # Errors
    "AnalysisError",
    "AnalysisFailure",
    "FailureKind",
    "InvalidRequestError",
    "BackendAuthError",
    "AllChunksFailedError",
    "SynthesisFailedError",
    "AnalysisCancelledError",
    "PlannerError",
]
