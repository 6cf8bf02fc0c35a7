"""
Analysis Client for the generative-text backend.

Wraps one request/response exchange with the app's generate route:

    POST {api_base}/api/ai/generate
    Authorization: Bearer <api key>
    {"prompt": "...", "systemPrompt": "...", "orgId": "...", "maxTokens": 4096}

    200 -> {"response": "..."}
    4xx/5xx -> {"error": "..."}

Failures are classified here, where the HTTP status or exception is
known, and returned as AnalysisFailure values instead of raised.
The client holds an explicit credentials handle; it never reads or
caches process-wide key state.
"""

import time
from dataclasses import dataclass

import requests

from boothdocs.config import AI_GENERATE_PATH, AI_MAX_TOKENS, AI_TIMEOUT_SECONDS, SYSTEM_PROMPT
from boothdocs.logging_config import debug_log, warning
from boothdocs.sanitization import count_filtered, sanitize_prompt

from .errors import AnalysisFailure, FailureKind
from .prompts import build_direct_prompt, build_merge_prompt, build_section_prompt
from .types import AnalysisKind, Chunk

# Statuses worth another attempt besides 429
_TRANSIENT_STATUSES = frozenset({408, 502, 503, 504})
_AUTH_STATUSES = frozenset({401, 403})


@dataclass(frozen=True)
class BackendCredentials:
    """
    Already-configured access to the generative backend for one organization.

    Loading, rotating and clearing keys belongs to the settings layer;
    the pipeline only receives this handle.

    Attributes:
        api_base: Base URL of the app serving the generate route
        api_key: Bearer token accepted by the generate route
        org_id: Organization whose provider key the route should use
    """

    api_base: str
    api_key: str | None
    org_id: str | None = None

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks
        key_state = "set" if self.api_key else "missing"
        return f"BackendCredentials(api_base={self.api_base!r}, api_key=<{key_state}>, org_id={self.org_id!r})"


class AnalysisClient:
    """
    Builds analysis prompts and issues single backend calls.

    Example:
        client = AnalysisClient(BackendCredentials(api_base, api_key, org_id))
        outcome = client.analyze_chunk(chunk, AnalysisKind.SUMMARIZE, total_chunks=5)
        if isinstance(outcome, AnalysisFailure):
            ...
    """

    def __init__(
        self,
        credentials: BackendCredentials,
        timeout: float = AI_TIMEOUT_SECONDS,
        max_tokens: int = AI_MAX_TOKENS,
        system_prompt: str = SYSTEM_PROMPT,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            credentials: Backend handle for the caller's organization
            timeout: Per-call timeout in seconds
            max_tokens: Output token budget per call
            system_prompt: Fixed system instruction sent with every call
            session: Optional requests.Session for connection reuse
        """
        self.credentials = credentials
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt
        self.session = session

        debug_log(f"[AnalysisClient] Initialized: {credentials!r}, timeout={timeout}s")

    @property
    def endpoint(self) -> str:
        return self.credentials.api_base.rstrip("/") + AI_GENERATE_PATH

    def analyze_chunk(
        self,
        chunk: Chunk | None,
        kind: AnalysisKind,
        question: str | None = None,
        prior_context: str | None = None,
        total_chunks: int = 1,
    ) -> str | AnalysisFailure:
        """
        Analyze one section, or combine earlier results.

        Args:
            chunk: Section to analyze (ignored when prior_context is given)
            kind: Analysis to run
            question: User question for CUSTOM analyses
            prior_context: Formatted earlier section results; switches the
                call to the combining instruction
            total_chunks: Sections in the plan; 1 selects the whole-document template

        Returns:
            Backend text, or an AnalysisFailure
        """
        if prior_context is not None:
            prompt = build_merge_prompt(kind, prior_context, question)
            label = "synthesis"
        elif total_chunks <= 1:
            prompt = build_direct_prompt(kind, chunk.text, question)
            label = "document"
        else:
            prompt = build_section_prompt(kind, chunk.text, chunk.number, total_chunks, question)
            label = f"section {chunk.number}/{total_chunks}"

        return self.generate(prompt, label=label)

    def synthesize(
        self,
        combined: str,
        kind: AnalysisKind,
        question: str | None = None,
    ) -> str | AnalysisFailure:
        """Run the combining pass over already-formatted section results."""
        return self.analyze_chunk(None, kind, question=question, prior_context=combined)

    def generate(self, prompt: str, system_prompt: str | None = None, label: str = "prompt") -> str | AnalysisFailure:
        """
        Send one prompt and classify the outcome.

        Args:
            prompt: Full prompt text (sanitized before sending)
            system_prompt: Override for the fixed system instruction
            label: Short description for logs

        Returns:
            Generated text (stripped), or an AnalysisFailure
        """
        if not self.credentials.api_key:
            debug_log(f"[AnalysisClient] {label}: no API key configured")
            return AnalysisFailure(FailureKind.AUTH_FAILURE, "No API key configured")

        filtered = count_filtered(prompt)
        if filtered:
            warning(f"[AnalysisClient] {label}: filtered {filtered} injection pattern(s) from prompt")

        payload = {
            "prompt": sanitize_prompt(prompt),
            "systemPrompt": system_prompt or self.system_prompt,
            "maxTokens": self.max_tokens,
        }
        if self.credentials.org_id:
            payload["orgId"] = self.credentials.org_id

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.credentials.api_key}",
        }

        debug_log(f"[AnalysisClient] {label}: sending {len(payload['prompt'])} chars to {self.endpoint}")
        start_time = time.time()

        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(self.endpoint, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout:
            debug_log(f"[AnalysisClient] {label}: timeout after {self.timeout}s")
            return AnalysisFailure(FailureKind.TRANSIENT_NETWORK, f"Timed out after {self.timeout}s")
        except requests.exceptions.ConnectionError as e:
            debug_log(f"[AnalysisClient] {label}: connection error: {e}")
            return AnalysisFailure(FailureKind.TRANSIENT_NETWORK, f"Cannot connect to {self.endpoint}")
        except requests.exceptions.RequestException as e:
            debug_log(f"[AnalysisClient] {label}: request failed: {e}")
            return AnalysisFailure(FailureKind.BACKEND_ERROR, f"Request failed: {type(e).__name__}")

        elapsed = time.time() - start_time
        outcome = self._classify(response)

        if isinstance(outcome, AnalysisFailure):
            debug_log(
                f"[AnalysisClient] {label}: {outcome.kind.value} "
                f"(status {outcome.status_code}) in {elapsed:.2f}s"
            )
        else:
            debug_log(f"[AnalysisClient] {label}: {len(outcome)} chars in {elapsed:.2f}s")
        return outcome

    def _classify(self, response: requests.Response) -> str | AnalysisFailure:
        """
        Map an HTTP response to text or a classified failure.

        Args:
            response: Backend response

        Returns:
            Generated text, or an AnalysisFailure
        """
        status = response.status_code
        body = self._json_body(response)
        detail = str(body.get("error") or f"HTTP {status}")

        if status in _AUTH_STATUSES:
            return AnalysisFailure(FailureKind.AUTH_FAILURE, detail, status_code=status)
        if status == 429:
            return AnalysisFailure(
                FailureKind.RATE_LIMITED,
                detail,
                status_code=status,
                retry_after=self._retry_after(response),
            )
        if status in _TRANSIENT_STATUSES:
            return AnalysisFailure(FailureKind.TRANSIENT_NETWORK, detail, status_code=status)
        if not 200 <= status < 300:
            return AnalysisFailure(FailureKind.BACKEND_ERROR, detail, status_code=status)

        text = body.get("response")
        if not isinstance(text, str) or not text.strip():
            return AnalysisFailure(FailureKind.EMPTY_RESPONSE, "Backend returned no text", status_code=status)

        return text.strip()

    def _json_body(self, response: requests.Response) -> dict:
        """Parsed JSON object body, or {} when the body is not a JSON object."""
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def _retry_after(self, response: requests.Response) -> float | None:
        """Seconds from a Retry-After header given in seconds; HTTP dates are ignored."""
        value = response.headers.get("Retry-After")
        if value is None:
            return None
        try:
            return max(0.0, float(value))
        except ValueError:
            return None

    def check_connection(self) -> tuple[bool, str | None]:
        """
        Send a tiny prompt to confirm the key and route work.

        Returns:
            (True, None) on success, else (False, user-facing error message)
        """
        outcome = self.generate(
            'Hi, this is a connection test. Respond with "Connected!"',
            label="connection test",
        )
        if isinstance(outcome, AnalysisFailure):
            return False, str(outcome.to_error())
        return True, None
