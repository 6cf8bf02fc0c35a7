"""
Retry/Backoff Controller for backend calls.

Retries only failures that another attempt can plausibly fix:
- rate-limited (waiting at least as long as Retry-After asks; a
  Retry-After longer than max_delay is final)
- transient-network (timeouts, connection errors, 408/502/503/504)
- empty-response, once; a second empty response is terminal

Everything else (auth-failure, backend-error) is returned at once.
Delays grow exponentially with random jitter, up to a cap.
"""

import random
import time
from dataclasses import dataclass
from typing import Callable

from boothdocs.config import (
    RETRY_BASE_DELAY_SECONDS,
    RETRY_JITTER_FRACTION,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_DELAY_SECONDS,
)
from boothdocs.logging_config import debug_log, warning

from .errors import AnalysisFailure, FailureKind

# Empty responses get one retry regardless of max_attempts
_MAX_EMPTY_RESPONSES = 2


@dataclass(frozen=True)
class RetryOutcome:
    """
    Final result of a retried operation.

    Attributes:
        value: Text on success, or the last AnalysisFailure
        attempts: Calls made, including the first
    """

    value: str | AnalysisFailure
    attempts: int

    @property
    def succeeded(self) -> bool:
        return not isinstance(self.value, AnalysisFailure)


class RetryController:
    """
    Runs an operation with bounded retries.

    Stateless between calls; each section gets its own attempt budget.

    Example:
        retry = RetryController(max_attempts=3)
        outcome = retry.run(lambda: client.analyze_chunk(chunk, kind), label="section 3")
    """

    def __init__(
        self,
        max_attempts: int = RETRY_MAX_ATTEMPTS,
        base_delay: float = RETRY_BASE_DELAY_SECONDS,
        max_delay: float = RETRY_MAX_DELAY_SECONDS,
        jitter: float = RETRY_JITTER_FRACTION,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ):
        """
        Initialize the controller.

        Args:
            max_attempts: Total attempts per operation (first call included)
            base_delay: Delay before the second attempt, in seconds
            max_delay: Ceiling for any single delay
            jitter: Fractional spread, e.g. 0.25 -> delay * [0.75, 1.25]
            sleep: Sleep function (injected in tests)
            rng: Random source for jitter
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter
        self.sleep = sleep
        self.rng = rng or random.Random()

    def run(self, operation: Callable[[], str | AnalysisFailure], label: str = "call") -> RetryOutcome:
        """
        Call operation until it succeeds or fails terminally.

        Args:
            operation: Zero-argument callable returning text or AnalysisFailure
            label: Short description for logs

        Returns:
            RetryOutcome with the text or the final failure
        """
        empty_responses = 0
        attempt = 0

        while True:
            attempt += 1
            value = operation()

            if not isinstance(value, AnalysisFailure):
                if attempt > 1:
                    debug_log(f"[RetryController] {label}: succeeded on attempt {attempt}")
                return RetryOutcome(value=value, attempts=attempt)

            if value.kind is FailureKind.EMPTY_RESPONSE:
                empty_responses += 1

            if not self._should_retry(value, attempt, empty_responses):
                if value.retryable:
                    warning(
                        f"[RetryController] {label}: giving up after {attempt} attempt(s): {value.kind.value}"
                    )
                return RetryOutcome(value=value, attempts=attempt)

            delay = self.compute_delay(attempt, value.retry_after)
            debug_log(
                f"[RetryController] {label}: {value.kind.value} on attempt {attempt}, "
                f"retrying in {delay:.2f}s"
            )
            self.sleep(delay)

    def _should_retry(self, failure: AnalysisFailure, attempt: int, empty_responses: int) -> bool:
        if not failure.retryable:
            return False
        if attempt >= self.max_attempts:
            return False
        if failure.retry_after is not None and failure.retry_after > self.max_delay:
            debug_log(
                f"[RetryController] Retry-After {failure.retry_after:.0f}s exceeds max delay {self.max_delay:.0f}s"
            )
            return False
        if failure.kind is FailureKind.EMPTY_RESPONSE and empty_responses >= _MAX_EMPTY_RESPONSES:
            return False
        return True

    def compute_delay(self, attempt: int, retry_after: float | None = None) -> float:
        """
        Delay after a failed attempt.

        Args:
            attempt: One-based number of the attempt that just failed
            retry_after: Backend-requested wait, if any

        Returns:
            Seconds to sleep, at least retry_after and at most max_delay
        """
        delay = min(self.max_delay, self.base_delay * (2 ** (attempt - 1)))
        if self.jitter:
            delay *= 1 + self.rng.uniform(-self.jitter, self.jitter)
        if retry_after is not None:
            delay = max(delay, retry_after)
        return min(self.max_delay, max(0.0, delay))
