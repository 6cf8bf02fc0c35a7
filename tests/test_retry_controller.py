"""
Tests for RetryController.

Sleeps are recorded instead of performed, so these run instantly.
"""

import random

import pytest

from boothdocs.analysis.errors import AnalysisFailure, FailureKind
from boothdocs.analysis.retry import RetryController


def scripted(*outcomes):
    """Operation returning the given outcomes in order, counting calls."""
    queue = list(outcomes)

    def operation():
        operation.calls += 1
        return queue.pop(0)

    operation.calls = 0
    return operation


RATE_LIMITED = AnalysisFailure(FailureKind.RATE_LIMITED, "slow down", status_code=429)
TRANSIENT = AnalysisFailure(FailureKind.TRANSIENT_NETWORK, "timeout")
EMPTY = AnalysisFailure(FailureKind.EMPTY_RESPONSE, "blank", status_code=200)
AUTH = AnalysisFailure(FailureKind.AUTH_FAILURE, "bad key", status_code=401)
BACKEND = AnalysisFailure(FailureKind.BACKEND_ERROR, "boom", status_code=500)


class TestRetryDecisions:
    """Which failures are retried, and how many times."""

    def test_success_first_try(self, retry, sleeps):
        outcome = retry.run(scripted("deadlines"))

        assert outcome.succeeded
        assert outcome.value == "deadlines"
        assert outcome.attempts == 1
        assert sleeps == []

    def test_rate_limited_twice_then_success(self, retry, sleeps):
        operation = scripted(RATE_LIMITED, RATE_LIMITED, "deadlines")

        outcome = retry.run(operation)

        assert outcome.succeeded
        assert outcome.attempts == 3
        assert len(sleeps) == 2

    def test_gives_up_after_max_attempts(self, retry, sleeps):
        operation = scripted(TRANSIENT, TRANSIENT, TRANSIENT, "never reached")

        outcome = retry.run(operation)

        assert not outcome.succeeded
        assert outcome.value.kind is FailureKind.TRANSIENT_NETWORK
        assert outcome.attempts == 3
        assert operation.calls == 3
        assert len(sleeps) == 2

    @pytest.mark.parametrize("failure", [AUTH, BACKEND])
    def test_terminal_failures_not_retried(self, failure, retry, sleeps):
        operation = scripted(failure, "never reached")

        outcome = retry.run(operation)

        assert outcome.value is failure
        assert operation.calls == 1
        assert sleeps == []

    def test_empty_response_retried_once(self, retry):
        outcome = retry.run(scripted(EMPTY, "deadlines"))

        assert outcome.succeeded
        assert outcome.attempts == 2

    def test_second_empty_response_is_final(self, sleeps):
        controller = RetryController(max_attempts=5, jitter=0, sleep=sleeps.append)
        operation = scripted(EMPTY, EMPTY, "never reached")

        outcome = controller.run(operation)

        assert outcome.value.kind is FailureKind.EMPTY_RESPONSE
        assert operation.calls == 2

    def test_single_attempt_budget(self, sleeps):
        controller = RetryController(max_attempts=1, sleep=sleeps.append)

        outcome = controller.run(scripted(RATE_LIMITED))

        assert outcome.attempts == 1
        assert sleeps == []

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryController(max_attempts=0)


class TestBackoffDelays:
    """Exponential growth, cap, jitter and Retry-After."""

    def test_exponential_without_jitter(self):
        controller = RetryController(base_delay=1.0, max_delay=30.0, jitter=0)

        assert [controller.compute_delay(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 8.0]

    def test_delay_capped(self):
        controller = RetryController(base_delay=1.0, max_delay=30.0, jitter=0)

        assert controller.compute_delay(10) == 30.0

    def test_jitter_stays_in_band(self):
        controller = RetryController(base_delay=2.0, max_delay=100.0, jitter=0.25, rng=random.Random(3))

        for attempt in range(1, 6):
            base = 2.0 * 2 ** (attempt - 1)
            for _ in range(20):
                delay = controller.compute_delay(attempt)
                assert base * 0.75 <= delay <= base * 1.25

    def test_retry_after_is_a_floor(self):
        controller = RetryController(base_delay=1.0, jitter=0)

        assert controller.compute_delay(1, retry_after=12.0) == 12.0
        assert controller.compute_delay(4, retry_after=0.5) == 8.0

    def test_delay_never_exceeds_cap(self):
        controller = RetryController(base_delay=1.0, max_delay=30.0, jitter=0.25, rng=random.Random(11))

        for attempt in range(1, 10):
            assert controller.compute_delay(attempt) <= 30.0
        assert controller.compute_delay(1, retry_after=86400) == 30.0

    def test_retry_after_beyond_cap_is_final(self, retry, sleeps):
        limited = AnalysisFailure(FailureKind.RATE_LIMITED, "come back tomorrow", status_code=429, retry_after=86400)
        operation = scripted(limited, limited, "never reached")

        outcome = retry.run(operation)

        assert outcome.value is limited
        assert outcome.attempts == 1
        assert sleeps == []

    def test_retry_after_at_cap_still_retried(self, retry, sleeps):
        limited = AnalysisFailure(FailureKind.RATE_LIMITED, "wait", status_code=429, retry_after=30.0)

        outcome = retry.run(scripted(limited, "ok"))

        assert outcome.succeeded
        assert sleeps == [30.0]

    def test_retry_after_honored_when_sleeping(self, retry, sleeps):
        limited = AnalysisFailure(FailureKind.RATE_LIMITED, "wait", status_code=429, retry_after=9.0)

        retry.run(scripted(limited, "ok"))

        assert sleeps[0] >= 9.0
