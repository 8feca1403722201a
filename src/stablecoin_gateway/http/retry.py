"""Retry policy for outbound gateway calls.

One logical request moves through ``attempting -> backing_off -> attempting
... -> succeeded | exhausted``. The machine is created per call and never
shared, so concurrent requests on the same client keep separate counters.
"""

from stablecoin_gateway.errors.exceptions import (
    ApiError,
    GatewayError,
    NetworkError,
    RequestTimeoutError,
)
from stablecoin_gateway.models.enums import RetryState

BASE_DELAY_MS = 1000
MAX_DELAY_MS = 10000


def backoff_delay_ms(attempt: int, base_ms: int = BASE_DELAY_MS, cap_ms: int = MAX_DELAY_MS) -> int:
    """Delay before the attempt after ``attempt`` (0-based): doubling, capped, no jitter."""
    if attempt < 0:
        raise ValueError("attempt must be non-negative")
    # Cap the exponent so huge attempt numbers never build huge integers
    if attempt >= 32:
        return cap_ms
    return min(base_ms * 2**attempt, cap_ms)


def is_retryable(error: BaseException) -> bool:
    """Timeouts, transport failures, 5xx and 429 are retryable; nothing else is."""
    if isinstance(error, (RequestTimeoutError, NetworkError)):
        return True
    if isinstance(error, ApiError):
        return error.is_server_error() or error.is_rate_limit_error()
    return False


class RetryStateMachine:
    """Tracks the attempt counter and state of a single logical request."""

    def __init__(self, max_retries: int) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self.max_retries = max_retries
        self.attempt = 0
        self.state = RetryState.ATTEMPTING
        self.last_error: GatewayError | None = None

    def _require(self, expected: RetryState) -> None:
        if self.state is not expected:
            raise RuntimeError(f"invalid transition from {self.state} (expected {expected})")

    def on_success(self) -> RetryState:
        self._require(RetryState.ATTEMPTING)
        self.state = RetryState.SUCCEEDED
        return self.state

    def on_failure(self, error: GatewayError) -> RetryState:
        self._require(RetryState.ATTEMPTING)
        self.last_error = error
        if is_retryable(error) and self.attempt < self.max_retries:
            self.state = RetryState.BACKING_OFF
        else:
            self.state = RetryState.EXHAUSTED
        return self.state

    def next_delay_ms(self) -> int:
        self._require(RetryState.BACKING_OFF)
        return backoff_delay_ms(self.attempt)

    def after_backoff(self) -> RetryState:
        self._require(RetryState.BACKING_OFF)
        self.attempt += 1
        self.state = RetryState.ATTEMPTING
        return self.state
