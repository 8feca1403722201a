"""Tests for the retry state machine and backoff policy."""

import pytest

from stablecoin_gateway.errors.exceptions import (
    ApiError,
    ConfigurationError,
    NetworkError,
    RequestTimeoutError,
)
from stablecoin_gateway.http.retry import RetryStateMachine, backoff_delay_ms, is_retryable
from stablecoin_gateway.models.enums import RetryState


class TestBackoff:
    def test_doubles_from_one_second(self):
        assert [backoff_delay_ms(n) for n in range(4)] == [1000, 2000, 4000, 8000]

    @pytest.mark.parametrize("attempt", [4, 5, 10, 100])
    def test_caps_at_ten_seconds(self, attempt):
        assert backoff_delay_ms(attempt) == 10000

    def test_rejects_negative_attempt(self):
        with pytest.raises(ValueError):
            backoff_delay_ms(-1)


class TestIsRetryable:
    @pytest.mark.parametrize("status", [429, 500, 502, 503, 599])
    def test_retryable_statuses(self, status):
        assert is_retryable(ApiError("x", status))

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 418, 422])
    def test_terminal_statuses(self, status):
        assert not is_retryable(ApiError("x", status))

    def test_timeouts_and_network_errors_are_retryable(self):
        assert is_retryable(RequestTimeoutError(100))
        assert is_retryable(NetworkError("connection reset"))

    def test_configuration_errors_are_terminal(self):
        assert not is_retryable(ConfigurationError("bad"))


class TestRetryStateMachine:
    def test_success_on_first_attempt(self):
        machine = RetryStateMachine(max_retries=3)
        assert machine.state is RetryState.ATTEMPTING
        assert machine.on_success() is RetryState.SUCCEEDED
        assert machine.attempt == 0

    def test_retryable_failure_backs_off_then_attempts_again(self):
        machine = RetryStateMachine(max_retries=3)
        assert machine.on_failure(ApiError("x", 500)) is RetryState.BACKING_OFF
        assert machine.next_delay_ms() == 1000
        assert machine.after_backoff() is RetryState.ATTEMPTING
        assert machine.attempt == 1

    def test_terminal_failure_exhausts_immediately(self):
        machine = RetryStateMachine(max_retries=3)
        error = ApiError("x", 400)
        assert machine.on_failure(error) is RetryState.EXHAUSTED
        assert machine.last_error is error
        assert machine.attempt == 0

    def test_last_attempt_exhausts(self):
        machine = RetryStateMachine(max_retries=2)
        delays = []
        while machine.on_failure(RequestTimeoutError(5)) is RetryState.BACKING_OFF:
            delays.append(machine.next_delay_ms())
            machine.after_backoff()
        assert machine.state is RetryState.EXHAUSTED
        assert machine.attempt == 2
        assert delays == [1000, 2000]

    def test_zero_retries_never_backs_off(self):
        machine = RetryStateMachine(max_retries=0)
        assert machine.on_failure(ApiError("x", 503)) is RetryState.EXHAUSTED

    def test_invalid_transitions_raise(self):
        machine = RetryStateMachine(max_retries=1)
        with pytest.raises(RuntimeError):
            machine.after_backoff()
        machine.on_success()
        with pytest.raises(RuntimeError):
            machine.on_failure(ApiError("x", 500))

    def test_rejects_negative_max_retries(self):
        with pytest.raises(ValueError):
            RetryStateMachine(max_retries=-1)
