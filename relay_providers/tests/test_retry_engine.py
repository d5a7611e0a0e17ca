from __future__ import annotations

import importlib

import pytest

from relay_providers.base.errors import APIError, AuthError, ErrorCode, ValidationError
from relay_providers.base.resilience import (
    RetryConfig,
    calculate_max_wait_time,
    compute_delay,
    create_retryable_action,
    is_retryable_error,
    retry,
    should_retry,
    with_retry,
)


class _Flaky:
    def __init__(self, fail_times: int, error: BaseException):
        self.calls = 0
        self.fail_times = fail_times
        self.error = error

    def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise self.error
        return "ok"


def test_always_failing_retryable_operation_is_called_max_attempts_times(no_sleep):
    error = APIError.from_http_status(503, "openai")
    flaky = _Flaky(fail_times=99, error=error)
    with pytest.raises(APIError) as ei:
        with_retry(flaky, RetryConfig(max_attempts=3, jitter=False))
    assert flaky.calls == 3  # nosec B101
    assert ei.value is error  # nosec B101
    assert no_sleep == [1.0, 2.0]  # nosec B101


def test_succeeds_after_transient_failures(no_sleep):
    flaky = _Flaky(fail_times=2, error=APIError.from_http_status(429, "x"))
    seen = []
    result = with_retry(flaky, RetryConfig(jitter=False), on_retry=lambda a, e, d: seen.append((a, d)))
    assert result == "ok"  # nosec B101
    assert flaky.calls == 3  # nosec B101
    assert seen == [(1, 1000), (2, 2000)]  # nosec B101


def test_non_retryable_propagates_immediately(no_sleep):
    flaky = _Flaky(fail_times=99, error=APIError.from_http_status(401, "x"))
    with pytest.raises(APIError):
        with_retry(flaky, RetryConfig(max_attempts=5))
    assert flaky.calls == 1  # nosec B101
    assert no_sleep == []  # nosec B101


def test_non_recoverable_is_never_retried_even_when_allow_listed(no_sleep):
    error = AuthError.user_disabled()
    flaky = _Flaky(fail_times=99, error=error)
    cfg = RetryConfig(max_attempts=4, retryable_codes=(ErrorCode.AUTH_USER_DISABLED,))
    with pytest.raises(AuthError):
        with_retry(flaky, cfg)
    assert flaky.calls == 1  # nosec B101


def test_allow_list_overrides_retryable_flag():
    validation = ValidationError.required("Message")
    assert should_retry(validation, [ErrorCode.VALIDATION_REQUIRED]) is True  # nosec B101
    server = APIError.from_http_status(500)
    assert should_retry(server, [ErrorCode.API_RATE_LIMITED]) is False  # nosec B101
    assert should_retry(server) is True  # nosec B101
    assert should_retry(server, []) is True  # nosec B101


def test_untyped_errors_use_keyword_heuristics():
    assert is_retryable_error(Exception("ETIMEDOUT while reading")) is True  # nosec B101
    assert is_retryable_error(Exception("503 Service Unavailable")) is True  # nosec B101
    assert is_retryable_error(Exception("401 connection rejected")) is False  # nosec B101
    assert is_retryable_error(Exception("permission denied")) is False  # nosec B101
    assert is_retryable_error(Exception("division by zero")) is False  # nosec B101
    assert should_retry("not an exception") is False  # nosec B101


def test_compute_delay_caps_and_jitter(monkeypatch):
    cfg = RetryConfig(base_delay_ms=1000, max_delay_ms=5000, backoff_multiplier=3, jitter=False)
    assert [compute_delay(n, cfg) for n in (1, 2, 3)] == [1000, 3000, 5000]  # nosec B101
    monkeypatch.setattr(importlib.import_module("relay_providers.base.resilience.retry").random, "random", lambda: 1.0)
    assert compute_delay(1, RetryConfig(jitter=True)) == 1250  # nosec B101


def test_calculate_max_wait_time():
    cfg = RetryConfig(max_attempts=4, base_delay_ms=500, backoff_multiplier=2, jitter=False)
    assert calculate_max_wait_time(cfg) == 3500  # nosec B101
    jittered = RetryConfig(max_attempts=4, base_delay_ms=500, backoff_multiplier=2, jitter=True)
    assert calculate_max_wait_time(jittered) == 3500 * 1.25  # nosec B101
    assert calculate_max_wait_time(RetryConfig(max_attempts=1)) == 0  # nosec B101


def test_decorator_and_retryable_action(no_sleep):
    flaky = _Flaky(fail_times=1, error=Exception("connection reset"))

    @retry(RetryConfig(jitter=False))
    def run(suffix: str) -> str:
        return flaky() + suffix

    assert run("!") == "ok!"  # nosec B101
    assert run.__name__ == "run"  # nosec B101

    other = _Flaky(fail_times=1, error=Exception("rate limit hit"))
    action = create_retryable_action(lambda: other(), RetryConfig(jitter=False))
    assert action() == "ok"  # nosec B101
    assert other.calls == 2  # nosec B101
