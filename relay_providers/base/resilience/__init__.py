"""Resilience helpers (retry policy and backoff)."""

from .retry import (
    DEFAULT_RETRY_CONFIG,
    RetryConfig,
    calculate_max_wait_time,
    compute_delay,
    create_retryable_action,
    is_retryable_error,
    retry,
    should_retry,
    with_retry,
)

__all__ = [
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "compute_delay",
    "is_retryable_error",
    "should_retry",
    "with_retry",
    "retry",
    "create_retryable_action",
    "calculate_max_wait_time",
]
