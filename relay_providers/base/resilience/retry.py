"""Retry engine: exponential backoff driven by the error taxonomy.

The engine re-invokes an operation while the failure is classified as
retryable. Delays are expressed in milliseconds to keep parity with vendor
``Retry-After`` style hints; sleeping converts to seconds.

Delay for attempt ``n`` (1-based, counting the attempt that just failed)::

    min(base_delay_ms * backoff_multiplier ** (n - 1), max_delay_ms)

optionally inflated by up to 25% jitter.
"""
from __future__ import annotations

import functools
import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol, TypeVar

from ..errors import AppError, ErrorCode
from ..logging import get_logger, normalized_log_event

T = TypeVar("T")

_logger = get_logger(__name__)

_JITTER_FACTOR = 0.25

_NON_RETRYABLE_PATTERNS = (
    "invalid api key",
    "unauthorized",
    "forbidden",
    "not found",
    "401",
    "403",
    "404",
    "authentication",
    "permission denied",
)
_RETRYABLE_PATTERNS = (
    "timeout",
    "timed out",
    "network",
    "connection",
    "rate limit",
    "too many requests",
    "overload",
    "busy",
    "temporarily unavailable",
    "service unavailable",
    "429",
    "502",
    "503",
    "504",
    "529",
    "econnreset",
    "etimedout",
    "econnrefused",
)


class OnRetry(Protocol):  # pragma: no cover - structural protocol
    def __call__(self, attempt: int, error: BaseException, delay_ms: float) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    """Backoff policy for :func:`with_retry`.

    Attributes:
        max_attempts: Total attempts including the first call.
        base_delay_ms: Delay before the second attempt.
        max_delay_ms: Upper bound for a single delay (before jitter).
        backoff_multiplier: Growth factor between consecutive delays.
        jitter: Add up to 25% random extra delay.
        retryable_codes: Optional allow-list; when non-empty only these codes
            are retried, regardless of the error's ``retryable`` flag.
    """

    max_attempts: int = 3
    base_delay_ms: float = 1000
    max_delay_ms: float = 10000
    backoff_multiplier: float = 2
    jitter: bool = True
    retryable_codes: Optional[tuple[ErrorCode, ...]] = None

    def base_delay_for(self, attempt: int) -> float:
        """Return the un-jittered delay after failed attempt ``attempt`` (1-based)."""
        return min(self.base_delay_ms * self.backoff_multiplier ** (attempt - 1), self.max_delay_ms)

    def delays(self) -> Iterable[float]:
        """Yield the un-jittered delays between consecutive attempts."""
        for attempt in range(1, self.max_attempts):
            yield self.base_delay_for(attempt)


DEFAULT_RETRY_CONFIG = RetryConfig()


def compute_delay(attempt: int, config: RetryConfig = DEFAULT_RETRY_CONFIG) -> float:
    """Return the delay (ms) to wait after failed attempt ``attempt``."""
    delay = config.base_delay_for(attempt)
    if config.jitter:
        delay += random.random() * _JITTER_FACTOR * delay  # nosec B311 - jitter, not crypto
    return delay


def is_retryable_error(error: BaseException) -> bool:
    """Infer retryability of an untyped exception from its message.

    The non-retryable list is consulted first so that e.g. "401 connection
    rejected" is not retried.
    """
    message = str(error).lower()
    if any(p in message for p in _NON_RETRYABLE_PATTERNS):
        return False
    return any(p in message for p in _RETRYABLE_PATTERNS)


def should_retry(error: object, allowed_codes: Optional[Iterable[ErrorCode]] = None) -> bool:
    """Decide whether ``error`` warrants another attempt.

    - Non-recoverable typed errors are never retried.
    - With a non-empty ``allowed_codes`` only membership matters.
    - Otherwise typed errors use their ``retryable`` flag and other exceptions
      fall back to :func:`is_retryable_error`.
    """
    if isinstance(error, AppError):
        if not error.recoverable:
            return False
        allowed = tuple(allowed_codes or ())
        if allowed:
            return error.code in allowed
        return error.retryable
    if isinstance(error, Exception):
        return is_retryable_error(error)
    return False


def with_retry(
    operation: Callable[[], T],
    config: RetryConfig | None = None,
    on_retry: OnRetry | None = None,
) -> T:
    """Run ``operation`` under the retry policy and return its result.

    The last failure propagates unchanged (same exception object), either
    when attempts are exhausted or as soon as :func:`should_retry` says no.
    """
    cfg = config or DEFAULT_RETRY_CONFIG
    attempt = 1
    while True:
        try:
            return operation()
        except Exception as exc:
            if attempt >= cfg.max_attempts or not should_retry(exc, cfg.retryable_codes):
                raise
            delay_ms = compute_delay(attempt, cfg)
            normalized_log_event(
                _logger,
                "retry.attempt",
                phase="retry",
                attempt=attempt,
                error_code=exc.code.value if isinstance(exc, AppError) else None,
                level=logging.DEBUG,
                delay_ms=round(delay_ms, 1),
                max_attempts=cfg.max_attempts,
            )
            if on_retry is not None:
                on_retry(attempt, exc, delay_ms)
            time.sleep(delay_ms / 1000.0)
            attempt += 1


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG, on_retry: OnRetry | None = None):
    """Decorator form of :func:`with_retry` preserving the wrapped signature."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return with_retry(lambda: func(*args, **kwargs), config, on_retry)

        return wrapper

    return decorator


def create_retryable_action(
    func: Callable[..., T],
    config: RetryConfig | None = None,
    on_retry: OnRetry | None = None,
) -> Callable[..., T]:
    """Return a callable that runs ``func(*args, **kwargs)`` under ``with_retry``."""
    return retry(config or DEFAULT_RETRY_CONFIG, on_retry)(func)


def calculate_max_wait_time(config: RetryConfig | None = None) -> float:
    """Return the worst-case total backoff (ms) across all retries.

    With jitter enabled the sum is inflated by the maximum jitter factor.
    """
    cfg = config or DEFAULT_RETRY_CONFIG
    total = sum(cfg.delays())
    if cfg.jitter:
        total *= 1 + _JITTER_FACTOR
    return total


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
