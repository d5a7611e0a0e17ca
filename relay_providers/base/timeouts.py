"""Unified timeout configuration for the relay provider layer.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, re-parsed only when the
    relevant environment variables change. Supported variables (all
    optional, positive floats):
        PT_TIMEOUT_CONNECT_SECONDS
        PT_TIMEOUT_STREAM_SECONDS
        PT_TIMEOUT_HTTP_SECONDS

httpx_timeout()
    Builds the ``httpx.Timeout`` used by the pooled clients: connect from
    the connect timeout, read from the HTTP timeout.

Design Constraints
------------------
1. No ad-hoc numeric timeouts in adapters; they read this module.
2. Avoid per-call env parsing (cache keyed on the raw env values).
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

_ENV_NAMES = (
    "PT_TIMEOUT_CONNECT_SECONDS",
    "PT_TIMEOUT_STREAM_SECONDS",
    "PT_TIMEOUT_HTTP_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        stream_timeout_seconds: Idle time allowed between two stream events
            before the stream is failed as timed out.
        http_timeout_seconds: Read timeout for non-streaming requests.
    """

    connect_timeout_seconds: float = 10.0
    stream_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 60.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: tuple[str, ...] | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float; ``default`` when unset or invalid."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = tuple(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float("PT_TIMEOUT_CONNECT_SECONDS", defaults.connect_timeout_seconds),
        stream_timeout_seconds=_parse_env_float("PT_TIMEOUT_STREAM_SECONDS", defaults.stream_timeout_seconds),
        http_timeout_seconds=_parse_env_float("PT_TIMEOUT_HTTP_SECONDS", defaults.http_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


def httpx_timeout(cfg: TimeoutConfig | None = None) -> httpx.Timeout:
    """Return an ``httpx.Timeout`` derived from ``cfg`` (or the cached config)."""
    cfg = cfg or get_timeout_config()
    return httpx.Timeout(cfg.http_timeout_seconds, connect=cfg.connect_timeout_seconds)


__all__ = ["TimeoutConfig", "get_timeout_config", "httpx_timeout"]
