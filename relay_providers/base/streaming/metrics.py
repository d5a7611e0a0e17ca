"""Per-stream metrics and the consolidated terminal log event."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from ..log_support import LogContext
from ..logging import normalized_log_event


@dataclass
class StreamMetrics:
    """Counters collected while one stream is consumed."""

    started_at: float = field(default_factory=time.monotonic)
    emitted: int = 0
    characters: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def record_delta(self, text: str) -> None:
        if self.emitted == 0:
            self.time_to_first_token_ms = (time.monotonic() - self.started_at) * 1000.0
        self.emitted += 1
        self.characters += len(text)

    def finish(self) -> None:
        self.total_duration_ms = (time.monotonic() - self.started_at) * 1000.0


def log_stream_end(
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    *,
    outcome: str,
    error_code: Optional[str] = None,
    error: Optional[str] = None,
) -> None:
    """Emit ``stream.end``, ``stream.cancelled`` or ``stream.error`` with metrics.

    ``outcome`` is one of ``"end"``, ``"cancelled"`` or ``"error"``.
    """
    metrics.finish()
    normalized_log_event(
        logger,
        f"stream.{outcome}",
        ctx,
        phase="finalize",
        error_code=error_code,
        emitted=metrics.emitted > 0,
        level=logging.WARNING if outcome == "error" else logging.INFO,
        emitted_count=metrics.emitted,
        characters=metrics.characters,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=error,
    )


__all__ = ["StreamMetrics", "log_stream_end"]
