"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose the cancellation constructs via the canonical
``relay_providers.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` is the cancel signal passed to ``stream_message``.
  Cancelling it closes the underlying connection and ends the stream
  silently through callbacks registered with ``on_cancel``.
- ``CancelledError`` is raised by blocking helpers that poll the token via
  ``raise_if_cancelled`` (retry backoff, simulated-stream pacing).
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
