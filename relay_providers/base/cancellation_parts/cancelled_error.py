"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
inside blocking helpers. Streams never raise it to the caller; a cancelled
stream simply ends.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a blocking operation observes a cancellation request."""


__all__ = ["CancelledError"]
