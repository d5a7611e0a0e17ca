"""
Structured application error base type.

`AppError` is the only failure type that crosses the public boundary of the
provider layer. It separates the technical ``message`` (for logs) from the
``user_message`` (safe for direct display) and carries two orthogonal flags:

- ``retryable``: the failure is expected to be transient; the retry engine
  may re-invoke the operation.
- ``recoverable``: the caller can continue the session at all. A
  non-recoverable error is never retried, whatever ``retryable`` says.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .error_code import ErrorCode, ErrorSeverity
from .user_messages import user_message_for


@dataclass(eq=False)
class AppError(Exception):
    """Typed error with a normalized code and display text.

    Attributes:
        code: Closed :class:`ErrorCode` classification for the failure.
        message: Technical message suitable for logging.
        user_message: Display text; defaults to the table entry for ``code``.
        severity: Whether an outer layer should treat the failure as blocking.
        recoverable: ``False`` when the session cannot continue.
        retryable: Hint consumed by the retry engine.
        context: Free-form diagnostic key/values (provider, status, ...).
        cause: Original exception or payload, when one exists.
        timestamp: Creation time (epoch seconds).
    """

    code: ErrorCode
    message: str
    user_message: Optional[str] = None
    severity: ErrorSeverity = ErrorSeverity.ERROR
    recoverable: bool = True
    retryable: bool = False
    context: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if not self.user_message:
            self.user_message = user_message_for(self.code)
        Exception.__init__(self, self.message)

    def merge_context(self, extra: Optional[Dict[str, Any]]) -> "AppError":
        """Add keys from ``extra`` that are not already present (returns self)."""
        if extra:
            for key, value in extra.items():
                self.context.setdefault(key, value)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly representation for logs and transport."""
        return {
            "name": type(self).__name__,
            "code": self.code.value,
            "message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": self.recoverable,
            "retryable": self.retryable,
            "context": dict(self.context),
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


__all__ = ["AppError"]
