"""Canonical stream events.

Every vendor translator reduces its wire format to this small tagged union:

- ``TextDelta``: an incremental piece of response text. Deltas are delivered
  in vendor order; joining them reconstructs the full response.
- ``Citations``: sources referenced by the response (side channel).
- ``StreamError``: terminal failure, already carrying display-safe text.
- ``Done``: terminal success (``cancelled=True`` when the caller cancelled).

Exactly one ``StreamError`` or ``Done`` ends a stream.

``RawVendorEvent`` is not part of the union: translators use it to forward
non-text vendor payloads to the caller's ``on_event`` hook for diagnostics.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..errors import AppError
from ..models import Citation


@dataclass(frozen=True)
class TextDelta:
    text: str


@dataclass(frozen=True)
class Citations:
    citations: Tuple[Citation, ...]


@dataclass(frozen=True)
class StreamError:
    """Terminal stream failure.

    Attributes:
        message: Display-safe message (extracted from vendor payloads).
        retryable: Whether re-issuing the request may succeed.
        status: HTTP status when the failure came from a non-2xx response.
        error: Typed error when the failure was already classified (e.g. a
            transport exception normalized to ``NetworkError``).
    """

    message: str
    retryable: bool = True
    status: Optional[int] = None
    error: Optional[AppError] = field(default=None, compare=False)


@dataclass(frozen=True)
class Done:
    cancelled: bool = False


StreamEvent = Union[TextDelta, Citations, StreamError, Done]


@dataclass(frozen=True)
class RawVendorEvent:
    """Non-text vendor payload forwarded to ``on_event`` (never yielded)."""

    type: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def as_side_event(self) -> Dict[str, Any]:
        return {"type": self.type, **self.payload}


def is_terminal(event: object) -> bool:
    """Return True for the events that end a stream."""
    return isinstance(event, (Done, StreamError))


def accumulate_text(events: Iterable[object]) -> str:
    """Concatenate the text of every ``TextDelta`` in ``events``."""
    return "".join(e.text for e in events if isinstance(e, TextDelta))


__all__ = [
    "TextDelta",
    "Citations",
    "StreamError",
    "Done",
    "StreamEvent",
    "RawVendorEvent",
    "is_terminal",
    "accumulate_text",
]
