"""Wire an SSE event source, a vendor translator and the pull bridge together.

:func:`run_sse_stream` is the single streaming driver used by every vendor
adapter with a true wire-level stream. It owns the stream lifecycle::

    Idle -> Connecting -> Open -> Delivering* -> Completed | Failed

* Vendor frames are handed to the adapter's translator, the only code that
  knows vendor event names. Its canonical events are pushed to the bridge.
* A terminal event from the translator closes the connection.
* Non-2xx responses and transport failures become a single ``StreamError``
  whose text went through :func:`extract_sse_error_message`.
* A cancellation token closes the connection and releases the consumer with
  ``Done(cancelled=True)``.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Optional, Protocol, Sequence

import httpx

from ..cancellation import CancellationToken
from ..errors import APIError, extract_sse_error_message, normalize_error
from ..timeouts import get_timeout_config
from .bridge import StreamBridge
from .events import StreamError, is_terminal
from .sse import SSEEvent, SSEEventSource, SSEFailure


class StreamTranslator(Protocol):  # pragma: no cover - structural protocol
    """Per-stream callable mapping one vendor frame to canonical events."""

    def __call__(self, event_name: str, data: str) -> Sequence[object]: ...


def stream_error_from_failure(
    failure: SSEFailure,
    provider: str,
    default_message: str = "Connection failed",
) -> StreamError:
    """Convert a reader failure into a terminal ``StreamError``.

    The typed error attached to the event is what ``stream_message`` raises:
    an ``APIError`` for HTTP statuses, the normalized error (usually a
    ``NetworkError``) for transport exceptions.
    """
    message = extract_sse_error_message(failure.as_payload(), default_message)
    if failure.status is not None:
        error = APIError.from_http_status(failure.status, provider, message)
    elif failure.exception is not None:
        error = normalize_error(failure.exception, {"provider": provider, "phase": "stream"})
    else:
        error = APIError.streaming_failed(provider, message)
    return StreamError(message=message, retryable=error.retryable, status=failure.status, error=error)


def run_sse_stream(
    client: httpx.Client,
    url: str,
    *,
    provider: str,
    translator: StreamTranslator,
    json: Any = None,
    headers: Optional[Dict[str, str]] = None,
    method: str = "POST",
    cancel_token: Optional[CancellationToken] = None,
    idle_timeout: Optional[float] = None,
    default_error_message: str = "Connection failed",
) -> Iterator[object]:
    """Open a vendor SSE stream and yield translated events in order.

    Yields canonical events plus ``RawVendorEvent`` side-channel items. The
    last item is always ``Done`` or ``StreamError``. Closing the generator
    early closes the connection.
    """
    bridge = StreamBridge(idle_timeout or get_timeout_config().stream_timeout_seconds)
    source: Optional[SSEEventSource] = None

    def _on_event(event: SSEEvent) -> None:
        for item in translator(event.event, event.data):
            bridge.push(item)
            if is_terminal(item):
                _close()
                return

    def _on_error(failure: SSEFailure) -> None:
        bridge.push(stream_error_from_failure(failure, provider, default_error_message))
        _close()

    def _on_close() -> None:
        bridge.complete()

    def _close() -> None:
        if source is not None:
            source.close()

    source = SSEEventSource(
        client,
        method,
        url,
        json=json,
        headers=headers,
        on_event=_on_event,
        on_error=_on_error,
        on_close=_on_close,
        name=provider,
    )

    def _cancel() -> None:
        _close()
        bridge.cancel()

    unregister: Callable[[], None] = cancel_token.on_cancel(_cancel) if cancel_token else (lambda: None)
    try:
        source.open()
        yield from bridge
    finally:
        unregister()
        _close()


__all__ = ["StreamTranslator", "run_sse_stream", "stream_error_from_failure"]
