"""Server-sent events: line parser and push-based event source.

``iter_sse_events`` turns the text lines of an ``httpx`` streaming response
into :class:`SSEEvent` frames (``event:`` name defaulting to ``message``,
multi-line ``data:`` joined with newlines, ``:`` comments ignored).

``SSEEventSource`` owns one streaming request. ``open()`` starts a daemon
reader thread that performs the request and *pushes* every frame to the
``on_event`` callback; non-2xx responses and transport failures are reported
once through ``on_error``; a clean end of body calls ``on_close``. ``close()``
may be called from any thread: it marks the source closed, closes the
response and suppresses any further callbacks.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import httpx

_logger = logging.getLogger("relay.streaming.sse")

_DEFAULT_EVENT = "message"


@dataclass(frozen=True)
class SSEEvent:
    """One dispatched SSE frame."""

    event: str
    data: str
    id: Optional[str] = None


@dataclass(frozen=True)
class SSEFailure:
    """Failure observed by the reader thread.

    ``status``/``body`` are set for non-2xx responses; ``exception`` for
    transport failures (connect errors, timeouts, broken streams).
    """

    status: Optional[int] = None
    body: Optional[str] = None
    exception: Optional[BaseException] = None

    def as_payload(self) -> Dict[str, Any]:
        """Shape accepted by ``extract_sse_error_message``."""
        payload: Dict[str, Any] = {}
        if self.body:
            payload["data"] = self.body
        if self.exception is not None:
            payload["message"] = str(self.exception)
        if self.status is not None:
            payload["status"] = self.status
        return payload


def iter_sse_events(lines: Iterable[str]) -> Iterator[SSEEvent]:
    """Parse SSE ``lines`` (without line terminators) into events."""
    name: Optional[str] = None
    data: List[str] = []
    event_id: Optional[str] = None
    for raw in lines:
        line = raw.rstrip("\r")
        if not line:
            if data:
                yield SSEEvent(event=name or _DEFAULT_EVENT, data="\n".join(data), id=event_id)
            name, data = None, []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            name = value
        elif field == "data":
            data.append(value)
        elif field == "id":
            event_id = value
    if data:
        yield SSEEvent(event=name or _DEFAULT_EVENT, data="\n".join(data), id=event_id)


class SSEEventSource:
    """Push-based SSE reader running on a background thread."""

    def __init__(
        self,
        client: httpx.Client,
        method: str,
        url: str,
        *,
        on_event: Callable[[SSEEvent], None],
        on_error: Callable[[SSEFailure], None],
        on_close: Callable[[], None],
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        name: str = "sse",
    ) -> None:
        self._client = client
        self._method = method
        self._url = url
        self._json = json
        self._headers = headers
        self._on_event = on_event
        self._on_error = on_error
        self._on_close = on_close
        self._name = name
        self._lock = threading.Lock()
        self._closed = False
        self._response: Optional[httpx.Response] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        """Start the reader thread (no-op when already closed or started)."""
        with self._lock:
            if self._closed or self._thread is not None:
                return
            self._thread = threading.Thread(target=self._run, name=f"{self._name}-reader", daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Stop delivering callbacks and close the underlying response."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            response = self._response
        if response is not None:
            try:
                response.close()
            except (httpx.HTTPError, OSError, RuntimeError):
                _logger.debug("error closing SSE response", exc_info=True)

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        try:
            with self._client.stream(self._method, self._url, json=self._json, headers=self._headers) as response:
                with self._lock:
                    if self._closed:
                        return
                    self._response = response
                if response.status_code >= 400:
                    body = response.read().decode("utf-8", errors="replace")
                    self._report(SSEFailure(status=response.status_code, body=body))
                    return
                for event in iter_sse_events(response.iter_lines()):
                    if self._closed:
                        return
                    self._on_event(event)
            if not self._closed:
                self._on_close()
        except Exception as exc:  # noqa: BLE001 - reported to the consumer through on_error
            if self._closed:
                _logger.debug("SSE reader stopped after close: %s", exc)
                return
            self._report(SSEFailure(exception=exc))

    def _report(self, failure: SSEFailure) -> None:
        if not self._closed:
            self._on_error(failure)


__all__ = ["SSEEvent", "SSEFailure", "SSEEventSource", "iter_sse_events"]
