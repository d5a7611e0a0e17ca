"""Shared helpers for adapter wire tests (mock transports, SSE bodies, messages)."""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import httpx

from relay_providers.base.models import Message


def sse_body(frames: Iterable[Any], *, event: Optional[str] = None) -> bytes:
    """Encode ``frames`` as SSE ``data:`` frames (dicts are JSON-encoded).

    A frame given as ``(name, payload)`` is emitted with an ``event:`` line.
    """
    out: List[str] = []
    for frame in frames:
        name = event
        if isinstance(frame, tuple):
            name, frame = frame
        data = frame if isinstance(frame, str) else json.dumps(frame)
        if name:
            out.append(f"event: {name}")
        out.append(f"data: {data}")
        out.append("")
    return ("\n".join(out) + "\n").encode("utf-8")


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.requests: List[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self._responses) > 1:
            return self._responses.pop(0)
        return self._responses[0]

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last.content)


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def json_response(payload: Dict[str, Any], status: int = 200) -> httpx.Response:
    return httpx.Response(status, json=payload)


def sse_response(frames: Iterable[Any], *, event: Optional[str] = None) -> httpx.Response:
    return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=sse_body(frames, event=event))


def message(
    idx: int,
    content: str,
    *,
    sender_type: str = "user",
    sender: str = "User",
    provider_id: Optional[str] = None,
) -> Message:
    return Message(
        id=f"message-{idx}",
        sender=sender,
        sender_type=sender_type,  # type: ignore[arg-type]
        content=content,
        timestamp=float(idx),
        provider_id=provider_id,
    )


def collect(events: Iterable[Any]) -> List[Any]:
    return list(events)


def texts(events: Sequence[Any]) -> str:
    return "".join(getattr(e, "text", "") for e in events)
