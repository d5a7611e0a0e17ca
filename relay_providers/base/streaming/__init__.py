"""Streaming primitives: canonical events, SSE reader, bridge and drivers."""

from .events import (
    Citations,
    Done,
    RawVendorEvent,
    StreamError,
    StreamEvent,
    TextDelta,
    accumulate_text,
    is_terminal,
)
from .bridge import StreamBridge
from .sse import SSEEvent, SSEEventSource, SSEFailure, iter_sse_events
from .pipeline import StreamTranslator, run_sse_stream, stream_error_from_failure
from .simulated import chunk_text, simulate_stream

__all__ = [
    "Citations",
    "Done",
    "RawVendorEvent",
    "StreamError",
    "StreamEvent",
    "TextDelta",
    "accumulate_text",
    "is_terminal",
    "StreamBridge",
    "SSEEvent",
    "SSEEventSource",
    "SSEFailure",
    "iter_sse_events",
    "StreamTranslator",
    "run_sse_stream",
    "stream_error_from_failure",
    "chunk_text",
    "simulate_stream",
]
