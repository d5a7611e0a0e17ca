from __future__ import annotations

import threading

import pytest

from relay_providers.base.errors import ErrorCode
from relay_providers.base.streaming import Done, StreamBridge, StreamError, TextDelta


def test_buffered_events_are_yielded_in_order():
    bridge = StreamBridge()
    bridge.push(TextDelta("a"))
    bridge.push(TextDelta("b"))
    bridge.complete()
    assert list(bridge) == [TextDelta("a"), TextDelta("b"), Done()]  # nosec B101


def test_pushes_after_terminal_are_dropped():
    bridge = StreamBridge()
    assert bridge.push(StreamError("boom")) is True  # nosec B101
    assert bridge.push(TextDelta("late")) is False  # nosec B101
    assert bridge.complete() is False  # nosec B101
    assert list(bridge) == [StreamError("boom")]  # nosec B101


def test_waiting_consumer_is_woken_by_producer_thread():
    bridge = StreamBridge(idle_timeout=5)

    def produce():
        bridge.push(TextDelta("x"))
        bridge.complete()

    threading.Timer(0.01, produce).start()
    assert list(bridge) == [TextDelta("x"), Done()]  # nosec B101


def test_cancel_discards_buffer_and_ends_silently():
    bridge = StreamBridge()
    bridge.push(TextDelta("never seen"))
    bridge.cancel()
    bridge.cancel()
    assert list(bridge) == [Done(cancelled=True)]  # nosec B101
    assert bridge.closed and bridge.cancelled  # nosec B101


def test_single_consumer():
    bridge = StreamBridge()
    bridge.complete()
    list(bridge)
    with pytest.raises(RuntimeError):
        list(bridge)


def test_idle_timeout_yields_retryable_error():
    bridge = StreamBridge(idle_timeout=0.01)
    events = list(bridge)
    assert len(events) == 1  # nosec B101
    err = events[0]
    assert isinstance(err, StreamError) and err.retryable  # nosec B101
    assert err.error is not None and err.error.code is ErrorCode.NETWORK_TIMEOUT  # nosec B101
