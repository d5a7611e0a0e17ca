from __future__ import annotations

import threading

import pytest

from relay_providers.base.cancellation import CancellationToken, CancelledError


def test_cancel_runs_callbacks_once_and_is_idempotent():
    token = CancellationToken()
    calls = []
    token.on_cancel(lambda: calls.append("a"))
    token.cancel("user")
    token.cancel("again")
    assert calls == ["a"]  # nosec B101
    assert token.cancelled and token.reason == "user"  # nosec B101


def test_on_cancel_after_cancel_runs_immediately():
    token = CancellationToken()
    token.cancel()
    calls = []
    unregister = token.on_cancel(lambda: calls.append(1))
    assert calls == [1]  # nosec B101
    unregister()


def test_unregister_prevents_callback():
    token = CancellationToken()
    calls = []
    unregister = token.on_cancel(lambda: calls.append(1))
    unregister()
    token.cancel()
    assert calls == []  # nosec B101


def test_failing_callback_does_not_block_others():
    token = CancellationToken()
    calls = []

    def boom():
        raise RuntimeError("callback failure")

    token.on_cancel(boom)
    token.on_cancel(lambda: calls.append("ok"))
    token.cancel()
    assert calls == ["ok"]  # nosec B101


def test_parent_cascades_to_children():
    parent = CancellationToken()
    child = parent.child()
    grandchild = child.child()
    parent.cancel("shutdown")
    assert child.cancelled and grandchild.cancelled  # nosec B101
    assert grandchild.reason == "shutdown"  # nosec B101
    late = CancellationToken(parent=parent)
    assert late.cancelled  # nosec B101


def test_raise_if_cancelled():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("stop")
    with pytest.raises(CancelledError, match="stop"):
        token.raise_if_cancelled()


def test_wait_is_released_by_cancel_from_another_thread():
    token = CancellationToken()
    timer = threading.Timer(0.01, token.cancel)
    timer.start()
    try:
        assert token.wait(5) is True  # nosec B101
    finally:
        timer.cancel()
    assert CancellationToken().wait(0.001) is False  # nosec B101
