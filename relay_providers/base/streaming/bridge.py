"""Push-to-pull bridge between an event producer and the caller's iterator.

The SSE reader thread *pushes* events as they arrive; the caller *pulls*
them by iterating. Events pushed before the caller asks are buffered in
order; a caller already waiting is woken as soon as an event arrives.

Invariants
----------
* Single consumer: iterating a bridge twice raises ``RuntimeError``.
* Exactly one terminal event (``Done`` or ``StreamError``) is ever yielded;
  pushes after the terminal event are dropped.
* ``cancel()`` discards buffered events and ends iteration with
  ``Done(cancelled=True)``; it never produces an error.
* An idle period longer than ``idle_timeout`` ends the stream with a
  retryable ``StreamError``.

Backpressure is cooperative: the buffer is unbounded and callers are
expected to drain promptly.
"""
from __future__ import annotations

import time
from collections import deque
from threading import Condition
from typing import Deque, Iterator, Optional

from ..errors import NetworkError
from .events import Done, StreamError, is_terminal

_IDLE_TIMEOUT_MESSAGE = "Stream timed out waiting for data"


class StreamBridge:
    """Thread-safe single-consumer event queue."""

    def __init__(self, idle_timeout: Optional[float] = None) -> None:
        self._items: Deque[object] = deque()
        self._cond = Condition()
        self._idle_timeout = idle_timeout
        self._terminated = False
        self._cancelled = False
        self._consumed = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def closed(self) -> bool:
        """Whether no further events will be accepted."""
        return self._terminated or self._cancelled

    def push(self, item: object) -> bool:
        """Enqueue ``item``; return False when the bridge is already closed."""
        with self._cond:
            if self._terminated or self._cancelled:
                return False
            self._items.append(item)
            if is_terminal(item):
                self._terminated = True
            self._cond.notify()
            return True

    def complete(self) -> bool:
        """Push the terminal ``Done`` event (no-op when already terminated)."""
        return self.push(Done())

    def cancel(self) -> None:
        """End the stream silently; idempotent."""
        with self._cond:
            if self._cancelled:
                return
            self._cancelled = True
            self._items.clear()
            self._cond.notify_all()

    def _next(self) -> object:
        deadline = None if self._idle_timeout is None else time.monotonic() + self._idle_timeout
        with self._cond:
            while not self._items and not self._cancelled:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    self._terminated = True
                    timeout_ms = (self._idle_timeout or 0) * 1000
                    return StreamError(
                        _IDLE_TIMEOUT_MESSAGE,
                        retryable=True,
                        error=NetworkError.timeout(timeout_ms),
                    )
                self._cond.wait(remaining)
            if self._cancelled:
                return Done(cancelled=True)
            return self._items.popleft()

    def __iter__(self) -> Iterator[object]:
        with self._cond:
            if self._consumed:
                raise RuntimeError("stream bridge supports a single consumer")
            self._consumed = True
        while True:
            item = self._next()
            yield item
            if is_terminal(item):
                return


__all__ = ["StreamBridge"]
