"""Simulated streaming for vendors without a usable wire-level stream.

Some vendor paths only return citation metadata on the blocking endpoint.
Those adapters perform one request and re-chunk the full text here so the
caller still sees incremental delivery with the same event contract.
"""
from __future__ import annotations

import time
from typing import Iterator, Optional, Sequence

from ..cancellation import CancellationToken
from ..models import Citation
from .events import Citations, Done, TextDelta

CHUNK_SIZE = 8
CHUNK_DELAY_SECONDS = 0.012


def chunk_text(text: str, size: int = CHUNK_SIZE) -> list[str]:
    """Split ``text`` into consecutive ``size``-character pieces."""
    return [text[i : i + size] for i in range(0, len(text), size)]


def simulate_stream(
    text: str,
    *,
    citations: Optional[Sequence[Citation]] = None,
    cancel_token: Optional[CancellationToken] = None,
    chunk_size: int = CHUNK_SIZE,
    delay_seconds: float = CHUNK_DELAY_SECONDS,
) -> Iterator[object]:
    """Yield ``text`` as paced ``TextDelta`` chunks, then citations and ``Done``.

    Pacing waits on the cancellation token when one is given so that a
    cancel request interrupts the delay and ends the stream at once.
    """
    chunks = chunk_text(text, chunk_size)
    for i, chunk in enumerate(chunks):
        if cancel_token is not None and cancel_token.cancelled:
            yield Done(cancelled=True)
            return
        yield TextDelta(chunk)
        if i == len(chunks) - 1 or delay_seconds <= 0:
            continue
        if cancel_token is not None:
            if cancel_token.wait(delay_seconds):
                yield Done(cancelled=True)
                return
        else:
            time.sleep(delay_seconds)
    if citations:
        yield Citations(tuple(citations))
    yield Done()


__all__ = ["simulate_stream", "chunk_text", "CHUNK_SIZE", "CHUNK_DELAY_SECONDS"]
