"""Shared HTTP client pool for vendor adapters.

Purpose:
    Keep one reusable ``httpx.Client`` per ``(base_url, purpose)`` so that
    adapters created per session share connection pools instead of opening
    fresh connections per call.

Timeout strategy:
    Clients are created with :func:`httpx_timeout` at first use. Streaming
    idle time is enforced separately by the stream bridge.

Lifecycle & cleanup:
    All pooled clients are closed at interpreter exit via ``atexit``; tests
    call :func:`close_all_clients` explicitly. Adapters may instead be given
    their own client (e.g. one built on ``httpx.MockTransport``), which the
    pool never touches.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import httpx_timeout

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()
_logger = logging.getLogger("relay.http")


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    Parameters:
        base_url: API base URL set on the client so relative request paths
            work. ``None`` groups clients under a shared key.
        purpose: Short discriminator (``"chat"``, ``"stream"``) for distinct
            pools.

    Thread-safety:
        Safe for concurrent use; creation is guarded by a re-entrant lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = httpx_timeout()
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            try:
                c.close()
            except (httpx.HTTPError, RuntimeError):  # nosec B110 - shutdown path
                _logger.debug("error closing pooled client", exc_info=True)
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
