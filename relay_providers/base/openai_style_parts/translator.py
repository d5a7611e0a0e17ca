"""Chat Completions SSE translator.

OpenAI-compatible vendors stream unnamed ``data:`` frames carrying
``chat.completion.chunk`` objects and finish with ``data: [DONE]``. Text
arrives in ``choices[0].delta.content``; some vendors put an ``error``
object in a frame instead of failing the HTTP response.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

from ..errors import APIError, extract_sse_error_message, map_error_type_to_message
from ..logging import get_logger
from ..streaming import Done, RawVendorEvent, StreamError, TextDelta

DONE_SENTINEL = "[DONE]"

_logger = get_logger(__name__)


def _delta_text(chunk: Dict[str, Any]) -> str:
    choices = chunk.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    delta = choices[0].get("delta") or {}
    content = delta.get("content") if isinstance(delta, dict) else None
    return content if isinstance(content, str) else ""


class ChatCompletionsTranslator:
    """Callable translator for one Chat Completions stream."""

    def __init__(self, provider: str) -> None:
        self.provider = provider

    def _error(self, chunk: Dict[str, Any]) -> StreamError:
        err = chunk.get("error")
        err_type = err.get("type") if isinstance(err, dict) else None
        message = (err_type and map_error_type_to_message(err_type)) or extract_sse_error_message(
            chunk, "Upstream error"
        )
        error = APIError.streaming_failed(self.provider, message, retryable=err_type in ("server_error", "overloaded_error"))
        return StreamError(message=message, retryable=error.retryable, error=error)

    def __call__(self, event_name: str, data: str) -> List[object]:  # noqa: ARG002 - unnamed frames
        if not data:
            return []
        if data.strip() == DONE_SENTINEL:
            return [Done()]
        try:
            chunk = json.loads(data)
        except ValueError:
            _logger.debug("skipping non-JSON stream frame from %s", self.provider)
            return []
        if not isinstance(chunk, dict):
            return []
        if chunk.get("error"):
            return [self._error(chunk)]
        out: List[object] = []
        text = _delta_text(chunk)
        if text:
            out.append(TextDelta(text))
        if chunk.get("usage"):
            out.append(RawVendorEvent("usage", {"usage": chunk["usage"]}))
        if chunk.get("citations"):
            out.append(RawVendorEvent("citations.raw", {"citations": chunk["citations"]}))
        return out


__all__ = ["ChatCompletionsTranslator", "DONE_SENTINEL"]
