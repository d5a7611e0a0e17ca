"""Cohere v2 chat adapter.

Cohere streams typed SSE events (``message-start``, ``content-start``,
``content-delta``, ``content-end``, ``message-end``). Text lives in
``delta.message.content.text`` of ``content-delta`` events and
``message-end`` finishes the stream. Some deployments send the same objects
as unnamed frames, so the generic ``message`` event is translated by its
``type`` field (an empty or ``[DONE]`` frame also ends the stream).
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..base.adapter import BaseAdapter, ChatRequest
from ..base.cancellation import CancellationToken
from ..base.errors import APIError, extract_sse_error_message
from ..base.history import ChatTurn
from ..base.models import AdapterCapabilities, ProviderConfig, SendResult, Usage, bearer_headers
from ..base.streaming import Done, RawVendorEvent, StreamError, TextDelta
from ..config.defaults import (
    COHERE_DEFAULT_BASE_URL,
    COHERE_DEFAULT_MODEL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
)

SSE_ERROR_MESSAGE = "SSE connection error"
_TRANSIENT_ERROR_TYPES = ("server_error", "overloaded_error", "rate_limit_error", "timeout_error")


def cohere_headers(api_key: str) -> Dict[str, str]:
    return {**bearer_headers(api_key), "Accept": "application/json"}


def _delta_text(obj: Dict[str, Any]) -> Optional[str]:
    delta = obj.get("delta")
    if not isinstance(delta, dict):
        return None
    message = delta.get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    text = content.get("text") if isinstance(content, dict) else None
    return text if isinstance(text, str) and text else None


def _is_transient(obj: Dict[str, Any]) -> bool:
    """In-band errors are final unless they name an overload, rate limit or 5xx."""
    err = obj.get("error")
    err_type = err.get("type") if isinstance(err, dict) else obj.get("error_type")
    if err_type in _TRANSIENT_ERROR_TYPES:
        return True
    status = obj.get("status")
    return isinstance(status, int) and not isinstance(status, bool) and (status == 429 or status >= 500)


class CohereStreamTranslator:
    """Translator for one Cohere v2 chat stream."""

    def __init__(self, provider: str = "cohere") -> None:
        self.provider = provider

    def __call__(self, event_name: str, data: str) -> List[object]:
        if event_name == "message" and (not data or data.strip() == "[DONE]"):
            return [Done()]
        if not data:
            return []
        try:
            obj = json.loads(data)
        except ValueError:
            return []
        if not isinstance(obj, dict):
            return []
        etype = obj.get("type") if event_name == "message" else event_name
        out: List[object] = []
        if etype == "content-delta":
            text = _delta_text(obj)
            if text:
                out.append(TextDelta(text))
            return out
        out.append(RawVendorEvent(etype or "message", obj))
        if etype == "message-end":
            out.append(Done())
        elif etype == "error":
            message = extract_sse_error_message(obj, SSE_ERROR_MESSAGE)
            error = APIError.streaming_failed(self.provider, message, retryable=_is_transient(obj))
            out.append(StreamError(message=message, retryable=error.retryable, error=error))
        return out


class CohereAdapter(BaseAdapter):
    """Cohere ``/v2/chat`` adapter (text only)."""

    provider_id = "cohere"
    display_name = "Cohere"
    chat_path = "/chat"

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=COHERE_DEFAULT_BASE_URL,
            default_model=COHERE_DEFAULT_MODEL,
            build_headers=cohere_headers,
            capabilities=AdapterCapabilities(
                streaming=True,
                attachments=False,
                supports_images=False,
                supports_documents=False,
                function_calling=True,
                system_prompt=True,
                max_tokens=4096,
                context_window=128000,
            ),
        )

    def build_messages(self, request: ChatRequest) -> List[ChatTurn]:
        messages: List[ChatTurn] = [{"role": "system", "content": self.system_prompt()}]
        messages.extend(self.format_history(request.history, request.resumption))
        messages.append({"role": "user", "content": request.message})
        return messages

    def build_payload(self, request: ChatRequest, *, stream: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": self.build_messages(request),
            "temperature": self.params.temperature if self.params.temperature is not None else DEFAULT_TEMPERATURE,
            "max_tokens": self.params.max_tokens or DEFAULT_MAX_TOKENS,
        }
        if stream:
            payload["stream"] = True
        return payload

    @staticmethod
    def parse_usage(usage: Any) -> Optional[Usage]:
        if not isinstance(usage, dict):
            return None
        tokens = usage.get("tokens") or {}
        billed = usage.get("billed_units") or {}
        return Usage.of(
            tokens.get("input_tokens") or billed.get("input_tokens"),
            tokens.get("output_tokens") or billed.get("output_tokens"),
            tokens.get("total_tokens"),
        )

    def _send(self, request: ChatRequest) -> SendResult:
        data = self._post_json(self.chat_path, self.build_payload(request))
        content = (data.get("message") or {}).get("content") or []
        text = ""
        if content and isinstance(content[0], dict):
            text = content[0].get("text") or ""
        return SendResult(
            response=text or data.get("text") or "",
            model_used=request.model,
            usage=self.parse_usage(data.get("usage")),
        )

    def _stream(self, request: ChatRequest, cancel_token: Optional[CancellationToken]):
        return self._sse(
            self.chat_path,
            self.build_payload(request, stream=True),
            CohereStreamTranslator(self.provider_id),
            cancel_token=cancel_token,
            default_error_message=SSE_ERROR_MESSAGE,
        )


__all__ = ["CohereAdapter", "CohereStreamTranslator", "cohere_headers"]
