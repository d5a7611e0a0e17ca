"""Anthropic Messages API adapter.

Wire format
-----------
- ``POST /messages`` with ``x-api-key`` and ``anthropic-version`` headers.
- ``system`` is a top-level field; ``messages`` must start with a user turn
  and alternate strictly.
- Streaming uses named SSE events: ``content_block_delta`` carries
  ``text_delta`` (text) and ``citations_delta`` (web search sources),
  ``message_stop`` ends the stream and ``error`` fails it. ``overloaded_error``
  (HTTP 529 on the blocking path) is retryable.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..base.adapter import BaseAdapter, ChatRequest
from ..base.cancellation import CancellationToken
from ..base.citations import extract_domain
from ..base.errors import APIError, extract_sse_error_message, map_error_type_to_message
from ..base.history import ChatTurn, enforce_alternation
from ..base.models import AdapterCapabilities, Citation, MessageAttachment, ProviderConfig, SendResult, Usage
from ..base.streaming import Citations, Done, RawVendorEvent, StreamError, TextDelta
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_BASE_URL, ANTHROPIC_DEFAULT_MODEL

DEFAULT_MAX_OUTPUT_TOKENS = 4096
WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 5}
_RETRYABLE_STREAM_ERRORS = ("overloaded_error", "api_error", "rate_limit_error")


def anthropic_headers(api_key: str) -> Dict[str, str]:
    return {
        "x-api-key": api_key,
        "anthropic-version": ANTHROPIC_API_VERSION,
        "Content-Type": "application/json",
    }


def _citation_from_block(raw: Dict[str, Any], index: int) -> Optional[Citation]:
    url = raw.get("url")
    if not url:
        return None
    return Citation(index=index, url=url, title=raw.get("title"), snippet=raw.get("cited_text"), domain=extract_domain(url))


class CitationCollector:
    """Accumulate citations de-duplicated by URL, numbered from 1."""

    def __init__(self) -> None:
        self._items: List[Citation] = []
        self._seen: set[str] = set()

    def add(self, raw: Any) -> None:
        if not isinstance(raw, dict) or raw.get("url") in self._seen:
            return
        citation = _citation_from_block(raw, len(self._items) + 1)
        if citation is not None:
            self._seen.add(citation.url)
            self._items.append(citation)

    @property
    def citations(self) -> List[Citation]:
        return list(self._items)


class AnthropicStreamTranslator:
    """Translator for one Messages API stream."""

    def __init__(self, provider: str = "anthropic") -> None:
        self.provider = provider
        self._citations = CitationCollector()

    def _error(self, obj: Dict[str, Any]) -> StreamError:
        err = obj.get("error") if isinstance(obj.get("error"), dict) else {}
        err_type = err.get("type") or ""
        if err_type == "overloaded_error":
            error = APIError.provider_overloaded(self.provider)
            return StreamError(message=map_error_type_to_message(err_type) or error.message, retryable=True, error=error)
        message = map_error_type_to_message(err_type) or extract_sse_error_message(obj, "Upstream error")
        error = APIError.streaming_failed(self.provider, message, retryable=err_type in _RETRYABLE_STREAM_ERRORS)
        return StreamError(message=message, retryable=error.retryable, error=error)

    def __call__(self, event_name: str, data: str) -> List[object]:
        if event_name == "ping" or not data:
            return []
        try:
            obj = json.loads(data)
        except ValueError:
            return []
        if not isinstance(obj, dict):
            return []
        etype = obj.get("type") if event_name == "message" else event_name
        if etype == "content_block_delta":
            delta = obj.get("delta") or {}
            if delta.get("type") == "text_delta" and delta.get("text"):
                return [TextDelta(delta["text"])]
            if delta.get("type") == "citations_delta":
                self._citations.add(delta.get("citation"))
            return [RawVendorEvent(etype, obj)]
        if etype == "error":
            return [self._error(obj)]
        out: List[object] = [RawVendorEvent(etype or "message", obj)]
        if etype == "message_stop":
            citations = self._citations.citations
            if citations:
                out.append(Citations(tuple(citations)))
            out.append(Done())
        return out


class AnthropicAdapter(BaseAdapter):
    """Claude adapter."""

    provider_id = "anthropic"
    display_name = "Claude"
    error_label = "Claude API"
    messages_path = "/messages"

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=ANTHROPIC_DEFAULT_BASE_URL,
            default_model=ANTHROPIC_DEFAULT_MODEL,
            build_headers=anthropic_headers,
            capabilities=AdapterCapabilities(
                streaming=True,
                attachments=True,
                supports_images=True,
                supports_documents=True,
                function_calling=True,
                system_prompt=True,
                max_tokens=64000,
                context_window=200000,
            ),
        )

    def format_user_message(
        self,
        message: str,
        attachments: Optional[Sequence[MessageAttachment]] = None,
        model: Optional[str] = None,  # noqa: ARG002 - same encoding for every model
    ) -> Any:
        """Attachments as base64 ``image`` / ``document`` blocks, then the text block."""
        if not attachments:
            return message
        blocks: List[Dict[str, Any]] = []
        for attachment in attachments:
            source = {"type": "base64", "media_type": attachment.mime_type, "data": attachment.raw_base64()}
            blocks.append({"type": "image" if attachment.is_image else "document", "source": source})
        blocks.append({"type": "text", "text": message})
        return blocks

    def build_messages(self, request: ChatRequest) -> List[ChatTurn]:
        turns = list(self.format_history(request.history, request.resumption))
        turns.append(
            {
                "role": "user",
                "content": self.format_user_message(request.message, request.attachments, request.model),
            }
        )
        return enforce_alternation(turns)

    def build_payload(self, request: ChatRequest, *, stream: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "system": self.system_prompt(),
            "messages": self.build_messages(request),
            "max_tokens": self.params.max_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
        }
        if self.params.temperature is not None:
            payload["temperature"] = self.params.temperature
        if self.params.top_p is not None:
            payload["top_p"] = self.params.top_p
        if self.params.web_search:
            payload["tools"] = [dict(WEB_SEARCH_TOOL)]
        if stream:
            payload["stream"] = True
        return payload

    def _send(self, request: ChatRequest) -> SendResult:
        data = self._post_json(self.messages_path, self.build_payload(request))
        texts: List[str] = []
        collector = CitationCollector()
        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                texts.append(block.get("text") or "")
                for raw in block.get("citations") or []:
                    collector.add(raw)
        usage = data.get("usage")
        citations = collector.citations
        return SendResult(
            response="".join(texts),
            model_used=data.get("model") or request.model,
            usage=Usage.of(usage.get("input_tokens"), usage.get("output_tokens")) if isinstance(usage, dict) else None,
            citations=citations or None,
        )

    def _stream(self, request: ChatRequest, cancel_token: Optional[CancellationToken]):
        return self._sse(
            self.messages_path,
            self.build_payload(request, stream=True),
            AnthropicStreamTranslator(self.provider_id),
            cancel_token=cancel_token,
        )


__all__ = ["AnthropicAdapter", "AnthropicStreamTranslator", "CitationCollector", "anthropic_headers"]
