"""Gemini adapter (Generative Language REST API).

Endpoints
---------
- ``POST /models/{model}:generateContent`` for blocking calls.
- ``POST /models/{model}:streamGenerateContent?alt=sse`` for streaming; each
  SSE frame is a partial ``GenerateContentResponse`` and a candidate
  ``finishReason`` ends the stream.

Web search enables the ``google_search`` tool. Grounding sources are only
complete on the blocking response, so with web search on the stream is
simulated from a blocking call and the citations follow the text.

Gemini citations use the source title as ``domain`` (grounding URIs are
redirect links); untitled sources are labelled ``Source <n>``.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..base.adapter import BaseAdapter, ChatRequest
from ..base.cancellation import CancellationToken
from ..base.errors import APIError, extract_sse_error_message
from ..base.history import enforce_alternation
from ..base.models import AdapterCapabilities, Citation, MessageAttachment, ProviderConfig, SendResult, Usage
from ..base.streaming import Done, RawVendorEvent, StreamError, TextDelta
from ..config.defaults import GEMINI_DEFAULT_BASE_URL, GEMINI_DEFAULT_MODEL


def gemini_headers(api_key: str) -> Dict[str, str]:
    return {"x-goog-api-key": api_key, "Content-Type": "application/json"}


def attachment_parts(attachments: Sequence[MessageAttachment]) -> List[Dict[str, Any]]:
    return [{"inline_data": {"mime_type": a.mime_type, "data": a.raw_base64()}} for a in attachments]


def candidate_text(data: Dict[str, Any]) -> str:
    """Join the text parts of the first candidate."""
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))


def grounding_citations(data: Dict[str, Any]) -> List[Citation]:
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return []
    chunks = (candidates[0].get("groundingMetadata") or {}).get("groundingChunks") or []
    out: List[Citation] = []
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if not isinstance(web, dict) or not web.get("uri"):
            continue
        index = len(out) + 1
        title = web.get("title")
        out.append(Citation(index=index, url=web["uri"], title=title, domain=title or f"Source {index}"))
    return out


class GeminiStreamTranslator:
    """Translator for ``streamGenerateContent?alt=sse`` frames."""

    def __init__(self, provider: str = "gemini") -> None:
        self.provider = provider

    def __call__(self, event_name: str, data: str) -> List[object]:  # noqa: ARG002 - unnamed frames
        if not data:
            return []
        try:
            obj = json.loads(data)
        except ValueError:
            return []
        if not isinstance(obj, dict):
            return []
        if obj.get("error"):
            message = extract_sse_error_message(obj, "Upstream error")
            error = APIError.streaming_failed(self.provider, message)
            return [StreamError(message=message, retryable=error.retryable, error=error)]
        block = (obj.get("promptFeedback") or {}).get("blockReason")
        if block:
            error = APIError.content_filtered(self.provider)
            return [RawVendorEvent("promptFeedback", obj), StreamError(message=error.message, retryable=False, error=error)]
        out: List[object] = []
        text = candidate_text(obj)
        if text:
            out.append(TextDelta(text))
        candidates = obj.get("candidates") or []
        finish = candidates[0].get("finishReason") if candidates and isinstance(candidates[0], dict) else None
        if obj.get("usageMetadata"):
            out.append(RawVendorEvent("usage", {"usage": obj["usageMetadata"]}))
        if finish:
            out.append(Done())
        return out


class GeminiAdapter(BaseAdapter):
    """Google Gemini adapter."""

    provider_id = "gemini"
    display_name = "Gemini"
    error_label = "Gemini"

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=GEMINI_DEFAULT_BASE_URL,
            default_model=GEMINI_DEFAULT_MODEL,
            build_headers=gemini_headers,
            capabilities=AdapterCapabilities(
                streaming=True,
                attachments=True,
                supports_images=True,
                supports_documents=True,
                function_calling=True,
                system_prompt=True,
                max_tokens=8192,
                context_window=1000000,
            ),
        )

    def build_contents(self, request: ChatRequest) -> List[Dict[str, Any]]:
        """History plus the new message as alternating ``user`` / ``model`` contents."""
        turns = list(self.format_history(request.history, request.resumption))
        turns.append({"role": "user", "content": [{"type": "text", "text": request.message}]})
        contents: List[Dict[str, Any]] = []
        for turn in enforce_alternation(turns):
            role = "model" if turn["role"] == "assistant" else "user"
            content = turn["content"]
            if isinstance(content, str):
                parts = [{"text": content}]
            else:
                parts = [{"text": p["text"]} for p in content if isinstance(p, dict) and p.get("text")]
            contents.append({"role": role, "parts": parts})
        contents[-1]["parts"].extend(attachment_parts(request.attachments))
        return contents

    def generation_config(self) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        if self.params.temperature is not None:
            cfg["temperature"] = self.params.temperature
        if self.params.top_p is not None:
            cfg["topP"] = self.params.top_p
        if self.params.extra.get("top_k") is not None:
            cfg["topK"] = self.params.extra["top_k"]
        if self.params.max_tokens is not None:
            cfg["maxOutputTokens"] = self.params.max_tokens
        return cfg

    def build_payload(self, request: ChatRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": self.build_contents(request),
            "systemInstruction": {"parts": [{"text": self.system_prompt()}]},
        }
        generation = self.generation_config()
        if generation:
            payload["generationConfig"] = generation
        if self.params.web_search:
            payload["tools"] = [{"google_search": {}}]
        return payload

    def _send(self, request: ChatRequest) -> SendResult:
        data = self._post_json(f"/models/{request.model}:generateContent", self.build_payload(request))
        candidates = data.get("candidates") or []
        reason = (data.get("promptFeedback") or {}).get("blockReason")
        if reason and not candidates:
            raise APIError.content_filtered(self.provider_id)
        usage = data.get("usageMetadata")
        citations = grounding_citations(data)
        return SendResult(
            response=candidate_text(data),
            model_used=request.model,
            usage=Usage.of(
                usage.get("promptTokenCount"),
                usage.get("candidatesTokenCount"),
                usage.get("totalTokenCount"),
            )
            if isinstance(usage, dict)
            else None,
            citations=citations or None,
        )

    def _stream(self, request: ChatRequest, cancel_token: Optional[CancellationToken]):
        if self.params.web_search:
            return self._simulated(request, cancel_token)
        return self._sse(
            f"/models/{request.model}:streamGenerateContent?alt=sse",
            self.build_payload(request),
            GeminiStreamTranslator(self.provider_id),
            cancel_token=cancel_token,
        )


__all__ = [
    "GeminiAdapter",
    "GeminiStreamTranslator",
    "candidate_text",
    "grounding_citations",
    "gemini_headers",
]
