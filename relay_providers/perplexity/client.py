"""Perplexity adapter.

Perplexity speaks the Chat Completions dialect but only the blocking
endpoint returns the ``citations`` / ``search_results`` metadata. Streaming
therefore performs one blocking request and re-chunks the text through
:func:`simulate_stream`, delivering citations on the side channel after the
last chunk.

Attachment encoding differs from OpenAI: images first (``image_url`` with a
``data:`` URI), then documents as ``file_url`` carrying the *raw* base64
payload (no ``data:`` prefix), then the text part last.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..base.adapter import ChatRequest
from ..base.cancellation import CancellationToken
from ..base.citations import extract_domain
from ..base.models import AdapterCapabilities, Citation, MessageAttachment, ProviderConfig, SendResult, bearer_headers
from ..base.openai_style import OpenAICompatibleAdapter
from ..config.defaults import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    PERPLEXITY_DEFAULT_BASE_URL,
    PERPLEXITY_DEFAULT_MODEL,
)

SEARCH_RECENCY_FILTER = "month"


def perplexity_headers(api_key: str) -> Dict[str, str]:
    return {**bearer_headers(api_key), "Accept": "application/json"}


def citations_from_response(data: Dict[str, Any]) -> List[Citation]:
    """Build citations from ``citations`` URLs enriched by ``search_results``.

    When only ``search_results`` is present those entries are used directly.
    """
    results = [r for r in data.get("search_results") or [] if isinstance(r, dict) and r.get("url")]
    by_url = {r["url"]: r for r in results}
    urls = [u for u in data.get("citations") or [] if isinstance(u, str) and u]
    if not urls:
        urls = [r["url"] for r in results]
    out: List[Citation] = []
    for i, url in enumerate(urls, start=1):
        meta = by_url.get(url, {})
        out.append(
            Citation(
                index=i,
                url=url,
                title=meta.get("title"),
                snippet=meta.get("snippet"),
                domain=extract_domain(url),
            )
        )
    return out


class PerplexityAdapter(OpenAICompatibleAdapter):
    """Search-grounded chat with citations and a simulated stream."""

    provider_id = "perplexity"
    display_name = "Perplexity"

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=PERPLEXITY_DEFAULT_BASE_URL,
            default_model=PERPLEXITY_DEFAULT_MODEL,
            build_headers=perplexity_headers,
            capabilities=AdapterCapabilities(
                streaming=True,
                attachments=True,
                supports_images=True,
                supports_documents=True,
                function_calling=False,
                system_prompt=True,
                max_tokens=4096,
                context_window=200000,
            ),
        )

    def format_user_message(
        self,
        message: str,
        attachments: Optional[Sequence[MessageAttachment]] = None,
        model: Optional[str] = None,  # noqa: ARG002 - same encoding for every model
    ) -> Any:
        if not attachments:
            return message
        parts: List[Dict[str, Any]] = []
        for attachment in attachments:
            if attachment.is_image:
                url = attachment.data_uri() if attachment.base64 else attachment.uri
                parts.append({"type": "image_url", "image_url": {"url": url}})
        for attachment in attachments:
            if attachment.is_document and attachment.base64:
                parts.append(
                    {
                        "type": "file_url",
                        "file_url": {"url": attachment.raw_base64()},
                        "file_name": attachment.file_name or "document.pdf",
                    }
                )
        parts.append({"type": "text", "text": message})
        return parts

    def generation_params(self, model: str) -> Dict[str, Any]:  # noqa: ARG002 - no model quirks
        out: Dict[str, Any] = {
            "temperature": self.params.temperature if self.params.temperature is not None else DEFAULT_TEMPERATURE,
            "max_tokens": self.params.max_tokens or DEFAULT_MAX_TOKENS,
        }
        if self.params.top_p is not None:
            out["top_p"] = self.params.top_p
        return out

    def build_payload(self, request: ChatRequest, *, stream: bool = False) -> Dict[str, Any]:  # noqa: ARG002 - always blocking
        payload = super().build_payload(request)
        payload["stream"] = False
        payload["return_citations"] = True
        payload["search_recency_filter"] = SEARCH_RECENCY_FILTER
        return payload

    def parse_response(self, data: Dict[str, Any], request: ChatRequest) -> SendResult:
        base = super().parse_response(data, request)
        citations = citations_from_response(data)
        return SendResult(
            response=base.response,
            model_used=base.model_used,
            usage=base.usage,
            citations=citations or None,
        )

    def _stream(self, request: ChatRequest, cancel_token: Optional[CancellationToken]):
        return self._simulated(request, cancel_token)


__all__ = ["PerplexityAdapter", "citations_from_response", "perplexity_headers"]
