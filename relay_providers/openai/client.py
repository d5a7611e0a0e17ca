"""OpenAI adapter.

Blocking calls use Chat Completions; streaming uses the Responses API
(``POST /responses`` with ``stream: true``), which is where web search and
inline citations are available.

Model handling
--------------
- Vision (and native file input) is available for the ``gpt-4o``,
  ``gpt-4-turbo``, ``gpt-4-vision``, ``gpt-4.1``, ``gpt-5``, ``o1`` and ``o3``
  families; other models receive plain text.
- Reasoning and GPT-5 families are constrained through :data:`MODEL_QUIRKS`
  (fixed temperature, ``max_completion_tokens``, no system role for ``o1``).
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..base.adapter import ChatRequest
from ..base.cancellation import CancellationToken
from ..base.history import enforce_alternation
from ..base.models import AdapterCapabilities, MessageAttachment, ProviderConfig
from ..base.openai_style import OpenAICompatibleAdapter
from ..base.quirks import MODEL_QUIRKS
from ..config.defaults import DEFAULT_TEMPERATURE, OPENAI_DEFAULT_BASE_URL, OPENAI_DEFAULT_MODEL
from .responses_stream import ResponsesTranslator, to_responses_input

VISION_MODEL_PREFIXES = ("gpt-4o", "gpt-4-turbo", "gpt-4-vision", "gpt-4.1", "gpt-5", "o1", "o3")


def supports_vision(model: str) -> bool:
    return model.startswith(VISION_MODEL_PREFIXES)


class ChatGPTAdapter(OpenAICompatibleAdapter):
    """OpenAI Chat Completions + Responses adapter."""

    provider_id = "openai"
    display_name = "ChatGPT"
    model_quirks = MODEL_QUIRKS
    default_temperature = DEFAULT_TEMPERATURE
    responses_path = "/responses"

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=OPENAI_DEFAULT_BASE_URL,
            default_model=OPENAI_DEFAULT_MODEL,
            capabilities=self._capabilities_for(self.params.model or OPENAI_DEFAULT_MODEL),
        )

    @staticmethod
    def _capabilities_for(model: str) -> AdapterCapabilities:
        vision = supports_vision(model)
        return AdapterCapabilities(
            streaming=True,
            attachments=vision,
            supports_images=vision,
            supports_documents=vision,
            function_calling=True,
            system_prompt=True,
            max_tokens=128000,
            context_window=272000,
        )

    def get_capabilities(self, model: Optional[str] = None) -> AdapterCapabilities:
        return self._capabilities_for(model or self.resolve_model())

    def format_user_message(
        self,
        message: str,
        attachments: Optional[Sequence[MessageAttachment]] = None,
        model: Optional[str] = None,
    ) -> Any:
        """Text plus ``image_url`` and native ``file`` parts for vision models."""
        if not attachments:
            return message
        caps = self.get_capabilities(model)
        if not caps.attachments:
            return message
        parts: List[Dict[str, Any]] = [{"type": "text", "text": message}]
        for attachment in attachments:
            if attachment.is_image:
                url = attachment.data_uri() if attachment.base64 or attachment.uri.startswith("data:") else attachment.uri
                parts.append({"type": "image_url", "image_url": {"url": url}})
            elif attachment.is_document and caps.supports_documents:
                parts.append(
                    {
                        "type": "file",
                        "file": {
                            "file_name": attachment.file_name or "document.pdf",
                            "file_data": attachment.data_uri(),
                        },
                    }
                )
        return parts

    def build_responses_body(self, request: ChatRequest) -> Dict[str, Any]:
        """Responses API request body (system prompt sent as ``instructions``)."""
        quirks = self.quirks_for(request.model)
        turns = list(self.format_history(request.history, request.resumption))
        turns.append(
            {
                "role": "user",
                "content": self.format_user_message(request.message, request.attachments, request.model),
            }
        )
        body: Dict[str, Any] = {
            "model": request.model,
            "input": to_responses_input(enforce_alternation(turns)),
            "stream": True,
        }
        if not quirks.forbids_system_role:
            body["instructions"] = self.system_prompt()
        temperature = quirks.temperature(self.params.temperature)
        if temperature is not None:
            body["temperature"] = temperature
        if self.params.max_tokens:
            body["max_output_tokens"] = self.params.max_tokens
        if self.params.web_search:
            body["tools"] = [{"type": "web_search"}]
        return body

    def _stream(self, request: ChatRequest, cancel_token: Optional[CancellationToken]):
        return self._sse(
            self.responses_path,
            self.build_responses_body(request),
            ResponsesTranslator(self.provider_id),
            cancel_token=cancel_token,
        )


__all__ = ["ChatGPTAdapter", "supports_vision", "VISION_MODEL_PREFIXES"]
