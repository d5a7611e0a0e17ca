"""xAI Grok adapter.

Grok exposes the OpenAI Chat Completions dialect at ``https://api.x.ai/v1``.
Images are accepted as ``image_url`` parts; documents fall back to a text
note like every other Chat Completions vendor.
"""
from __future__ import annotations

from ..base.models import AdapterCapabilities, ProviderConfig
from ..base.openai_style import OpenAICompatibleAdapter
from ..config.defaults import XAI_DEFAULT_BASE_URL, XAI_DEFAULT_MODEL


class GrokAdapter(OpenAICompatibleAdapter):
    """xAI adapter."""

    provider_id = "xai"
    display_name = "Grok"

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=XAI_DEFAULT_BASE_URL,
            default_model=XAI_DEFAULT_MODEL,
            capabilities=AdapterCapabilities(
                streaming=True,
                attachments=True,
                supports_images=True,
                supports_documents=False,
                function_calling=True,
                system_prompt=True,
                max_tokens=32768,
                context_window=256000,
            ),
        )


__all__ = ["GrokAdapter"]
