"""Mistral adapter (OpenAI-compatible Chat Completions)."""
from __future__ import annotations

from ..base.models import AdapterCapabilities, ProviderConfig
from ..base.openai_style import OpenAICompatibleAdapter
from ..config.defaults import MISTRAL_DEFAULT_BASE_URL, MISTRAL_DEFAULT_MODEL


class MistralAdapter(OpenAICompatibleAdapter):
    provider_id = "mistral"
    display_name = "Mistral"

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=MISTRAL_DEFAULT_BASE_URL,
            default_model=MISTRAL_DEFAULT_MODEL,
            capabilities=AdapterCapabilities(
                streaming=True,
                attachments=False,
                function_calling=True,
                system_prompt=True,
                max_tokens=8192,
                context_window=128000,
            ),
        )


__all__ = ["MistralAdapter"]
