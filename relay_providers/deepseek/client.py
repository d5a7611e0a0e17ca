"""DeepSeek adapter (OpenAI-compatible Chat Completions, text only)."""
from __future__ import annotations

from ..base.models import AdapterCapabilities, ProviderConfig
from ..base.openai_style import OpenAICompatibleAdapter
from ..config.defaults import DEEPSEEK_DEFAULT_BASE_URL, DEEPSEEK_DEFAULT_MODEL


class DeepSeekAdapter(OpenAICompatibleAdapter):
    provider_id = "deepseek"
    display_name = "DeepSeek"

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=DEEPSEEK_DEFAULT_BASE_URL,
            default_model=DEEPSEEK_DEFAULT_MODEL,
            capabilities=AdapterCapabilities(
                streaming=True,
                attachments=False,
                function_calling=True,
                system_prompt=True,
                max_tokens=8192,
                context_window=64000,
            ),
        )


__all__ = ["DeepSeekAdapter"]
