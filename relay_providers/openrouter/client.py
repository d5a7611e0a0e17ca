"""OpenRouter adapter.

OpenRouter proxies many vendors behind the OpenAI Chat Completions dialect.
Two optional attribution headers identify the calling application; they are
read from ``AdapterParams.extra``:

- ``app_url``  -> ``HTTP-Referer``
- ``app_name`` -> ``X-Title``

Model ids are namespaced (``anthropic/claude-sonnet-4.5``); image support
depends on the routed model, so images are always encoded and the upstream
decides.
"""
from __future__ import annotations

from typing import Dict

from ..base.models import AdapterCapabilities, ProviderConfig, bearer_headers
from ..base.openai_style import OpenAICompatibleAdapter
from ..config.defaults import OPENROUTER_DEFAULT_BASE_URL, OPENROUTER_DEFAULT_MODEL


class OpenRouterAdapter(OpenAICompatibleAdapter):
    """OpenRouter adapter."""

    provider_id = "openrouter"
    display_name = "OpenRouter"

    def _headers(self, api_key: str) -> Dict[str, str]:
        headers = bearer_headers(api_key)
        if self.params.extra.get("app_url"):
            headers["HTTP-Referer"] = str(self.params.extra["app_url"])
        if self.params.extra.get("app_name"):
            headers["X-Title"] = str(self.params.extra["app_name"])
        return headers

    def build_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            name=self.provider_id,
            base_url=OPENROUTER_DEFAULT_BASE_URL,
            default_model=OPENROUTER_DEFAULT_MODEL,
            build_headers=self._headers,
            capabilities=AdapterCapabilities(
                streaming=True,
                attachments=True,
                supports_images=True,
                supports_documents=False,
                function_calling=True,
                system_prompt=True,
                max_tokens=16384,
                context_window=128000,
            ),
        )


__all__ = ["OpenRouterAdapter"]
