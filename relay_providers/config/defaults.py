"""relay_providers.config.defaults
=============================

Central place for small, stable default values used across the
relay_providers package: vendor base URLs, default models and the model alias
table. These defaults can be overridden via environment variables or external
configuration (see :mod:`relay_providers.config`).

This module avoids importing from other provider packages to prevent circular
dependencies. Only plain constants and lightweight helpers live here.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

# ---- Provider-specific sane defaults ----
OPENAI_DEFAULT_MODEL = "gpt-5"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_API_VERSION = "2023-06-01"

GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

PERPLEXITY_DEFAULT_MODEL = "sonar"
PERPLEXITY_DEFAULT_BASE_URL = "https://api.perplexity.ai"

COHERE_DEFAULT_MODEL = "command-r-plus-08-2024"
COHERE_DEFAULT_BASE_URL = "https://api.cohere.com/v2"

MISTRAL_DEFAULT_MODEL = "mistral-large-latest"
MISTRAL_DEFAULT_BASE_URL = "https://api.mistral.ai/v1"

DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com/v1"

XAI_DEFAULT_MODEL = "grok-4-0709"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"

OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

# ---- Generation defaults applied when the caller sets nothing ----
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048

# ---- Model aliases ----
# "Latest" names resolve to a concrete model id at request time. Unknown ids
# pass through unchanged.
MODEL_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "claude-latest": "claude-sonnet-4-5-20250929",
        "claude-opus-latest": "claude-opus-4-5-20251101",
        "claude-sonnet-latest": "claude-sonnet-4-5-20250929",
        "claude-haiku-latest": "claude-haiku-4-5-20251001",
        "gpt-latest": "gpt-5.2",
        "gpt-5-latest": "gpt-5",
        "gpt-5.2-latest": "gpt-5.2",
        "gpt-5-mini-latest": "gpt-5-mini",
        "gpt-5-nano-latest": "gpt-5-nano",
        "gpt-4o-latest": "gpt-4o",
        "o1-latest": "o1",
        "o3-mini-latest": "o3-mini",
        "gemini-latest": "gemini-2.5-flash",
        "gemini-pro-latest": "gemini-2.5-pro",
        "gemini-flash-latest": "gemini-2.5-flash",
        "grok-latest": "grok-4-0709",
        "grok-4-latest": "grok-4-0709",
        "grok-3-latest": "grok-3",
        "sonar-latest": "sonar-pro",
        "sonar-pro-latest": "sonar-pro",
        "mistral-latest": "mistral-large-latest",
        "command-r-plus-latest": "command-r-plus-08-2024",
        "command-r-latest": "command-r-08-2024",
        "command-light-latest": "command-light",
        "deepseek-chat-latest": "deepseek-chat",
        "deepseek-reasoner-latest": "deepseek-reasoner",
    }
)


def resolve_model_alias(model_id: Optional[str]) -> str:
    """Return the concrete model id for ``model_id`` (unchanged when not an alias)."""
    if not model_id:
        return ""
    return MODEL_ALIASES.get(model_id, model_id)


__all__ = [
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "PERPLEXITY_DEFAULT_MODEL",
    "PERPLEXITY_DEFAULT_BASE_URL",
    "COHERE_DEFAULT_MODEL",
    "COHERE_DEFAULT_BASE_URL",
    "MISTRAL_DEFAULT_MODEL",
    "MISTRAL_DEFAULT_BASE_URL",
    "DEEPSEEK_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_BASE_URL",
    "XAI_DEFAULT_MODEL",
    "XAI_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_TOKENS",
    "MODEL_ALIASES",
    "resolve_model_alias",
]
