"""Typed parameter object for provider adapter initialization.

Purpose
-------
Capture the per-session configuration every adapter accepts (credentials,
model, generation parameters, conversation mode) in one validated object.
The factory builds it from :func:`relay_providers.config.get_provider_config`
merged with caller overrides; adapters only read it.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``model_copy`` convenience.

Failure modes
-------------
- Pydantic raises ``pydantic.ValidationError`` for wrongly typed inputs
  (e.g. a negative ``max_tokens``). The factory converts that into the
  taxonomy's ``ValidationError``.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdapterParams(BaseModel):
    """Common provider adapter initialization parameters.

    Attributes
    ----------
    provider:
        Canonical provider key (``"openai"``, ``"cohere"``, ...).
    model:
        Default model id; a per-call ``model_override`` takes precedence.
        Aliases such as ``gpt-latest`` are resolved by the adapter.
    api_key:
        Vendor API key.
    base_url:
        Optional override of the vendor base URL (proxies, gateways).
    temperature / max_tokens / top_p:
        Generation parameters. ``None`` means "use the vendor default";
        model quirks may still override them.
    system_prompt:
        Replaces the default system prompt.
    debate_mode:
        Multi-party conversation: AI messages from other providers are sent
        as attributed user turns.
    web_search:
        Enable vendor web search (citations).
    headers:
        Extra static HTTP headers.
    extra:
        Free-form provider-specific bag.
    """

    model_config = ConfigDict(frozen=True)

    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    system_prompt: Optional[str] = None
    debate_mode: bool = False
    web_search: bool = False
    headers: Mapping[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)


__all__ = ["AdapterParams"]
