"""Provider Factory utilities.

Purpose
-------
Centralize provider-agnostic creation of adapter instances. Adapters are
imported lazily using ``importlib`` so that importing the package does not
import every vendor module.

Parameter resolution
--------------------
Keyword arguments are merged with :func:`relay_providers.config.get_provider_config`
(defaults -> config file -> environment -> call arguments) and validated into
an :class:`AdapterParams`. The configuration key ``system_message`` feeds
``system_prompt`` when no explicit prompt is given; keys that are not
``AdapterParams`` fields land in ``AdapterParams.extra``.

Failure modes
-------------
- Unknown provider: ``AppError`` with ``APP_ADAPTER_NOT_FOUND``.
- Adapter module import failure: ``AppError`` with ``APP_INIT_FAILED``.
- Invalid parameter values: the taxonomy's ``ValidationError``.

No timeouts, retries or fallbacks are introduced here.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Optional, Tuple, Type

import httpx
import pydantic

from ..config import get_provider_config
from .dto.adapter_params import AdapterParams
from .errors import AppError, ErrorCode, ValidationError

# Map canonical provider names to import paths and class names
_PROVIDERS: Dict[str, Tuple[str, str]] = {
    "openai": ("relay_providers.openai.client", "ChatGPTAdapter"),
    "anthropic": ("relay_providers.anthropic.client", "AnthropicAdapter"),
    "gemini": ("relay_providers.gemini.client", "GeminiAdapter"),
    "perplexity": ("relay_providers.perplexity.client", "PerplexityAdapter"),
    "cohere": ("relay_providers.cohere.client", "CohereAdapter"),
    "mistral": ("relay_providers.mistral.client", "MistralAdapter"),
    "deepseek": ("relay_providers.deepseek.client", "DeepSeekAdapter"),
    "xai": ("relay_providers.xai.client", "GrokAdapter"),
    "openrouter": ("relay_providers.openrouter.client", "OpenRouterAdapter"),
}

_PARAM_FIELDS = frozenset(AdapterParams.model_fields) - {"provider"}


def _adapter_not_found(provider: str) -> AppError:
    return AppError(
        code=ErrorCode.APP_ADAPTER_NOT_FOUND,
        message=f"Unknown provider '{provider}'",
        context={"provider": provider, "supported": list(_PROVIDERS)},
    )


class ProviderFactory:
    """Create provider adapters based on a canonical name (e.g., ``"openai"``)."""

    @staticmethod
    def supported() -> Tuple[str, ...]:
        """Return the supported canonical provider names in registration order."""
        return tuple(_PROVIDERS)

    @staticmethod
    def adapter_class(provider: str) -> Type[Any]:
        """Import and return the adapter class registered for ``provider``."""
        name = (provider or "").lower().strip()
        spec = _PROVIDERS.get(name)
        if spec is None:
            raise _adapter_not_found(provider)
        module_path, class_name = spec
        try:
            module = import_module(module_path)
        except ImportError as exc:
            raise AppError(
                code=ErrorCode.APP_INIT_FAILED,
                message=f"Failed to import module '{module_path}' for provider '{name}': {exc}",
                context={"provider": name},
                cause=exc,
            ) from exc
        return getattr(module, class_name)

    @staticmethod
    def build_params(provider: str, overrides: Optional[Dict[str, Any]] = None) -> AdapterParams:
        """Merge configuration sources for ``provider`` into a validated :class:`AdapterParams`."""
        name = (provider or "").lower().strip()
        cfg = get_provider_config(name, overrides)
        system_message = cfg.pop("system_message", None)
        if system_message and not cfg.get("system_prompt"):
            cfg["system_prompt"] = system_message
        fields = {k: v for k, v in cfg.items() if k in _PARAM_FIELDS}
        extra = dict(fields.pop("extra", None) or {})
        extra.update({k: v for k, v in cfg.items() if k not in _PARAM_FIELDS})
        try:
            return AdapterParams(provider=name, extra=extra, **fields)
        except pydantic.ValidationError as exc:
            errors = exc.errors()
            loc = errors[0].get("loc") if errors else ()
            field = str(loc[0]) if loc else "params"
            err = ValidationError.invalid_format(field, errors[0].get("msg") if errors else None)
            err.cause = exc
            err.merge_context({"provider": name})
            raise err from exc

    @classmethod
    def create(
        cls,
        provider: str,
        *,
        client: Optional[httpx.Client] = None,
        **params: Any,
    ) -> Any:
        """Create an adapter for ``provider``.

        ``client`` is handed to the adapter untouched (tests inject an
        ``httpx.Client`` built on ``httpx.MockTransport``).
        """
        klass = cls.adapter_class(provider)
        adapter_params = cls.build_params(provider, params)
        return klass(adapter_params, client=client)


def create_adapter(provider: str, api_key: Optional[str] = None, **params: Any) -> Any:
    """Build a configured adapter instance.

    Parameters
    ----------
    provider:
        Canonical provider identifier (e.g., ``"anthropic"``).
    api_key:
        Vendor key; when omitted the environment and config file are consulted.
    **params:
        ``AdapterParams`` fields (``model``, ``temperature``, ``web_search``, ...),
        vendor extras, and optionally ``client``.

    Raises
    ------
    AppError
        ``APP_ADAPTER_NOT_FOUND`` for an unknown provider.
    ValidationError
        When a parameter fails validation.
    """
    if api_key is not None:
        params["api_key"] = api_key
    return ProviderFactory.create(provider, **params)


__all__ = ["ProviderFactory", "create_adapter"]
