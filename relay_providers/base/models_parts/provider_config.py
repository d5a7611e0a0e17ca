"""
Adapter-internal vendor configuration.

Each adapter instance owns exactly one `ProviderConfig`, built at
construction and never mutated or shared. ``build_headers`` turns the API
key into the vendor's authentication headers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict

from .capabilities import AdapterCapabilities

HeaderBuilder = Callable[[str], Dict[str, str]]


def bearer_headers(api_key: str) -> Dict[str, str]:
    """Default ``Authorization: Bearer`` JSON headers."""
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


@dataclass(frozen=True)
class ProviderConfig:
    """Static vendor wiring for one adapter instance."""

    name: str
    base_url: str
    default_model: str
    build_headers: HeaderBuilder = bearer_headers
    capabilities: AdapterCapabilities = field(default_factory=AdapterCapabilities)


__all__ = ["ProviderConfig", "HeaderBuilder", "bearer_headers"]
