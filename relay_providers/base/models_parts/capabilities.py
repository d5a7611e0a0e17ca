"""Adapter capability declaration."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AdapterCapabilities:
    """What an adapter instance accepts; callers consult it before a call.

    Adapters do not silently downgrade unsupported inputs except where the
    adapter documents an encoding fallback.
    """

    streaming: bool = True
    attachments: bool = False
    supports_images: bool = False
    supports_documents: bool = False
    function_calling: bool = False
    system_prompt: bool = True
    max_tokens: int = 4096
    context_window: int = 128000


__all__ = ["AdapterCapabilities"]
