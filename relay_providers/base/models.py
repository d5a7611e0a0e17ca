"""Shared value types consumed by every adapter.

Re-exports the one-type-per-module implementations under
``relay_providers.base.models_parts`` to keep a stable import path.
"""

from .models_parts import (
    AdapterCapabilities,
    AttachmentType,
    Citation,
    HeaderBuilder,
    Message,
    MessageAttachment,
    ProviderConfig,
    SendResult,
    SenderType,
    Usage,
    bearer_headers,
)

__all__ = [
    "AdapterCapabilities",
    "AttachmentType",
    "Citation",
    "HeaderBuilder",
    "Message",
    "MessageAttachment",
    "ProviderConfig",
    "SendResult",
    "SenderType",
    "Usage",
    "bearer_headers",
]
