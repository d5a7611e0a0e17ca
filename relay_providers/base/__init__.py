"""
Providers Base Package

Exports the provider-agnostic building blocks shared by every vendor adapter:

- Adapter base class and the lazy provider factory
- Models (DTOs): messages, attachments, citations, send results
- Canonical stream events and the SSE / simulated stream pipeline
- Error taxonomy, retry engine, cancellation and timeouts
"""

from .adapter import BaseAdapter, ChatRequest
from .cancellation import CancellationToken, CancelledError
from .dto import AdapterParams
from .errors import (
    APIError,
    AppError,
    AuthError,
    ErrorCode,
    ErrorSeverity,
    NetworkError,
    ValidationError,
    normalize_error,
)
from .factory import ProviderFactory, create_adapter
from .history import ResumptionContext
from .models import (
    AdapterCapabilities,
    AttachmentType,
    Citation,
    Message,
    MessageAttachment,
    ProviderConfig,
    SendResult,
    SenderType,
    Usage,
)
from .resilience import RetryConfig, calculate_max_wait_time, with_retry
from .streaming import Citations, Done, StreamError, StreamEvent, TextDelta
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "BaseAdapter",
    "ChatRequest",
    "CancellationToken",
    "CancelledError",
    "AdapterParams",
    "APIError",
    "AppError",
    "AuthError",
    "ErrorCode",
    "ErrorSeverity",
    "NetworkError",
    "ValidationError",
    "normalize_error",
    "ProviderFactory",
    "create_adapter",
    "ResumptionContext",
    "AdapterCapabilities",
    "AttachmentType",
    "Citation",
    "Message",
    "MessageAttachment",
    "ProviderConfig",
    "SendResult",
    "SenderType",
    "Usage",
    "RetryConfig",
    "calculate_max_wait_time",
    "with_retry",
    "Citations",
    "Done",
    "StreamError",
    "StreamEvent",
    "TextDelta",
    "TimeoutConfig",
    "get_timeout_config",
]
