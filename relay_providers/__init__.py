"""relay_providers package

One normalization layer over several LLM vendor APIs.

Purpose:
    Give callers a single adapter surface (``send_message``, ``stream_events``,
    ``stream_message``) regardless of vendor wire format, with one error
    taxonomy and one retry policy. Adapters are created by name through
    :func:`create_adapter`; vendor modules are imported on first use.

Public API (re-exported):
    - Version: ``__version__``
    - Factory: :func:`create_adapter`, :class:`ProviderFactory`
    - Errors: :class:`AppError` and subclasses, :class:`ErrorCode`,
      :func:`normalize_error`
    - Models: :class:`Message`, :class:`MessageAttachment`, :class:`Citation`,
      :class:`SendResult`
    - Streaming: :class:`TextDelta`, :class:`Citations`, :class:`StreamError`,
      :class:`Done`, :class:`CancellationToken`
    - Retry: :func:`with_retry`, :class:`RetryConfig`
"""

from .base import (
    APIError,
    AdapterParams,
    AppError,
    AuthError,
    BaseAdapter,
    CancellationToken,
    Citation,
    Citations,
    Done,
    ErrorCode,
    Message,
    MessageAttachment,
    NetworkError,
    ProviderFactory,
    RetryConfig,
    SendResult,
    StreamError,
    TextDelta,
    ValidationError,
    create_adapter,
    normalize_error,
    with_retry,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "create_adapter",
    "ProviderFactory",
    "AdapterParams",
    "BaseAdapter",
    "AppError",
    "APIError",
    "AuthError",
    "NetworkError",
    "ValidationError",
    "ErrorCode",
    "normalize_error",
    "Message",
    "MessageAttachment",
    "Citation",
    "SendResult",
    "TextDelta",
    "Citations",
    "StreamError",
    "Done",
    "CancellationToken",
    "RetryConfig",
    "with_retry",
]
