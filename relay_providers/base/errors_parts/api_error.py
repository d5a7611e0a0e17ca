"""
Vendor API error type.

Covers HTTP-level failures, vendor error payloads and streaming failures.
``from_http_status`` holds the authoritative status table; the remaining
factories build the vendor-specific variants (overload, verification, ...).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional

from .app_error import AppError
from .error_code import ErrorCode, ErrorSeverity


class _StatusEntry(NamedTuple):
    code: ErrorCode
    message: str
    retryable: bool


_HTTP_STATUS_MAP: Dict[int, _StatusEntry] = {
    400: _StatusEntry(ErrorCode.API_BAD_REQUEST, "Bad request", False),
    401: _StatusEntry(ErrorCode.API_UNAUTHORIZED, "Invalid API key", False),
    403: _StatusEntry(ErrorCode.API_FORBIDDEN, "Access forbidden", False),
    404: _StatusEntry(ErrorCode.API_NOT_FOUND, "Resource not found", False),
    429: _StatusEntry(ErrorCode.API_RATE_LIMITED, "Rate limit exceeded", True),
    500: _StatusEntry(ErrorCode.API_SERVER_ERROR, "Server error", True),
    502: _StatusEntry(ErrorCode.API_SERVER_ERROR, "Bad gateway", True),
    503: _StatusEntry(ErrorCode.API_SERVICE_UNAVAILABLE, "Service unavailable", True),
    504: _StatusEntry(ErrorCode.API_SERVER_ERROR, "Gateway timeout", True),
    529: _StatusEntry(ErrorCode.API_PROVIDER_OVERLOADED, "Service overloaded", True),
}


@dataclass(eq=False)
class APIError(AppError):
    """Failure reported by (or while talking to) a vendor API.

    ``status_code`` is ``0`` when no HTTP status applies (mid-stream
    failures). ``provider`` and ``status_code`` are mirrored into
    ``context`` for structured logging.
    """

    status_code: int = 0
    provider: Optional[str] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        self.context["provider"] = self.provider
        self.context["status_code"] = self.status_code

    @classmethod
    def from_http_status(
        cls,
        status_code: int,
        provider: Optional[str] = None,
        original_message: Optional[str] = None,
        *,
        label: Optional[str] = None,
    ) -> "APIError":
        """Map an HTTP status to a typed error.

        Unmapped statuses default to a server error that is retryable only
        for the 5xx range. ``label`` replaces the provider name as the
        message prefix (e.g. ``"openai API"``).
        """
        entry = _HTTP_STATUS_MAP.get(status_code) or _StatusEntry(
            ErrorCode.API_SERVER_ERROR, "API error", status_code >= 500
        )
        label = label or provider or "API"
        if original_message:
            message = f"{label} error ({status_code}): {original_message}"
        else:
            message = f"{label} error: {entry.message}"
        return cls(
            code=entry.code,
            message=message,
            status_code=status_code,
            provider=provider,
            retryable=entry.retryable,
        )

    @classmethod
    def provider_overloaded(cls, provider: str) -> "APIError":
        return cls(
            code=ErrorCode.API_PROVIDER_OVERLOADED,
            message=f"{provider} is currently overloaded",
            user_message=f"{provider} is currently busy. Please try again in a moment.",
            status_code=503,
            provider=provider,
            severity=ErrorSeverity.WARNING,
            retryable=True,
        )

    @classmethod
    def verification_required(cls, provider: str) -> "APIError":
        return cls(
            code=ErrorCode.API_VERIFICATION_REQUIRED,
            message=f"{provider} requires organization verification for streaming",
            user_message=f"Streaming is disabled for {provider}. Non-streaming mode will be used.",
            status_code=403,
            provider=provider,
            severity=ErrorSeverity.INFO,
            retryable=False,
        )

    @classmethod
    def streaming_failed(cls, provider: str, reason: Optional[str] = None, *, retryable: bool = True) -> "APIError":
        return cls(
            code=ErrorCode.API_STREAMING_FAILED,
            message=reason or f"Streaming failed for {provider}",
            status_code=0,
            provider=provider,
            severity=ErrorSeverity.WARNING,
            retryable=retryable,
        )

    @classmethod
    def rate_limited(cls, provider: str, retry_after: Optional[float] = None) -> "APIError":
        if retry_after:
            message = f"Rate limited by {provider}. Retry after {retry_after:g}s"
        else:
            message = f"Rate limited by {provider}"
        return cls(
            code=ErrorCode.API_RATE_LIMITED,
            message=message,
            status_code=429,
            provider=provider,
            severity=ErrorSeverity.WARNING,
            retryable=True,
            context={"retry_after": retry_after} if retry_after else {},
        )

    @classmethod
    def invalid_api_key(cls, provider: str) -> "APIError":
        return cls(
            code=ErrorCode.API_UNAUTHORIZED,
            message=f"Invalid API key for {provider}",
            user_message=f"Your {provider} API key is invalid. Please check your settings.",
            status_code=401,
            provider=provider,
            retryable=False,
        )

    @classmethod
    def content_filtered(cls, provider: str) -> "APIError":
        return cls(
            code=ErrorCode.API_CONTENT_FILTERED,
            message=f"Response filtered by {provider} content policy",
            status_code=400,
            provider=provider,
            severity=ErrorSeverity.WARNING,
            retryable=False,
        )


__all__ = ["APIError"]
