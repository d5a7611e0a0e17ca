"""
Input validation error type.

Raised before any vendor call is made. Validation failures are always
``warning`` severity, recoverable, and never retryable: the same input would
fail the same way.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .app_error import AppError
from .error_code import ErrorCode, ErrorSeverity


@dataclass(eq=False)
class ValidationError(AppError):
    """Invalid caller input (``field`` names the offending input)."""

    severity: ErrorSeverity = ErrorSeverity.WARNING
    field: Optional[str] = None
    value: Any = None

    def __post_init__(self) -> None:
        super().__post_init__()
        self.severity = ErrorSeverity.WARNING
        self.recoverable = True
        self.retryable = False

    @classmethod
    def required(cls, field: str) -> "ValidationError":
        return cls(
            code=ErrorCode.VALIDATION_REQUIRED,
            message=f"{field} is required",
            user_message=f"Please enter a {field.lower()}.",
            field=field,
        )

    @classmethod
    def invalid_format(cls, field: str, expected_format: Optional[str] = None) -> "ValidationError":
        if expected_format:
            message = f"{field} has invalid format. Expected: {expected_format}"
        else:
            message = f"{field} has invalid format"
        return cls(code=ErrorCode.VALIDATION_INVALID_FORMAT, message=message, field=field)

    @classmethod
    def api_key_invalid(cls, provider: str) -> "ValidationError":
        return cls(
            code=ErrorCode.VALIDATION_API_KEY_INVALID,
            message=f"Invalid API key format for {provider}",
            user_message=f"The API key for {provider} appears to be invalid. Please check and try again.",
            field="api_key",
            context={"provider": provider},
        )

    @classmethod
    def message_too_long(cls, max_length: int, current_length: Optional[int] = None) -> "ValidationError":
        if current_length:
            message = f"Message is {current_length} characters, maximum is {max_length}"
        else:
            message = f"Message exceeds {max_length} characters"
        return cls(
            code=ErrorCode.VALIDATION_MESSAGE_TOO_LONG,
            message=message,
            user_message=f"Your message is too long. Please shorten it to {max_length} characters.",
            field="content",
        )

    @classmethod
    def attachment_too_large(cls, max_size_mb: float, actual_size_mb: Optional[float] = None) -> "ValidationError":
        if actual_size_mb:
            message = f"Attachment is {actual_size_mb:.1f}MB, maximum is {max_size_mb:g}MB"
        else:
            message = f"Attachment exceeds {max_size_mb:g}MB limit"
        return cls(
            code=ErrorCode.VALIDATION_ATTACHMENT_TOO_LARGE,
            message=message,
            user_message=f"Attachment is too large. Maximum size is {max_size_mb:g}MB.",
            field="attachment",
        )

    @classmethod
    def unsupported_format(cls, fmt: str, supported_formats: Optional[Sequence[str]] = None) -> "ValidationError":
        supported = ", ".join(supported_formats) if supported_formats else "supported formats"
        return cls(
            code=ErrorCode.VALIDATION_UNSUPPORTED_FORMAT,
            message=f"Format '{fmt}' is not supported. Use: {supported}",
            field="format",
            value=fmt,
        )


__all__ = ["ValidationError"]
