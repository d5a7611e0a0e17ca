"""Unified error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``relay_providers.base.errors_parts`` to maintain a stable import path.
Every failure that leaves the provider layer is an :class:`AppError`
subclass produced by (or already compatible with) :func:`normalize_error`.
"""

from .errors_parts.error_code import ErrorCode, ErrorSeverity
from .errors_parts.user_messages import USER_FRIENDLY_MESSAGES, user_message_for
from .errors_parts.app_error import AppError
from .errors_parts.network_error import NetworkError
from .errors_parts.api_error import APIError
from .errors_parts.auth_error import AuthError
from .errors_parts.validation_error import ValidationError
from .errors_parts.normalizer import normalize_error, create_auth_error, create_network_error
from .errors_parts.sse_message import extract_sse_error_message, map_error_type_to_message

__all__ = [
    "ErrorCode",
    "ErrorSeverity",
    "USER_FRIENDLY_MESSAGES",
    "user_message_for",
    "AppError",
    "NetworkError",
    "APIError",
    "AuthError",
    "ValidationError",
    "normalize_error",
    "create_auth_error",
    "create_network_error",
    "extract_sse_error_message",
    "map_error_type_to_message",
]
