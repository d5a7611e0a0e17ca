"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `relay_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode, ErrorSeverity
from .user_messages import USER_FRIENDLY_MESSAGES, user_message_for
from .app_error import AppError
from .network_error import NetworkError
from .api_error import APIError
from .auth_error import AuthError
from .validation_error import ValidationError
from .normalizer import normalize_error
from .sse_message import extract_sse_error_message, map_error_type_to_message

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
    "extract_sse_error_message",
    "map_error_type_to_message",
]
