"""
Error normalization: map arbitrary failures onto the typed taxonomy.

`normalize_error` is called once at the boundary where a failure is first
observed (non-2xx response, transport exception, stream error event). It
never raises; it always returns an :class:`AppError` instance.

Precedence for untyped exceptions:
    1. Structured ``httpx`` exceptions (status errors, timeouts, transport).
    2. Status attributes (``status_code``, ``status``, ``response.status_code``).
    3. Message heuristics, in order: HTTP status in the text, overload,
       organization verification, rate limit, ``auth/<code>``, auth keywords,
       network keywords.
    4. ``UNKNOWN`` wrapping the original exception as ``cause``.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

import httpx

from .api_error import APIError
from .app_error import AppError
from .auth_error import AuthError
from .error_code import ErrorCode
from .network_error import NetworkError

_STATUS_PATTERNS = (
    re.compile(r"\((\d{3})\)"),
    re.compile(r"status[:\s]+(\d{3})", re.IGNORECASE),
)
_FIREBASE_PATTERN = re.compile(r"auth/([a-z-]+)")

_OVERLOAD_KEYWORDS = ("overload", "temporarily busy", "capacity", "529")
_VERIFICATION_KEYWORDS = (
    "organization must be verified",
    "verify organization",
    "verification required",
)
_RATE_LIMIT_KEYWORDS = ("rate limit", "too many requests", "429")
_AUTH_KEYWORDS = ("auth", "sign in", "session", "login", "password", "credential")
_NETWORK_KEYWORDS = (
    "network",
    "fetch",
    "connection",
    "offline",
    "no internet",
    "timeout",
    "timed out",
    "dns",
    "socket",
    "econnrefused",
    "enotfound",
    "refused",
    "ssl",
    "certificate",
)


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(k in text for k in keywords)


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


def _status_from_message(text: str) -> Optional[int]:
    for pattern in _STATUS_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def create_network_error(message: str, cause: Optional[BaseException] = None) -> NetworkError:
    """Sub-classify a network failure by keyword (offline, timeout, dns, ssl, refused)."""
    lowered = message.lower()
    if "offline" in lowered or "no internet" in lowered:
        return NetworkError.offline(cause=cause)
    if "timeout" in lowered or "timed out" in lowered:
        return NetworkError.timeout(cause=cause)
    if _contains_any(lowered, ("dns", "enotfound", "getaddrinfo", "name or service not known")):
        return NetworkError.dns_failure(cause=cause)
    if "ssl" in lowered or "certificate" in lowered:
        return NetworkError.ssl_error(message, cause=cause)
    if "refused" in lowered:
        return NetworkError.connection_refused(cause=cause)
    return NetworkError(code=ErrorCode.NETWORK_OFFLINE, message=message, cause=cause)


def create_auth_error(message: str, cause: Optional[BaseException] = None) -> AuthError:
    """Sub-classify a generic authentication failure by keyword."""
    lowered = message.lower()
    if "expired" in lowered or "session" in lowered:
        return AuthError.session_expired()
    if "disabled" in lowered:
        return AuthError.user_disabled()
    if "not found" in lowered or "no account" in lowered:
        return AuthError.user_not_found()
    if "password" in lowered or "credential" in lowered:
        return AuthError.invalid_credentials()
    return AuthError(code=ErrorCode.AUTH_INVALID_CREDENTIALS, message=message, cause=cause)


def _normalize_exception(exc: BaseException, provider: Optional[str]) -> AppError:
    text = str(exc) or type(exc).__name__
    if isinstance(exc, httpx.HTTPStatusError):
        return APIError.from_http_status(exc.response.status_code, provider, text)
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return NetworkError.timeout(cause=exc)
    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return create_network_error(text, cause=exc)

    status = _extract_status(exc)
    if status is not None:
        return APIError.from_http_status(status, provider, text)

    lowered = text.lower()
    status = _status_from_message(lowered)
    if status is not None:
        return APIError.from_http_status(status, provider, text)
    if _contains_any(lowered, _OVERLOAD_KEYWORDS):
        return APIError.provider_overloaded(provider or "AI")
    if _contains_any(lowered, _VERIFICATION_KEYWORDS):
        return APIError.verification_required(provider or "AI")
    if _contains_any(lowered, _RATE_LIMIT_KEYWORDS):
        return APIError.rate_limited(provider or "AI")
    firebase = _FIREBASE_PATTERN.search(text)
    if firebase:
        return AuthError.from_firebase_code(f"auth/{firebase.group(1)}", text)
    if _contains_any(lowered, _AUTH_KEYWORDS):
        return create_auth_error(text, cause=exc)
    if _contains_any(lowered, _NETWORK_KEYWORDS):
        return create_network_error(text, cause=exc)
    return AppError(code=ErrorCode.UNKNOWN, message=text, cause=exc)


def normalize_error(raw: Any, context: Optional[Mapping[str, Any]] = None) -> AppError:
    """Return a typed :class:`AppError` for any failure value.

    Parameters:
        raw: Exception, message string, mapping with a ``message`` key, or
            an existing ``AppError``.
        context: Extra diagnostic keys. A ``provider`` entry is used to label
            vendor errors. Existing context keys on ``raw`` are never
            overwritten.

    Returns:
        An ``AppError``. Re-normalizing a typed error returns the same
        instance with its context merged, so normalization is idempotent.
    """
    ctx: Dict[str, Any] = dict(context or {})
    if isinstance(raw, AppError):
        return raw.merge_context(ctx)
    provider = ctx.get("provider")
    if isinstance(raw, BaseException):
        err = _normalize_exception(raw, provider)
    elif isinstance(raw, str):
        err = AppError(code=ErrorCode.UNKNOWN, message=raw)
    elif isinstance(raw, Mapping) and "message" in raw:
        err = AppError(code=ErrorCode.UNKNOWN, message=str(raw["message"]))
    else:
        err = AppError(code=ErrorCode.UNKNOWN, message="An unknown error occurred")
    return err.merge_context(ctx)


__all__ = [
    "normalize_error",
    "create_network_error",
    "create_auth_error",
    "_extract_status",
]
