"""
Display-safe message extraction from vendor error payloads.

Vendor error bodies arrive in many shapes (streamed ``error`` events, JSON
bodies of non-2xx responses, bare strings, HTML error pages). The helpers
here pull a short human-readable sentence out of them and fall back to a
caller supplied default rather than surfacing raw JSON or markup.

Extraction order for a payload mapping:
    1. ``data`` string (JSON parsed when possible)
    2. ``message`` (string or nested object)
    3. ``error`` (string or nested object)
followed by status-based wording when a ``status`` is present.
"""
from __future__ import annotations

import json
from typing import Any, Mapping, Optional

_MAX_MESSAGE_LENGTH = 200

_AUTH_WORDS = ("api key", "auth", "credential", "unauthorized")
_RATE_WORDS = ("rate", "limit")
_AVAILABILITY_WORDS = ("overload", "unavailable", "temporarily")

_ERROR_TYPE_MESSAGES = {
    "overloaded_error": "The AI service is temporarily overloaded. Please try again",
    "rate_limit_error": "Rate limit exceeded. Please wait a moment before trying again",
    "authentication_error": "Authentication failed. Please check your API key",
    "invalid_api_key": "Invalid API key. Please check your settings",
    "invalid_request_error": "Invalid request. Please try again",
    "server_error": "The AI service encountered an error. Please try again",
    "timeout_error": "Request timed out. Please try again",
}


def _extract_nested_message(obj: Any) -> Optional[str]:
    """Return the first message found in a parsed error object, if any."""
    if not isinstance(obj, Mapping):
        return None
    error = obj.get("error")
    if isinstance(error, Mapping):
        if isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error.get("status"), str):
            return error["status"]
    if isinstance(obj.get("message"), str):
        return obj["message"]
    if isinstance(error, str):
        return error
    if obj.get("type") == "error" and isinstance(error, Mapping) and isinstance(error.get("message"), str):
        return error["message"]
    return None


def _extract_from_json_string(text: str) -> Optional[str]:
    """Parse ``text`` as JSON, else accept it only if it reads like a sentence."""
    try:
        return _extract_nested_message(json.loads(text))
    except ValueError:
        trimmed = text.strip()
        if trimmed.startswith(("{", "[", "<")):
            return None
        if len(trimmed) > _MAX_MESSAGE_LENGTH:
            return None
        return trimmed


def _enhance_with_status(status: int, message: str) -> str:
    """Replace unhelpful vendor text with status-appropriate wording."""
    lowered = message.lower()
    if status in (401, 403) and not any(w in lowered for w in _AUTH_WORDS):
        return "Invalid API key or unauthorized access"
    if status == 429 and not any(w in lowered for w in _RATE_WORDS):
        return "Rate limit exceeded. Please try again later"
    if (500 <= status < 600 or status == 529) and not any(w in lowered for w in _AVAILABILITY_WORDS):
        return "The AI service is temporarily unavailable. Please try again"
    return message


def extract_sse_error_message(error: Any, default_message: str = "Connection failed") -> str:
    """Extract a user-friendly message from an SSE error event or error body.

    Parameters:
        error: Mapping shaped like ``{"data": str, "message": str|dict,
            "error": str|dict, "status": int}``. Any other value yields the
            default.
        default_message: Text returned when nothing usable is found.

    Returns:
        A short display-safe message; never raw JSON, HTML, or text longer
        than 200 characters.
    """
    if not isinstance(error, Mapping):
        return default_message

    message = default_message
    data = error.get("data")
    msg = error.get("message")
    err = error.get("error")
    if isinstance(data, str) and data:
        extracted = _extract_from_json_string(data)
        if extracted:
            message = extracted
    elif msg:
        if isinstance(msg, str):
            message = _extract_from_json_string(msg) or default_message
        elif isinstance(msg, Mapping):
            message = _extract_nested_message(msg) or default_message
    elif err:
        if isinstance(err, str):
            message = err
        elif isinstance(err, Mapping):
            message = _extract_nested_message(err) or default_message

    status = error.get("status")
    if isinstance(status, int) and not isinstance(status, bool):
        message = _enhance_with_status(status, message)
    return message


def map_error_type_to_message(error_type: str) -> Optional[str]:
    """Return display text for a known vendor error ``type`` string."""
    return _ERROR_TYPE_MESSAGES.get(error_type)


__all__ = ["extract_sse_error_message", "map_error_type_to_message"]
