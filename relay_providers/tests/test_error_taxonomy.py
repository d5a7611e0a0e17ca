from __future__ import annotations

import pytest

from relay_providers.base.errors import (
    USER_FRIENDLY_MESSAGES,
    APIError,
    AppError,
    AuthError,
    ErrorCode,
    ErrorSeverity,
    NetworkError,
    ValidationError,
)


@pytest.mark.parametrize(
    "status, code, retryable",
    [
        (400, ErrorCode.API_BAD_REQUEST, False),
        (401, ErrorCode.API_UNAUTHORIZED, False),
        (403, ErrorCode.API_FORBIDDEN, False),
        (404, ErrorCode.API_NOT_FOUND, False),
        (429, ErrorCode.API_RATE_LIMITED, True),
        (500, ErrorCode.API_SERVER_ERROR, True),
        (502, ErrorCode.API_SERVER_ERROR, True),
        (503, ErrorCode.API_SERVICE_UNAVAILABLE, True),
        (504, ErrorCode.API_SERVER_ERROR, True),
        (529, ErrorCode.API_PROVIDER_OVERLOADED, True),
    ],
)
def test_from_http_status_table(status, code, retryable):
    err = APIError.from_http_status(status, "openai")
    assert err.code is code  # nosec B101
    assert err.retryable is retryable  # nosec B101
    assert err.status_code == status  # nosec B101
    assert err.context["provider"] == "openai"  # nosec B101


def test_unmapped_statuses_default_to_server_error():
    five = APIError.from_http_status(507)
    four = APIError.from_http_status(418)
    assert five.code is ErrorCode.API_SERVER_ERROR and five.retryable  # nosec B101
    assert four.code is ErrorCode.API_SERVER_ERROR and not four.retryable  # nosec B101


def test_from_http_status_message_uses_label():
    err = APIError.from_http_status(500, "openai", "Rate limit", label="openai API")
    assert err.message == "openai API error (500): Rate limit"  # nosec B101
    bare = APIError.from_http_status(404, "gemini")
    assert bare.message == "gemini error: Resource not found"  # nosec B101


def test_user_message_defaults_from_table():
    err = AppError(code=ErrorCode.API_RATE_LIMITED, message="x")
    assert err.user_message == USER_FRIENDLY_MESSAGES[ErrorCode.API_RATE_LIMITED]  # nosec B101
    custom = AppError(code=ErrorCode.UNKNOWN, message="x", user_message="custom")
    assert custom.user_message == "custom"  # nosec B101


def test_user_message_table_is_read_only_and_complete():
    with pytest.raises(TypeError):
        USER_FRIENDLY_MESSAGES[ErrorCode.UNKNOWN] = "changed"  # type: ignore[index]
    assert set(USER_FRIENDLY_MESSAGES) == set(ErrorCode)  # nosec B101


def test_str_and_to_dict():
    err = APIError.rate_limited("openai", retry_after=2)
    assert str(err) == "[E2004] Rate limited by openai. Retry after 2s"  # nosec B101
    data = err.to_dict()
    assert data["name"] == "APIError"  # nosec B101
    assert data["code"] == "E2004"  # nosec B101
    assert data["retryable"] is True  # nosec B101
    assert data["context"]["retry_after"] == 2  # nosec B101
    assert data["severity"] == "warning"  # nosec B101


def test_error_code_families():
    assert ErrorCode.NETWORK_TIMEOUT.family == "network"  # nosec B101
    assert ErrorCode.API_CONTENT_FILTERED.family == "api"  # nosec B101
    assert ErrorCode.AUTH_USER_DISABLED.family == "auth"  # nosec B101
    assert ErrorCode.VALIDATION_REQUIRED.family == "validation"  # nosec B101
    assert ErrorCode.APP_ADAPTER_NOT_FOUND.family == "app"  # nosec B101
    assert ErrorCode.UNKNOWN.family == "unknown"  # nosec B101


def test_network_factories():
    assert NetworkError.offline().is_offline  # nosec B101
    timeout = NetworkError.timeout(1500)
    assert timeout.message == "Request timed out after 1500ms"  # nosec B101
    assert timeout.retryable and timeout.severity is ErrorSeverity.WARNING  # nosec B101
    assert NetworkError.dns_failure("api.example.com").context["host"] == "api.example.com"  # nosec B101
    assert NetworkError.ssl_error("bad cert").retryable is False  # nosec B101
    assert NetworkError.connection_refused().code is ErrorCode.NETWORK_CONNECTION_REFUSED  # nosec B101


def test_api_factories():
    overloaded = APIError.provider_overloaded("anthropic")
    assert overloaded.code is ErrorCode.API_PROVIDER_OVERLOADED and overloaded.retryable  # nosec B101
    verification = APIError.verification_required("openai")
    assert verification.severity is ErrorSeverity.INFO and not verification.retryable  # nosec B101
    assert APIError.streaming_failed("x").message == "Streaming failed for x"  # nosec B101
    assert APIError.invalid_api_key("x").status_code == 401  # nosec B101
    assert APIError.content_filtered("x").code is ErrorCode.API_CONTENT_FILTERED  # nosec B101


def test_auth_factories():
    assert AuthError.user_disabled().recoverable is False  # nosec B101
    assert AuthError.network_error().retryable is True  # nosec B101
    apple = AuthError.social_auth_failed("apple")
    assert apple.code is ErrorCode.AUTH_APPLE_FAILED  # nosec B101
    assert AuthError.social_auth_failed("google").code is ErrorCode.AUTH_GOOGLE_FAILED  # nosec B101
    assert AuthError.from_firebase_code("auth/wrong-password").code is ErrorCode.AUTH_INVALID_CREDENTIALS  # nosec B101
    assert AuthError.from_firebase_code("auth/user-not-found").code is ErrorCode.AUTH_USER_NOT_FOUND  # nosec B101


def test_validation_errors_are_never_retryable():
    for err in (
        ValidationError.required("Message"),
        ValidationError.invalid_format("email", "user@host"),
        ValidationError.api_key_invalid("openai"),
        ValidationError.message_too_long(100, 150),
        ValidationError.attachment_too_large(10, 12.5),
        ValidationError.unsupported_format("bmp", ["png", "jpeg"]),
    ):
        assert err.retryable is False  # nosec B101
        assert err.recoverable is True  # nosec B101
        assert err.severity is ErrorSeverity.WARNING  # nosec B101
    assert ValidationError.attachment_too_large(10, 12.5).message == "Attachment is 12.5MB, maximum is 10MB"  # nosec B101
