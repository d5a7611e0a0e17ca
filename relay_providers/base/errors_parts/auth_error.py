"""
Authentication error type.

Account-level failures (credentials, sessions, social sign-in). The
``from_firebase_code`` table maps the ``auth/<code>`` identifiers produced by
common identity back-ends onto the taxonomy.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Literal, Optional

from .app_error import AppError
from .error_code import ErrorCode, ErrorSeverity

AuthProvider = Literal["email", "apple", "google"]


@dataclass(eq=False)
class AuthError(AppError):
    """Failure while authenticating the end user."""

    auth_provider: Optional[AuthProvider] = None

    @classmethod
    def invalid_credentials(cls) -> "AuthError":
        return cls(
            code=ErrorCode.AUTH_INVALID_CREDENTIALS,
            message="Invalid email or password",
            auth_provider="email",
        )

    @classmethod
    def session_expired(cls) -> "AuthError":
        return cls(code=ErrorCode.AUTH_SESSION_EXPIRED, message="Session has expired")

    @classmethod
    def user_disabled(cls) -> "AuthError":
        return cls(
            code=ErrorCode.AUTH_USER_DISABLED,
            message="User account is disabled",
            recoverable=False,
        )

    @classmethod
    def email_in_use(cls, email: Optional[str] = None) -> "AuthError":
        message = f"Email {email} is already in use" if email else "Email is already in use"
        return cls(code=ErrorCode.AUTH_EMAIL_IN_USE, message=message, auth_provider="email")

    @classmethod
    def weak_password(cls) -> "AuthError":
        return cls(code=ErrorCode.AUTH_WEAK_PASSWORD, message="Password is too weak", auth_provider="email")

    @classmethod
    def social_auth_failed(cls, provider: Literal["apple", "google"], reason: Optional[str] = None) -> "AuthError":
        code = ErrorCode.AUTH_APPLE_FAILED if provider == "apple" else ErrorCode.AUTH_GOOGLE_FAILED
        label = "Apple" if provider == "apple" else "Google"
        return cls(
            code=code,
            message=reason or f"{provider} sign-in failed",
            user_message=f"Unable to sign in with {label}. Please try again or use another method.",
            auth_provider=provider,
        )

    @classmethod
    def user_not_found(cls, email: Optional[str] = None) -> "AuthError":
        message = f"No account found for {email}" if email else "No account found with this email"
        return cls(code=ErrorCode.AUTH_USER_NOT_FOUND, message=message, auth_provider="email")

    @classmethod
    def network_error(cls) -> "AuthError":
        return cls(
            code=ErrorCode.AUTH_NETWORK_ERROR,
            message="Network error during authentication",
            severity=ErrorSeverity.WARNING,
            retryable=True,
        )

    @classmethod
    def from_firebase_code(cls, code: str, original_message: Optional[str] = None) -> "AuthError":
        """Map an ``auth/<code>`` identifier; unknown codes become invalid credentials."""
        factory = _FIREBASE_CODES.get(code)
        if factory is not None:
            return factory()
        return cls(
            code=ErrorCode.AUTH_INVALID_CREDENTIALS,
            message=original_message or "Authentication failed",
        )


_FIREBASE_CODES: Dict[str, Callable[[], AuthError]] = {
    "auth/user-not-found": AuthError.user_not_found,
    "auth/wrong-password": AuthError.invalid_credentials,
    "auth/invalid-email": lambda: AuthError(
        code=ErrorCode.AUTH_INVALID_CREDENTIALS, message="Invalid email format"
    ),
    "auth/email-already-in-use": AuthError.email_in_use,
    "auth/weak-password": AuthError.weak_password,
    "auth/user-disabled": AuthError.user_disabled,
    "auth/network-request-failed": AuthError.network_error,
    "auth/too-many-requests": lambda: AuthError(
        code=ErrorCode.AUTH_INVALID_CREDENTIALS,
        message="Too many failed attempts. Please try again later.",
        retryable=True,
    ),
}


__all__ = ["AuthError", "AuthProvider"]
