"""
Network-level error type.

Connection failures observed before any vendor response exists (offline,
timeouts, DNS, TLS, refused connections). Network errors default to
``warning`` severity and are retryable, except TLS failures which usually
indicate a configuration problem rather than a transient condition.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .app_error import AppError
from .error_code import ErrorCode, ErrorSeverity


@dataclass(eq=False)
class NetworkError(AppError):
    """Failure to reach a vendor endpoint."""

    severity: ErrorSeverity = ErrorSeverity.WARNING
    retryable: bool = True
    is_offline: bool = False

    @classmethod
    def offline(cls, cause: Optional[BaseException] = None) -> "NetworkError":
        return cls(
            code=ErrorCode.NETWORK_OFFLINE,
            message="Device is offline",
            is_offline=True,
            cause=cause,
        )

    @classmethod
    def timeout(cls, timeout_ms: Optional[float] = None, cause: Optional[BaseException] = None) -> "NetworkError":
        message = f"Request timed out after {int(timeout_ms)}ms" if timeout_ms else "Request timed out"
        return cls(
            code=ErrorCode.NETWORK_TIMEOUT,
            message=message,
            context={"timeout_ms": timeout_ms} if timeout_ms else {},
            cause=cause,
        )

    @classmethod
    def dns_failure(cls, host: Optional[str] = None, cause: Optional[BaseException] = None) -> "NetworkError":
        message = f"DNS lookup failed for {host}" if host else "DNS lookup failed"
        return cls(
            code=ErrorCode.NETWORK_DNS_FAILURE,
            message=message,
            context={"host": host} if host else {},
            cause=cause,
        )

    @classmethod
    def ssl_error(cls, details: Optional[str] = None, cause: Optional[BaseException] = None) -> "NetworkError":
        return cls(
            code=ErrorCode.NETWORK_SSL_ERROR,
            message=details or "SSL/TLS connection failed",
            retryable=False,
            cause=cause,
        )

    @classmethod
    def connection_refused(cls, host: Optional[str] = None, cause: Optional[BaseException] = None) -> "NetworkError":
        message = f"Connection refused by {host}" if host else "Connection refused"
        return cls(
            code=ErrorCode.NETWORK_CONNECTION_REFUSED,
            message=message,
            context={"host": host} if host else {},
            cause=cause,
        )


__all__ = ["NetworkError"]
