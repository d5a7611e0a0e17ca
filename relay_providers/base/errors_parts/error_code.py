"""
Normalized error codes and severity levels (taxonomy).

Defines the closed `ErrorCode` enumeration used by every typed error in the
provider layer. Codes are grouped by family through their numeric prefix:

- ``E1xxx`` network
- ``E2xxx`` vendor API
- ``E3xxx`` authentication
- ``E4xxx`` input validation
- ``E5xxx`` application
- ``E9999`` unknown catch-all

Values are considered a stable public contract for logging and analytics.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated error codes representing failure categories."""

    # Network
    NETWORK_OFFLINE = "E1001"
    NETWORK_TIMEOUT = "E1002"
    NETWORK_DNS_FAILURE = "E1003"
    NETWORK_SSL_ERROR = "E1004"
    NETWORK_CONNECTION_REFUSED = "E1005"

    # Vendor API
    API_UNAUTHORIZED = "E2001"
    API_FORBIDDEN = "E2002"
    API_NOT_FOUND = "E2003"
    API_RATE_LIMITED = "E2004"
    API_SERVER_ERROR = "E2005"
    API_SERVICE_UNAVAILABLE = "E2006"
    API_BAD_REQUEST = "E2007"
    API_STREAMING_FAILED = "E2008"
    API_PROVIDER_OVERLOADED = "E2009"
    API_VERIFICATION_REQUIRED = "E2010"
    API_INVALID_RESPONSE = "E2011"
    API_CONTENT_FILTERED = "E2012"

    # Authentication
    AUTH_INVALID_CREDENTIALS = "E3001"
    AUTH_SESSION_EXPIRED = "E3002"
    AUTH_USER_DISABLED = "E3003"
    AUTH_EMAIL_IN_USE = "E3004"
    AUTH_WEAK_PASSWORD = "E3005"
    AUTH_SOCIAL_FAILED = "E3006"
    AUTH_APPLE_FAILED = "E3007"
    AUTH_GOOGLE_FAILED = "E3008"
    AUTH_USER_NOT_FOUND = "E3009"
    AUTH_NETWORK_ERROR = "E3010"

    # Validation
    VALIDATION_REQUIRED = "E4001"
    VALIDATION_INVALID_FORMAT = "E4002"
    VALIDATION_API_KEY_INVALID = "E4003"
    VALIDATION_MESSAGE_TOO_LONG = "E4004"
    VALIDATION_ATTACHMENT_TOO_LARGE = "E4005"
    VALIDATION_UNSUPPORTED_FORMAT = "E4006"

    # Application
    APP_STORAGE_FULL = "E5001"
    APP_PERMISSIONS_DENIED = "E5002"
    APP_FEATURE_UNAVAILABLE = "E5003"
    APP_PREMIUM_REQUIRED = "E5004"
    APP_ADAPTER_NOT_FOUND = "E5005"
    APP_SESSION_NOT_FOUND = "E5006"
    APP_INIT_FAILED = "E5007"

    UNKNOWN = "E9999"

    @property
    def family(self) -> str:
        """Return the family name derived from the numeric prefix."""
        return _FAMILIES.get(self.value[1], "unknown")


_FAMILIES = {
    "1": "network",
    "2": "api",
    "3": "auth",
    "4": "validation",
    "5": "app",
}


class ErrorSeverity(str, Enum):
    """How an outer layer should treat a failure (blocking or not)."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


__all__ = ["ErrorCode", "ErrorSeverity"]
