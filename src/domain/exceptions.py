"""
Domain exceptions - Semantic error types for authentication.

This module defines the error taxonomy raised by the provider gateway and
passed through by the authentication service. Each exception carries an
ErrorKind; the API layer maps kinds to HTTP responses from a single table.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Every error kind the API can render."""

    VALIDATION = "VALIDATION"
    INVALID_OTP = "INVALID_OTP"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    OTP_EXPIRED = "OTP_EXPIRED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    CONFIGURATION = "CONFIGURATION"
    PROVIDER = "PROVIDER"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    UNEXPECTED = "UNEXPECTED"


class AuthenticationError(Exception):
    """Base class for authentication domain errors."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UserAlreadyExists(AuthenticationError):
    """The provider reports an account for this email."""

    kind = ErrorKind.USER_ALREADY_EXISTS


class InvalidOtp(AuthenticationError):
    """The OTP code is wrong (or rejected as invalid by the provider)."""

    kind = ErrorKind.INVALID_OTP


class OtpExpired(AuthenticationError):
    """The OTP code is past the provider's expiry window."""

    kind = ErrorKind.OTP_EXPIRED


class RateLimitExceeded(AuthenticationError):
    """The provider throttled OTP delivery for this account."""

    kind = ErrorKind.RATE_LIMIT_EXCEEDED

    def __init__(self, message: str, retry_after_seconds: int | None = None) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class ServiceUnavailable(AuthenticationError):
    """Provider returned 5xx or could not be reached."""

    kind = ErrorKind.SERVICE_UNAVAILABLE


class ConfigurationError(AuthenticationError):
    """Provider URL or credentials are missing or malformed."""

    kind = ErrorKind.CONFIGURATION


class ProviderError(AuthenticationError):
    """
    Any other 4xx from the provider.

    Carries the provider's status code and a symbolic error code, both of
    which are echoed to the caller.
    """

    kind = ErrorKind.PROVIDER

    def __init__(self, message: str, status_code: int, error_code: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
