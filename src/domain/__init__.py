"""
Domain layer - Pure business logic with zero framework imports.

This package contains the authentication use cases and the error taxonomy.
It defines its own port interface for the hosted authentication provider,
keeping HTTP concerns in the adapters and API packages.
"""

from .authentication import AuthenticationService
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    ErrorKind,
    InvalidOtp,
    OtpExpired,
    ProviderError,
    RateLimitExceeded,
    ServiceUnavailable,
    UserAlreadyExists,
)
from .ports import AuthGateway
from .records import AuthOutcome, SessionRecord, UserRecord

__all__ = [
    "AuthGateway",
    "AuthOutcome",
    "AuthenticationError",
    "AuthenticationService",
    "ConfigurationError",
    "ErrorKind",
    "InvalidOtp",
    "OtpExpired",
    "ProviderError",
    "RateLimitExceeded",
    "ServiceUnavailable",
    "SessionRecord",
    "UserAlreadyExists",
    "UserRecord",
]
