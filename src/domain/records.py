"""
Provider-origin records.

Value objects describing what the provider returned. They are built by the
gateway adapter, read by the service and serialized by the API layer; none of
them outlives a single request.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UserRecord:
    """User account as reported by the provider."""

    id: str
    email: str
    user_metadata: dict[str, Any] = field(default_factory=dict)
    created_at: str | None = None
    confirmed_at: str | None = None
    email_confirmed_at: str | None = None
    # An empty list is the provider's signal of a pre-existing account
    identities: list[dict[str, Any]] | None = None


@dataclass(frozen=True)
class SessionRecord:
    """Session tokens issued by the provider after OTP verification."""

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str


@dataclass(frozen=True)
class AuthOutcome:
    """Result of a registration or verification use case."""

    user: UserRecord | None
    session: SessionRecord | None
    message: str
