"""
GoTrue wire shapes.

Pydantic models for the request bodies sent to the provider and the response
bodies it returns. Responses ignore unknown fields; the provider sends many
that this service does not use.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from src.domain.records import SessionRecord, UserRecord


class SignupPayload(BaseModel):
    """Body for POST /signup."""

    email: str
    password: str
    data: dict[str, Any]  # Stored by the provider as user_metadata


class OtpPayload(BaseModel):
    """Body for POST /otp."""

    email: str
    create_user: bool = False


class VerifyPayload(BaseModel):
    """Body for POST /verify."""

    email: str
    token: str
    type: str


class GoTrueUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str = ""
    user_metadata: dict[str, Any] | None = None
    created_at: str | None = None
    confirmed_at: str | None = None
    email_confirmed_at: str | None = None
    identities: list[dict[str, Any]] | None = None

    def to_record(self) -> UserRecord:
        return UserRecord(
            id=self.id,
            email=self.email,
            user_metadata=self.user_metadata or {},
            created_at=self.created_at,
            confirmed_at=self.confirmed_at,
            email_confirmed_at=self.email_confirmed_at,
            identities=self.identities,
        )


class GoTrueSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    expires_in: int = 0
    refresh_token: str = ""

    def to_record(self) -> SessionRecord:
        return SessionRecord(
            access_token=self.access_token,
            token_type=self.token_type,
            expires_in=self.expires_in,
            refresh_token=self.refresh_token,
        )


class GoTrueAuthResponse(BaseModel):
    """
    Normalized /signup or /verify response.

    GoTrue answers in three shapes depending on project settings:
    - a {"user": ..., "session": ...} envelope
    - a bare user object (/signup with email confirmation enabled)
    - top-level session fields plus "user" (/verify, autoconfirm signup)
    """

    user: GoTrueUser | None = None
    session: GoTrueSession | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "GoTrueAuthResponse":
        if not isinstance(payload, dict):
            return cls()

        if "user" in payload or "session" in payload:
            user = payload.get("user")
            session = payload.get("session")
            if session is None and payload.get("access_token"):
                session = payload
            return cls(
                user=GoTrueUser.model_validate(user) if user else None,
                session=GoTrueSession.model_validate(session) if session else None,
            )

        if "id" in payload:
            return cls(user=GoTrueUser.model_validate(payload))

        return cls()
