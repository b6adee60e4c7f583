"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from src.domain.records import AuthOutcome, SessionRecord, UserRecord

# Surrounding whitespace is stripped, so blank names fail min_length
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    firstname: Name = Field(..., description="First name")
    lastname: Name = Field(..., description="Last name")
    email: EmailStr
    password: str = Field(..., min_length=8, description="User password (min 8 characters)")


class VerifyOtpRequest(BaseModel):
    """Request model for OTP verification."""

    email: EmailStr
    token: str = Field(
        ...,
        min_length=6,
        max_length=6,
        pattern=r"^[0-9]{6}$",
        description="6-digit verification code",
    )
    type: str | None = Field(
        default=None, description="GoTrue verification type (server default: signup)"
    )


class ResendOtpRequest(BaseModel):
    """Request model for resending the verification code."""

    email: EmailStr


class UserData(BaseModel):
    """User fields returned by the provider."""

    id: str
    email: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str | None = None
    confirmed_at: str | None = None
    email_confirmed_at: str | None = None
    identities: list[dict[str, Any]] | None = None

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserData":
        return cls(
            id=record.id,
            email=record.email,
            user_metadata=record.user_metadata,
            created_at=record.created_at,
            confirmed_at=record.confirmed_at,
            email_confirmed_at=record.email_confirmed_at,
            identities=record.identities,
        )


class SessionData(BaseModel):
    """Session tokens issued after OTP verification."""

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionData":
        return cls(
            access_token=record.access_token,
            token_type=record.token_type,
            expires_in=record.expires_in,
            refresh_token=record.refresh_token,
        )


class AuthResponse(BaseModel):
    """Response model for registration and OTP verification."""

    user: UserData | None
    session: SessionData | None
    message: str

    @classmethod
    def from_outcome(cls, outcome: AuthOutcome) -> "AuthResponse":
        return cls(
            user=UserData.from_record(outcome.user) if outcome.user else None,
            session=SessionData.from_record(outcome.session) if outcome.session else None,
            message=outcome.message,
        )


class MessageResponse(BaseModel):
    """Response model carrying only a status message."""

    message: str


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    service: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(..., alias="statusCode")
    error: str
    message: str
    timestamp: str
    path: str
