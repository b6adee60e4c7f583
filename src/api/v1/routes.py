"""
API v1 routes.

Defines REST endpoints for the Authentication API. Handlers are plain
functions: FastAPI runs them in its thread pool, so the blocking provider
calls do not stall the event loop.
"""

import logging

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_authentication_service
from src.api.models import (
    AuthResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    RegisterRequest,
    ResendOtpRequest,
    VerifyOtpRequest,
)
from src.domain.authentication import AuthenticationService
from src.domain.masking import mask_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_common_errors = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    500: {"model": ErrorResponse, "description": "Configuration or unexpected error"},
    503: {"model": ErrorResponse, "description": "Authentication provider unavailable"},
}


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    responses={
        **_common_errors,
        409: {"model": ErrorResponse, "description": "User already exists"},
    },
    summary="Register a new user",
    description="Create an account with the authentication provider. "
    "A 6-digit verification code is emailed to the provided address.",
)
def register(
    request_data: RegisterRequest,
    service: AuthenticationService = Depends(get_authentication_service),
) -> AuthResponse:
    """
    Register a new user.

    - **firstname** / **lastname**: Stored as user metadata
    - **email**: Valid email address to register
    - **password**: Password (minimum 8 characters)

    No session is returned until the OTP is verified.
    """
    logger.info("Received registration request for email: %s", mask_email(request_data.email))
    outcome = service.register(
        request_data.firstname,
        request_data.lastname,
        request_data.email,
        request_data.password,
    )
    return AuthResponse.from_outcome(outcome)


@router.post(
    "/verify-otp",
    response_model=AuthResponse,
    responses={
        **_common_errors,
        401: {"model": ErrorResponse, "description": "Invalid OTP"},
        410: {"model": ErrorResponse, "description": "OTP expired"},
    },
    summary="Verify OTP code",
    description="Exchange the 6-digit code received via email for session tokens.",
)
def verify_otp(
    request_data: VerifyOtpRequest,
    service: AuthenticationService = Depends(get_authentication_service),
) -> AuthResponse:
    logger.info(
        "Received OTP verification request for email: %s", mask_email(request_data.email)
    )
    outcome = service.verify_otp(request_data.email, request_data.token, request_data.type)
    return AuthResponse.from_outcome(outcome)


@router.post(
    "/resend-otp",
    response_model=MessageResponse,
    responses={
        **_common_errors,
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
    summary="Resend OTP code",
    description="Send a fresh verification code. Rate limited by the provider.",
)
def resend_otp(
    request_data: ResendOtpRequest,
    service: AuthenticationService = Depends(get_authentication_service),
) -> MessageResponse:
    logger.info("Received OTP resend request for email: %s", mask_email(request_data.email))
    return MessageResponse(message=service.resend_otp(request_data.email))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health() -> HealthResponse:
    """Liveness only; does not contact the provider."""
    return HealthResponse(status="UP", service="Authentication API")
