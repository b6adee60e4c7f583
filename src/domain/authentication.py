"""
Authentication domain service - Provider-backed registration and OTP flows.

This module orchestrates the three public use cases. Each one is a straight
translation pipeline:

    inbound fields -> provider call (via AuthGateway) -> AuthOutcome

Password hashing, OTP generation, token issuance and rate limiting all
happen at the provider. Errors raised by the gateway pass through unchanged;
the API layer maps them to HTTP responses.
"""

import logging
from dataclasses import dataclass

from .exceptions import UserAlreadyExists
from .masking import mask_email
from .ports import AuthGateway
from .records import AuthOutcome

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "Registration successful. Please check your email for the verification code."
VERIFIED_MESSAGE = "Email verified successfully. You are now logged in."
OTP_SENT_MESSAGE = "OTP code has been sent to your email"


@dataclass
class AuthenticationService:
    """
    Domain service for authentication use cases.

    When precheck_existing_user is set, registration first probes the
    provider for an existing account. The probe emails an OTP to existing
    accounts and is best-effort; signup's own duplicate detection still runs.
    """

    gateway: AuthGateway
    precheck_existing_user: bool = False
    default_otp_type: str = "signup"

    def register(self, firstname: str, lastname: str, email: str, password: str) -> AuthOutcome:
        """
        Register a new user; the provider emails the verification code.

        Returns:
            AuthOutcome with the provider's user record and no session

        Raises:
            UserAlreadyExists: If the provider already has this email
        """
        logger.info("Registering new user with email: %s", mask_email(email))

        if self.precheck_existing_user and self.gateway.check_user_exists(email):
            logger.warning("User with email %s already exists", mask_email(email))
            raise UserAlreadyExists(f"User with email {mask_email(email)} already exists")

        metadata = {"firstname": firstname, "lastname": lastname}
        user = self.gateway.signup(email, password, metadata)

        logger.info("User registered successfully. OTP sent to: %s", mask_email(email))
        # No session until the OTP is verified
        return AuthOutcome(user=user, session=None, message=REGISTERED_MESSAGE)

    def verify_otp(self, email: str, token: str, type: str | None = None) -> AuthOutcome:
        """
        Verify an OTP and return the session issued by the provider.

        Raises:
            InvalidOtp: Wrong code
            OtpExpired: Code past the provider's expiry window
        """
        logger.info("Verifying OTP for email: %s", mask_email(email))
        user, session = self.gateway.verify_otp(email, token, type or self.default_otp_type)
        logger.info("OTP verified successfully for email: %s", mask_email(email))
        return AuthOutcome(user=user, session=session, message=VERIFIED_MESSAGE)

    def resend_otp(self, email: str) -> str:
        """
        Ask the provider to send a fresh OTP to an existing account.

        Raises:
            RateLimitExceeded: Provider is throttling this address
        """
        logger.info("Resending OTP to email: %s", mask_email(email))
        self.gateway.send_otp(email, create_user=False)
        logger.info("OTP resent successfully to email: %s", mask_email(email))
        return OTP_SENT_MESSAGE
