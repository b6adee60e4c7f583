"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interface (port) that the domain requires from the
authentication provider. Adapters implement this protocol.
"""

from typing import Any, Protocol

from .records import SessionRecord, UserRecord


class AuthGateway(Protocol):
    """Port interface for the hosted authentication provider."""

    def signup(self, email: str, password: str, metadata: dict[str, Any]) -> UserRecord:
        """
        Create an account; the provider emails an OTP as a side effect.

        Raises:
            UserAlreadyExists: Provider reports a duplicate (422, marker text,
                or an empty identity list on a 200)
            ServiceUnavailable: Provider 5xx or network failure
            ProviderError: Any other 4xx
        """
        ...

    def send_otp(self, email: str, create_user: bool = False) -> None:
        """
        Ask the provider to email a fresh OTP.

        Raises:
            RateLimitExceeded: Provider returned 429
            ServiceUnavailable: Provider 5xx or network failure
            ProviderError: Any other 4xx
        """
        ...

    def verify_otp(
        self, email: str, token: str, type: str
    ) -> tuple[UserRecord, SessionRecord | None]:
        """
        Exchange an OTP for a session.

        Raises:
            InvalidOtp: Provider returned 401 or an "invalid" marker
            OtpExpired: Provider returned 410 or an "expired" marker
            ServiceUnavailable: Provider 5xx or network failure
            ProviderError: Any other 4xx
        """
        ...

    def check_user_exists(self, email: str) -> bool:
        """
        Best-effort existence probe.

        Sends an OTP to the address when the account exists.
        """
        ...
