"""
GoTrue gateway adapter - Implements AuthGateway protocol.

Sole point of contact with the hosted authentication provider. Issues the
signup, OTP and verify calls and translates provider failures into the domain
error taxonomy.

Provider error heuristics
=========================

Some provider failures are only distinguishable by status code plus body
wording. The (status, body substring) -> error rules live in the explicit
tables below and are evaluated in order, first match wins. They are fragile:
they depend on upstream message text that the provider does not guarantee.

    /signup   422                          -> UserAlreadyExists
              "already registered"         -> UserAlreadyExists
              "already been registered"    -> UserAlreadyExists
              200 with empty identities    -> UserAlreadyExists
    /verify   401                          -> InvalidOtp
              "invalid"                    -> InvalidOtp
              "Token has expired"          -> InvalidOtp
              410                          -> OtpExpired
              "expired"                    -> OtpExpired
    /otp      429                          -> RateLimitExceeded

Everything else: 5xx and network failures -> ServiceUnavailable, other 4xx
-> ProviderError carrying the provider status.
"""

import logging
import socket
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from src.config.settings import Settings
from src.domain.exceptions import (
    AuthenticationError,
    InvalidOtp,
    OtpExpired,
    ProviderError,
    RateLimitExceeded,
    ServiceUnavailable,
    UserAlreadyExists,
)
from src.domain.masking import mask_email
from src.domain.records import SessionRecord, UserRecord

from .schemas import GoTrueAuthResponse, OtpPayload, SignupPayload, VerifyPayload

logger = logging.getLogger(__name__)

USER_EXISTS_MESSAGE = "User with this email already exists"
INVALID_OTP_MESSAGE = "The OTP code provided is incorrect or has expired"
OTP_EXPIRED_MESSAGE = "The OTP code has expired. Please request a new one."
UNAVAILABLE_MESSAGE = (
    "Authentication service is temporarily unavailable. Please try again later."
)
DNS_FAILURE_MESSAGE = (
    "Unable to resolve the Supabase host. Please check your SUPABASE_URL configuration."
)
CONNECTION_REFUSED_MESSAGE = (
    "Unable to connect to Supabase. "
    "Please check if the URL is correct and the service is accessible."
)
TIMEOUT_MESSAGE = (
    "Connection to Supabase timed out. "
    "The service may be slow or unreachable. Please try again."
)
NETWORK_ERROR_MESSAGE = (
    "Network error occurred while connecting to authentication service. "
    "Please check your internet connection."
)
BAD_RESPONSE_MESSAGE = "Authentication service returned an unexpected response."

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated with hostname",
)


@dataclass(frozen=True)
class ErrorRule:
    """Maps a provider 4xx to a domain error by status code or body marker."""

    error: type[AuthenticationError]
    message: str
    status: int | None = None
    marker: str | None = None

    def matches(self, status_code: int, body: str) -> bool:
        if self.status is not None and status_code == self.status:
            return True
        return self.marker is not None and self.marker in body


SIGNUP_ERROR_RULES = (
    ErrorRule(UserAlreadyExists, USER_EXISTS_MESSAGE, status=422),
    ErrorRule(UserAlreadyExists, USER_EXISTS_MESSAGE, marker="already registered"),
    ErrorRule(UserAlreadyExists, USER_EXISTS_MESSAGE, marker="already been registered"),
)

VERIFY_ERROR_RULES = (
    ErrorRule(InvalidOtp, INVALID_OTP_MESSAGE, status=401),
    ErrorRule(InvalidOtp, INVALID_OTP_MESSAGE, marker="invalid"),
    ErrorRule(InvalidOtp, INVALID_OTP_MESSAGE, marker="Token has expired"),
    ErrorRule(OtpExpired, OTP_EXPIRED_MESSAGE, status=410),
    ErrorRule(OtpExpired, OTP_EXPIRED_MESSAGE, marker="expired"),
)


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _is_dns_failure(exc: httpx.ConnectError) -> bool:
    for error in _exception_chain(exc):
        if isinstance(error, socket.gaierror):
            return True
    text = str(exc).lower()
    return any(marker in text for marker in _DNS_MARKERS)


def _is_connection_refused(exc: httpx.ConnectError) -> bool:
    for error in _exception_chain(exc):
        if isinstance(error, ConnectionRefusedError):
            return True
    return "connection refused" in str(exc).lower()


def _provider_message(response: httpx.Response) -> str:
    """Best human-readable message from a provider error body."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("msg", "error_description", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}"


class GoTrueAuthGateway:
    """
    Implements AuthGateway protocol over the GoTrue REST API.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Holds no per-request state; one instance may serve concurrent requests.
    """

    def __init__(self, client: httpx.Client, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def signup(self, email: str, password: str, metadata: dict[str, Any]) -> UserRecord:
        """Create an account; GoTrue emails the OTP automatically."""
        logger.debug("Calling Supabase signup endpoint for email: %s", mask_email(email))

        payload = SignupPayload(email=email, password=password, data=metadata)
        response = self._post("/signup", payload, "signup")

        if not response.is_success:
            body = response.text
            logger.error("Supabase signup failed with status %s: %s", response.status_code, body)
            self._raise_for_rules(SIGNUP_ERROR_RULES, response.status_code, body)
            if response.status_code == 400:
                raise ProviderError(
                    "Invalid request data. Please check your input.", 400, "BAD_REQUEST"
                )
            raise ProviderError(
                f"Signup failed: {_provider_message(response)}",
                response.status_code,
                "SIGNUP_FAILED",
            )

        result = self._parse(response, "signup")
        if result.user is None:
            logger.error("Supabase signup response carried no user")
            raise ServiceUnavailable(BAD_RESPONSE_MESSAGE)

        logger.debug(
            "Supabase signup response - User: %s, Session: %s",
            result.user.id,
            "present" if result.session else "null",
        )

        # GoTrue answers 200 with no identities when the email is taken
        if result.user.identities is not None and not result.user.identities:
            logger.warning(
                "User signup returned empty identities - user likely already exists: %s",
                mask_email(email),
            )
            raise UserAlreadyExists(USER_EXISTS_MESSAGE)

        return result.user.to_record()

    def send_otp(self, email: str, create_user: bool = False) -> None:
        """Ask GoTrue to email a fresh OTP."""
        logger.debug("Calling Supabase OTP endpoint for email: %s", mask_email(email))

        payload = OtpPayload(email=email, create_user=create_user)
        response = self._post("/otp", payload, "send OTP")

        if not response.is_success:
            body = response.text
            logger.error(
                "Supabase OTP request failed with status %s: %s", response.status_code, body
            )
            if response.status_code == 429 and self._settings.rate_limit_enabled:
                raise RateLimitExceeded(
                    self._settings.format_rate_limit_message(),
                    retry_after_seconds=self._settings.rate_limit_wait_time_seconds,
                )
            if response.status_code == 400:
                raise ProviderError("Invalid email address.", 400, "BAD_REQUEST")
            raise ProviderError(
                f"OTP request failed: {_provider_message(response)}",
                response.status_code,
                "OTP_REQUEST_FAILED",
            )

        logger.info("OTP sent successfully to email: %s", mask_email(email))

    def verify_otp(
        self, email: str, token: str, type: str
    ) -> tuple[UserRecord, SessionRecord | None]:
        """Exchange an OTP for a session."""
        logger.debug("Calling Supabase verify endpoint for email: %s", mask_email(email))

        payload = VerifyPayload(email=email, token=token, type=type)
        response = self._post("/verify", payload, "verify OTP")

        if not response.is_success:
            body = response.text
            logger.error(
                "Supabase OTP verification failed with status %s: %s",
                response.status_code,
                body,
            )
            self._raise_for_rules(VERIFY_ERROR_RULES, response.status_code, body)
            if response.status_code == 400:
                raise ProviderError(
                    "Invalid verification request. Please check your input.", 400, "BAD_REQUEST"
                )
            raise ProviderError(
                f"OTP verification failed: {_provider_message(response)}",
                response.status_code,
                "VERIFICATION_FAILED",
            )

        result = self._parse(response, "verify OTP")
        if result.user is None:
            logger.error("Supabase verify response carried no user")
            raise ServiceUnavailable(BAD_RESPONSE_MESSAGE)

        session = result.session.to_record() if result.session else None
        return result.user.to_record(), session

    def check_user_exists(self, email: str) -> bool:
        """
        Probe /otp with create_user=false.

        200 means the account exists (and GoTrue sends it an OTP). A 429 also
        counts as existing since the limiter only trips for real accounts.
        Any other 4xx means no account. Provider or network failures are
        logged and reported as not existing.
        """
        logger.info("Checking if user exists for email: %s", mask_email(email))

        payload = OtpPayload(email=email, create_user=False)
        try:
            response = self._post("/otp", payload, "user existence check")
        except ServiceUnavailable as exc:
            logger.error(
                "Error checking user existence for %s: %s", mask_email(email), exc.message
            )
            return False

        if response.is_success:
            logger.info("User exists (OTP sent successfully): %s", mask_email(email))
            return True

        logger.info("OTP check returned status %s, body: %s", response.status_code, response.text)
        if response.status_code == 429:
            logger.info("Rate limit reached, assuming user exists: %s", mask_email(email))
            return True

        logger.info("User does not exist (status %s): %s", response.status_code, mask_email(email))
        return False

    def _post(self, path: str, payload: BaseModel, operation: str) -> httpx.Response:
        """
        POST a JSON body, returning the response for 2xx and 4xx.

        Raises:
            ServiceUnavailable: Any other status or any transport failure
        """
        try:
            response = self._client.post(path, json=payload.model_dump())
        except httpx.TimeoutException as exc:
            logger.error("Connection timeout during %s: %s", operation, exc)
            raise ServiceUnavailable(TIMEOUT_MESSAGE) from exc
        except httpx.ConnectError as exc:
            if _is_dns_failure(exc):
                logger.error(
                    "Invalid Supabase URL or DNS resolution failed during %s: %s", operation, exc
                )
                raise ServiceUnavailable(DNS_FAILURE_MESSAGE) from exc
            if _is_connection_refused(exc):
                logger.error("Connection refused during %s: %s", operation, exc)
                raise ServiceUnavailable(CONNECTION_REFUSED_MESSAGE) from exc
            logger.error("Connection error during %s: %s", operation, exc)
            raise ServiceUnavailable(NETWORK_ERROR_MESSAGE) from exc
        except httpx.TransportError as exc:
            logger.error("Network error during %s: %s", operation, exc)
            raise ServiceUnavailable(NETWORK_ERROR_MESSAGE) from exc

        if response.is_server_error:
            # 5xx bodies are not logged or echoed
            logger.error("Supabase server error during %s: %s", operation, response.status_code)
            raise ServiceUnavailable(UNAVAILABLE_MESSAGE)
        if not (response.is_success or response.is_client_error):
            # Redirects are not followed and never relayed to callers
            logger.error(
                "Unexpected Supabase status during %s: %s", operation, response.status_code
            )
            raise ServiceUnavailable(BAD_RESPONSE_MESSAGE)

        return response

    def _parse(self, response: httpx.Response, operation: str) -> GoTrueAuthResponse:
        try:
            return GoTrueAuthResponse.from_payload(response.json())
        except (ValueError, ValidationError) as exc:
            logger.error("Unreadable Supabase response during %s: %s", operation, exc)
            raise ServiceUnavailable(BAD_RESPONSE_MESSAGE) from exc

    @staticmethod
    def _raise_for_rules(rules: tuple[ErrorRule, ...], status_code: int, body: str) -> None:
        for rule in rules:
            if rule.matches(status_code, body):
                raise rule.error(rule.message)
