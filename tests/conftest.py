"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Settings isolated from the environment and .env files
- httpx clients backed by httpx.MockTransport
- An in-memory fake GoTrue provider
"""

import itertools
import json
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from src.adapters.gotrue.http import create_gotrue_client
from src.config.settings import Settings

SUPABASE_URL = "https://project.supabase.co"
ANON_KEY = "test-anon-key"

Handler = Callable[[httpx.Request], httpx.Response]


def make_settings(**overrides) -> Settings:
    """Create settings that ignore the process environment's .env file."""
    values = {"supabase_url": SUPABASE_URL, "supabase_anon_key": ANON_KEY}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_client(settings: Settings, handler: Handler) -> httpx.Client:
    """Create the production HTTP client with a mocked transport."""
    return create_gotrue_client(settings, transport=httpx.MockTransport(handler))


@pytest.fixture
def settings() -> Settings:
    """Default test settings."""
    return make_settings()


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build settings with overrides."""
    return make_settings


@pytest.fixture
def client_factory() -> Callable[[Settings, Handler], httpx.Client]:
    """Build a GoTrue HTTP client around a request handler."""
    return make_client


@dataclass
class FakeAccount:
    id: str
    email: str
    password: str
    metadata: dict
    created_at: str = "2024-05-01T10:00:00.000000Z"
    confirmed_at: str | None = None


@dataclass
class FakeGoTrue:
    """
    In-memory stand-in for the GoTrue REST API.

    Issues deterministic OTP codes, enforces a per-address send window and an
    OTP lifetime against a manually advanced clock.
    """

    rate_window_seconds: int = 60
    otp_lifetime_seconds: int = 3600
    now: float = 0.0
    accounts: dict[str, FakeAccount] = field(default_factory=dict)
    codes: dict[str, tuple[str, float]] = field(default_factory=dict)
    last_sent: dict[str, float] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    _counter: itertools.count = field(default_factory=lambda: itertools.count(100001))

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def latest_code(self, email: str) -> str:
        return self.codes[email][0]

    def calls_to(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path.endswith(path))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content or b"{}")
        path = request.url.path.removeprefix("/auth/v1")
        if path == "/signup":
            return self._signup(body)
        if path == "/otp":
            return self._otp(body)
        if path == "/verify":
            return self._verify(body)
        return httpx.Response(404, json={"msg": "Not found"})

    def _issue_code(self, email: str) -> None:
        self.codes[email] = (str(next(self._counter)), self.now)
        self.last_sent[email] = self.now

    def _user(self, account: FakeAccount, identities: list | None = None) -> dict:
        return {
            "id": account.id,
            "email": account.email,
            "user_metadata": account.metadata,
            "created_at": account.created_at,
            "confirmed_at": account.confirmed_at,
            "email_confirmed_at": account.confirmed_at,
            "identities": identities if identities is not None else [{"provider": "email"}],
        }

    def _signup(self, body: dict) -> httpx.Response:
        email = body["email"]
        if email in self.accounts:
            # GoTrue hides duplicates behind a 200 with no identities
            return httpx.Response(200, json=self._user(self.accounts[email], identities=[]))
        account = FakeAccount(
            id=str(uuid.uuid4()),
            email=email,
            password=body["password"],
            metadata=body.get("data") or {},
        )
        self.accounts[email] = account
        self._issue_code(email)
        return httpx.Response(200, json=self._user(account))

    def _otp(self, body: dict) -> httpx.Response:
        email = body["email"]
        if email not in self.accounts and not body.get("create_user"):
            return httpx.Response(
                422,
                json={"code": 422, "error_code": "otp_disabled", "msg": "Signups not allowed for otp"},
            )
        sent_at = self.last_sent.get(email)
        if sent_at is not None and self.now - sent_at < self.rate_window_seconds:
            return httpx.Response(
                429,
                json={
                    "code": 429,
                    "error_code": "over_email_send_rate_limit",
                    "msg": "For security purposes, you can only request this after 60 seconds.",
                },
            )
        self._issue_code(email)
        return httpx.Response(200, json={})

    def _verify(self, body: dict) -> httpx.Response:
        email = body["email"]
        issued = self.codes.get(email)
        if issued is None or issued[0] != body["token"]:
            return httpx.Response(
                401, json={"code": 401, "error_code": "bad_otp", "msg": "Token is wrong"}
            )
        if self.now - issued[1] > self.otp_lifetime_seconds:
            return httpx.Response(
                410, json={"code": 410, "error_code": "otp_expired", "msg": "OTP has expired"}
            )
        account = self.accounts[email]
        account.confirmed_at = "2024-05-01T10:05:00.000000Z"
        del self.codes[email]
        return httpx.Response(
            200,
            json={
                "access_token": "access-" + account.id,
                "token_type": "bearer",
                "expires_in": 3600,
                "expires_at": 1714561500,
                "refresh_token": "refresh-" + account.id,
                "user": self._user(account),
            },
        )


@pytest.fixture
def fake_gotrue() -> FakeGoTrue:
    """Fresh fake provider for each test."""
    return FakeGoTrue()
