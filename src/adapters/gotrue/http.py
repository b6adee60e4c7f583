"""
Outbound HTTP client for the GoTrue API.

Builds a single httpx.Client bound to the provider's base URL with the
apikey header and connect/read timeouts. The client is created during app
startup (or on first use) and shared across requests.
"""

import logging
from urllib.parse import urlsplit

import httpx

from src.config.settings import Settings
from src.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def validate_base_url(url: str) -> str:
    """
    Check the provider base URL is usable.

    Returns:
        The URL without a trailing slash

    Raises:
        ConfigurationError: Missing URL, unsupported scheme, or missing host
    """
    if not url or not url.strip():
        raise ConfigurationError(
            "Supabase URL is not configured. Please set SUPABASE_URL environment variable."
        )

    url = url.strip()
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid Supabase URL format: {url}. Error: {exc}") from exc

    if parts.scheme.lower() not in ("http", "https"):
        raise ConfigurationError(
            f"Invalid Supabase URL protocol. Must be http or https. Current: {url}"
        )
    if not parts.hostname:
        raise ConfigurationError(f"Invalid Supabase URL. Missing host. Current: {url}")

    if parts.scheme.lower() == "http":
        logger.warning("Using HTTP instead of HTTPS for Supabase URL. This is insecure!")

    return url.rstrip("/")


def create_gotrue_client(
    settings: Settings, transport: httpx.BaseTransport | None = None
) -> httpx.Client:
    """
    Create the HTTP client used by the GoTrue gateway.

    Args:
        settings: Application settings
        transport: Optional transport override (tests use httpx.MockTransport)

    Raises:
        ConfigurationError: Base URL or anon key is missing or malformed
    """
    base_url = validate_base_url(settings.auth_base_url)

    if not settings.supabase_anon_key or not settings.supabase_anon_key.strip():
        raise ConfigurationError(
            "Supabase anon key is not configured. Please set SUPABASE_ANON_KEY environment variable."
        )

    logger.info("Initializing Supabase HTTP client with base URL: %s", base_url)

    # Read timeout also bounds write and pool acquisition
    timeout = httpx.Timeout(
        settings.http_read_timeout_seconds,
        connect=settings.http_connect_timeout_seconds,
    )

    return httpx.Client(
        base_url=base_url,
        timeout=timeout,
        transport=transport,
        headers={
            "apikey": settings.supabase_anon_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
    )
