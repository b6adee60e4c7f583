"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

import threading

import httpx
from fastapi import Depends, Request

from src.adapters.gotrue.client import GoTrueAuthGateway
from src.adapters.gotrue.http import create_gotrue_client
from src.config.settings import Settings, get_settings
from src.domain.authentication import AuthenticationService

_client_lock = threading.Lock()


def get_http_client(
    request: Request, settings: Settings = Depends(get_settings)
) -> httpx.Client:
    """
    Get the shared GoTrue HTTP client from app state.

    The client is normally created during app lifespan startup. If startup
    could not build it (or lifespan did not run), it is built on first use,
    which raises ConfigurationError for a missing or malformed provider URL
    or key.
    """
    client = getattr(request.app.state, "gotrue_client", None)
    if client is not None:
        return client
    # Sync routes run in a thread pool; build at most one client
    with _client_lock:
        client = getattr(request.app.state, "gotrue_client", None)
        if client is None:
            client = create_gotrue_client(settings)
            request.app.state.gotrue_client = client
    return client


def get_auth_gateway(
    client: httpx.Client = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> GoTrueAuthGateway:
    """Create the provider gateway bound to the shared client."""
    return GoTrueAuthGateway(client=client, settings=settings)


def get_authentication_service(
    gateway: GoTrueAuthGateway = Depends(get_auth_gateway),
    settings: Settings = Depends(get_settings),
) -> AuthenticationService:
    """
    Create authentication service with injected dependencies.

    Wires the provider gateway into the domain service.
    """
    return AuthenticationService(
        gateway=gateway,
        precheck_existing_user=settings.precheck_existing_user,
        default_otp_type=settings.otp_email_template_type,
    )
