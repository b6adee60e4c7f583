"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, logging, and lifespan events.

Serve it with uvicorn:

    uvicorn src.api.main:app --host 0.0.0.0 --port 8080
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.adapters.gotrue.http import create_gotrue_client
from src.api.errors import register_exception_handlers
from src.api.v1 import router as v1_router
from src.config.logging import configure_logging
from src.config.settings import get_settings
from src.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Registration and OTP verification backed by Supabase Auth",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the shared GoTrue HTTP client on startup
    - Closes the client on shutdown

    A configuration error does not abort startup: the health endpoint keeps
    answering and provider-backed endpoints report CONFIGURATION_ERROR.
    """
    settings = get_settings()

    logger.info("Starting application...")

    try:
        app.state.gotrue_client = create_gotrue_client(settings)
    except ConfigurationError as exc:
        logger.error("Supabase client not configured: %s", exc.message)
        app.state.gotrue_client = None

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    client = getattr(app.state, "gotrue_client", None)
    if client is not None:
        client.close()
        logger.info("Supabase HTTP client closed")


configure_logging(get_settings().log_level)

app = FastAPI(
    title="Authentication API",
    description="REST facade over Supabase Auth (GoTrue) - registration and OTP verification",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/api/v1/auth")
