"""
Error-to-HTTP mapper.

Renders every failure as the uniform error body
{statusCode, error, message, timestamp, path}. Status and code come from a
single table keyed by ErrorKind; framework errors (validation, unknown route,
wrong verb) are assigned a kind and go through the same table.
"""

import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.models import ErrorResponse
from src.domain.exceptions import (
    AuthenticationError,
    ErrorKind,
    ProviderError,
    RateLimitExceeded,
)

logger = logging.getLogger(__name__)

ERROR_RESPONSES: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.VALIDATION: (400, "VALIDATION_ERROR"),
    ErrorKind.INVALID_OTP: (401, "INVALID_OTP"),
    ErrorKind.USER_ALREADY_EXISTS: (409, "USER_ALREADY_EXISTS"),
    ErrorKind.OTP_EXPIRED: (410, "OTP_EXPIRED"),
    ErrorKind.RATE_LIMIT_EXCEEDED: (429, "RATE_LIMIT_EXCEEDED"),
    ErrorKind.SERVICE_UNAVAILABLE: (503, "SERVICE_UNAVAILABLE"),
    ErrorKind.CONFIGURATION: (500, "CONFIGURATION_ERROR"),
    ErrorKind.PROVIDER: (502, "PROVIDER_ERROR"),  # ProviderError carries its own
    ErrorKind.ROUTE_NOT_FOUND: (404, "ENDPOINT_NOT_FOUND"),
    ErrorKind.METHOD_NOT_ALLOWED: (405, "METHOD_NOT_ALLOWED"),
    ErrorKind.UNEXPECTED: (500, "INTERNAL_SERVER_ERROR"),
}

AVAILABLE_ENDPOINTS = (
    "POST /api/v1/auth/register, POST /api/v1/auth/verify-otp, "
    "POST /api/v1/auth/resend-otp, GET /api/v1/auth/health"
)
UNEXPECTED_MESSAGE = "An unexpected error occurred. Please try again later."


def error_response(
    kind: ErrorKind,
    message: str,
    request: Request,
    *,
    status_code: int | None = None,
    error_code: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the uniform error body for an error kind."""
    default_status, default_code = ERROR_RESPONSES[kind]
    body = ErrorResponse(
        status_code=status_code or default_status,
        error=error_code or default_code,
        message=message,
        timestamp=datetime.now().isoformat(),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=body.status_code,
        content=body.model_dump(by_alias=True),
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        # Only field names and messages; never the rejected input
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location)
        message = error.get("msg", "Invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return ", ".join(messages) or "Invalid request"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = _validation_message(exc)
    logger.warning("Validation error on %s: %s", request.url.path, message)
    return error_response(ErrorKind.VALIDATION, message, request)


async def authentication_exception_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    status_code, _ = ERROR_RESPONSES[exc.kind]
    if status_code >= 500:
        logger.error("%s on %s: %s", exc.kind.value, request.url.path, exc.message)
    else:
        logger.warning("%s on %s: %s", exc.kind.value, request.url.path, exc.message)

    if isinstance(exc, ProviderError):
        return error_response(
            exc.kind,
            exc.message,
            request,
            status_code=exc.status_code,
            error_code=exc.error_code,
        )

    headers = None
    if isinstance(exc, RateLimitExceeded) and exc.retry_after_seconds is not None:
        headers = {"Retry-After": str(exc.retry_after_seconds)}
    return error_response(exc.kind, exc.message, request, headers=headers)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    path = request.url.path
    method = request.method

    if exc.status_code == 404:
        logger.warning("Endpoint not found: %s %s", method, path)
        message = f"Endpoint not found: {method} {path}"
        if "/auth" in path or "/api" in path:
            message += f". Available endpoints: {AVAILABLE_ENDPOINTS}"
        return error_response(ErrorKind.ROUTE_NOT_FOUND, message, request)

    if exc.status_code == 405:
        allowed = (exc.headers or {}).get("Allow", "unknown")
        logger.warning("Method not supported: %s %s (supported: %s)", method, path, allowed)
        message = (
            f"HTTP method '{method}' is not supported for this endpoint. "
            f"Supported methods: {allowed}"
        )
        return error_response(
            ErrorKind.METHOD_NOT_ALLOWED, message, request, headers=exc.headers
        )

    return error_response(
        ErrorKind.UNEXPECTED,
        str(exc.detail),
        request,
        status_code=exc.status_code,
        error_code="HTTP_ERROR",
        headers=exc.headers,
    )


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s: %s", request.url.path, exc)
    return error_response(ErrorKind.UNEXPECTED, UNEXPECTED_MESSAGE, request)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error mapper on an application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(AuthenticationError, authentication_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
