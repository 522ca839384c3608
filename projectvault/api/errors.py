"""
Error translation - Domain exceptions to HTTP responses.

Every error body has the shape ``{"detail": "..."}``; throttling errors
add ``retryAfterSeconds`` and a ``Retry-After`` header. Storage failures
never expose internal detail.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from projectvault.domain.exceptions import (
    AuthError,
    CooldownError,
    DeliveryError,
    FormatError,
    InvalidOrExpiredError,
    NoActiveSessionError,
    NotAuthenticatedError,
    ProfileNotFoundError,
    RangeError,
    RateLimitError,
    StorageError,
)

logger = logging.getLogger(__name__)


def error_response(
    status_code: int, detail: str, retry_after_seconds: int | None = None
) -> JSONResponse:
    content: dict[str, object] = {"detail": detail}
    headers = None
    if retry_after_seconds is not None:
        content["retryAfterSeconds"] = retry_after_seconds
        headers = {"Retry-After": str(retry_after_seconds)}
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def auth_error_response(exc: AuthError) -> JSONResponse:
    """Map a domain error to its HTTP response."""
    if isinstance(exc, (FormatError, RangeError)):
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    if isinstance(exc, (RateLimitError, CooldownError)):
        return error_response(
            status.HTTP_429_TOO_MANY_REQUESTS, str(exc), exc.retry_after_seconds
        )
    if isinstance(exc, InvalidOrExpiredError):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid or expired passcode")
    if isinstance(exc, NotAuthenticatedError):
        return error_response(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
    if isinstance(exc, ProfileNotFoundError):
        return error_response(status.HTTP_404_NOT_FOUND, "Profile not found")
    if isinstance(exc, NoActiveSessionError):
        return error_response(status.HTTP_400_BAD_REQUEST, "No active session")
    if isinstance(exc, DeliveryError):
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send passcode")
    if isinstance(exc, StorageError):
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
    logger.error("Unmapped auth error: %r", exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def _handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    return auth_error_response(exc)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return error_response(
        status.HTTP_400_BAD_REQUEST, f"{field}: {message}" if field else message
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain and validation error handlers on app."""
    app.add_exception_handler(AuthError, _handle_auth_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
