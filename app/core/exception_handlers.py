"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain, request validation and unexpected) and return consistent JSON
responses with proper HTTP status codes and traceability.

Design:
- AppError subclasses → mapped HTTP status (400, 401, 404, 429, 500)
- RequestValidationError → 400 with field-level messages
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import (
    AppError,
    AuthenticationAppError,
    ConfigurationAppError,
    ConsistencyAppError,
    IdentityProviderAppError,
    NotFoundAppError,
    PersistenceAppError,
    RateLimitAppError,
)
from app.core.logging import get_request_id

logger = logging.getLogger(__name__)

# Request locations FastAPI prefixes onto validation error paths
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}

GENERIC_VALIDATION_MESSAGE = "Request validation failed."


def _status_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(exc, AuthenticationAppError):
        return 401
    if isinstance(exc, NotFoundAppError):
        return 404
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(
        exc,
        (ConfigurationAppError, ConsistencyAppError, IdentityProviderAppError, PersistenceAppError),
    ):
        return 500
    return 400  # Default: client error


def _rate_limit_headers(exc: RateLimitAppError) -> dict[str, str]:
    if not settings.app.rate_limit_include_headers or not exc.details:
        return {}

    headers: dict[str, str] = {}
    if "retry_after" in exc.details:
        headers["Retry-After"] = str(exc.details["retry_after"])
    if "limit" in exc.details:
        headers["X-RateLimit-Limit"] = str(exc.details["limit"])
    if "remaining" in exc.details:
        headers["X-RateLimit-Remaining"] = str(exc.details["remaining"])
    if "reset_at" in exc.details:
        headers["X-RateLimit-Reset"] = str(exc.details["reset_at"])
    return headers


def build_field_errors(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic validation errors by dotted field path.

    Args:
        errors: Error dicts as returned by ``RequestValidationError.errors()``.

    Returns:
        Mapping of field path (e.g. ``"content"``) to its messages, in order.

    Examples:
        >>> build_field_errors([{"loc": ("body", "content"), "msg": "Too long"}])
        {'content': ['Too long']}
    """
    field_errors: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(loc) or "__root__"
        field_errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return field_errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    All responses include:
    - error.code: Machine-readable error code
    - error.message: Human-readable message
    - error.request_id: For distributed tracing
    - error.details: Optional structured context

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code = _status_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    error_content: dict[str, Any] = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }

    if exc.details:
        error_content["details"] = exc.details

    headers = _rate_limit_headers(exc) if isinstance(exc, RateLimitAppError) else {}

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
        headers=headers or None,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert FastAPI request validation failures into 400 responses.

    The first message for a field is what a client should show the user
    (e.g. ``details.field_errors.content[0]``); clients fall back to a generic
    message when no field error is present.
    """
    field_errors = build_field_errors(list(exc.errors()))

    logger.info(
        "request_validation_failed",
        extra={
            "fields": sorted(field_errors),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "invalid_request",
                "message": GENERIC_VALIDATION_MESSAGE,
                "request_id": get_request_id(),
                "details": {"field_errors": field_errors},
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message.
    No stack traces reach the client.

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from app.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
