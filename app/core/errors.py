"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional; each error populates only what applies to it.
    """

    hint: str
    field_errors: dict[str, list[str]]
    http_status: int
    retry_after: int
    limit: int
    remaining: int
    reset_at: int
    post_id: str
    username: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when client input fails validation (BAD_REQUEST)."""


class AuthenticationAppError(AppError):
    """Raised when a private operation is called without a valid session (UNAUTHORIZED)."""


class NotFoundAppError(AppError):
    """Raised when a referenced post or user does not exist (NOT_FOUND)."""


class RateLimitAppError(AppError):
    """Raised when an author exceeds the write budget (TOO_MANY_REQUESTS)."""


class ConsistencyAppError(AppError):
    """Raised when data across services disagrees, e.g. a post whose author is gone."""


class IdentityProviderAppError(AppError):
    """Raised when the identity provider cannot be reached or answers with an error."""


class PersistenceAppError(AppError):
    """Raised when the post store fails."""


class ConfigurationAppError(AppError):
    """Raised when the server is misconfigured (missing key, unknown adapter name)."""
