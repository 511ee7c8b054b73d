"""Session token authentication.

Callers prove their identity with a session token issued by the identity
provider, sent as ``Authorization: Bearer <token>`` or in the provider's
session cookie. The token is a JWT; its ``sub`` claim is the user id.

Design principles:
- The authenticated user id is the only source of a post's author
- Dependency Injection: used via FastAPI Depends() for loose coupling
- Configuration-driven: verification key and algorithms come from env vars
- Testable: token verification is a plain function
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Header, Request
from jose import JWTError, jwt

from app.core.config import settings
from app.core.errors import AuthenticationAppError, ConfigurationAppError
from app.core.logging import hash_identifier

logger = logging.getLogger(__name__)


def parse_csv_setting(value: str | None) -> list[str]:
    """Parse a comma-separated setting into a list of trimmed, non-empty items.

    Examples:
        >>> parse_csv_setting("RS256, ES256")
        ['RS256', 'ES256']
        >>> parse_csv_setting(None)
        []
        >>> parse_csv_setting(" , ")
        []
    """
    if not value:
        return []

    return list(dict.fromkeys(item.strip() for item in value.split(",") if item.strip()))


def ensure_session_verification_configured() -> str:
    """Return the session token verification key.

    Called at startup and before each verification.

    Raises:
        ConfigurationAppError: If IDENTITY_SESSION_TOKEN_KEY is not set.
    """
    key = settings.identity.session_token_key
    if not key:
        logger.error(
            "auth.verification_not_configured",
            extra={"reason": "session_token_key_missing"},
        )
        raise ConfigurationAppError(
            code="session_verification_not_configured",
            message="Session verification is not configured",
            details={"hint": "Set IDENTITY_SESSION_TOKEN_KEY to the provider's JWT verification key"},
        )
    return key


def verify_session_token(token: str) -> str:
    """Verify a session token and return the user id it was issued for.

    Pure validation logic without FastAPI dependencies for easy testing.

    Args:
        token: Encoded JWT.

    Returns:
        The ``sub`` claim (identity provider user id).

    Raises:
        ConfigurationAppError: If verification is not configured.
        AuthenticationAppError: If the token is invalid, expired, or lacks a subject.
    """
    key = ensure_session_verification_configured()

    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=parse_csv_setting(settings.identity.session_token_algorithms),
            issuer=settings.identity.session_token_issuer,
            options={"verify_aud": False},
        )
    except JWTError as exc:
        logger.warning(
            "auth.invalid_token",
            extra={"reason": type(exc).__name__, "token_hash": hash_identifier(token)},
        )
        raise AuthenticationAppError(
            code="invalid_session_token",
            message="Invalid or expired session token",
        ) from exc

    authorized_parties = parse_csv_setting(settings.identity.authorized_parties)
    if authorized_parties and claims.get("azp") not in authorized_parties:
        logger.warning(
            "auth.invalid_token",
            extra={"reason": "unauthorized_party", "token_hash": hash_identifier(token)},
        )
        raise AuthenticationAppError(
            code="invalid_session_token",
            message="Invalid or expired session token",
        )

    user_id = claims.get("sub")
    if not user_id or not isinstance(user_id, str):
        logger.warning(
            "auth.invalid_token",
            extra={"reason": "missing_subject", "token_hash": hash_identifier(token)},
        )
        raise AuthenticationAppError(
            code="invalid_session_token",
            message="Invalid or expired session token",
        )

    return user_id


def extract_session_token(authorization: str | None, cookie_token: str | None) -> str | None:
    """Pick the bearer token from the Authorization header, else the session cookie."""
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return cookie_token or None


async def get_optional_user_id(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> str | None:
    """FastAPI dependency resolving the caller's user id, or None when anonymous.

    A token that is present but invalid is still rejected.
    """
    token = extract_session_token(
        authorization, request.cookies.get(settings.identity.session_cookie_name)
    )
    if token is None:
        return None
    return verify_session_token(token)


async def get_current_user_id(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """FastAPI dependency for private operations.

    Usage:
        @router.post("/posts")
        async def create(user_id: Annotated[str, Depends(get_current_user_id)]): ...

    Raises:
        AuthenticationAppError: 401 when no valid session accompanies the request.
    """
    user_id = await get_optional_user_id(request, authorization)
    if user_id is None:
        logger.warning("auth.missing_token", extra={"route": request.url.path})
        raise AuthenticationAppError(
            code="missing_session_token",
            message="You must be signed in to do this",
            details={"hint": "Send the session token as 'Authorization: Bearer <token>'"},
        )

    logger.debug("auth.success", extra={"route": request.url.path})
    return user_id
