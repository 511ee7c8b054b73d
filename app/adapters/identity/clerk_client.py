"""Clerk Backend API identity adapter."""

import logging
from typing import Any, Sequence

import httpx

from app.adapters.identity.base import MAX_USER_LOOKUP, AbstractIdentityProvider, RawUser
from app.core.errors import IdentityProviderAppError

logger = logging.getLogger(__name__)


class ClerkIdentityProvider(AbstractIdentityProvider):
    """Client for Clerk's ``GET /v1/users`` listing endpoint.

    Uses one pooled ``httpx.AsyncClient`` for the whole process.
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.clerk.com",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the async HTTP client.

        Args:
            secret_key: Clerk secret key (``sk_...``) for the Backend API.
            base_url: API base URL.
            timeout_seconds: Timeout for requests in seconds.
            transport: Optional transport override (used by tests).
        """
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {secret_key}"},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def get_user_list(
        self,
        *,
        user_ids: Sequence[str] | None = None,
        usernames: Sequence[str] | None = None,
        limit: int = MAX_USER_LOOKUP,
    ) -> list[RawUser]:
        """List users matching any of the given ids or usernames.

        An empty filter returns ``[]`` without calling the API; an unfiltered
        listing would return arbitrary users.

        Raises:
            IdentityProviderAppError: On transport errors, non-2xx responses
                or an unexpected payload shape.
        """
        if not user_ids and not usernames:
            return []

        params: list[tuple[str, Any]] = [("limit", limit)]
        params += [("user_id", user_id) for user_id in dict.fromkeys(user_ids or ())]
        params += [("username", username) for username in dict.fromkeys(usernames or ())]

        try:
            response = await self.client.get("/v1/users", params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "identity.lookup_failed",
                extra={"status": exc.response.status_code, "reason": "http_status"},
            )
            raise IdentityProviderAppError(
                code="identity_provider_error",
                message="Identity provider returned an error",
                details={"http_status": exc.response.status_code},
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(
                "identity.lookup_failed",
                extra={"error_type": type(exc).__name__, "reason": "transport"},
            )
            raise IdentityProviderAppError(
                code="identity_provider_error",
                message="Identity provider is unavailable",
            ) from exc

        # Older API versions wrap the list as {"data": [...], "total_count": n}
        if isinstance(payload, dict):
            payload = payload.get("data")
        if not isinstance(payload, list):
            raise IdentityProviderAppError(
                code="identity_provider_error",
                message="Identity provider returned an unexpected payload",
            )

        logger.debug(
            "identity.lookup",
            extra={
                "requested_ids": len(user_ids or ()),
                "requested_usernames": len(usernames or ()),
                "returned": len(payload),
            },
        )
        return payload

    async def close(self) -> None:
        await self.client.aclose()
