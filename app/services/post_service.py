"""Post feed and creation service.

Each public operation follows the same flow: validate input, authorize the
caller, execute against the post store (and identity provider for reads),
then return or fail. Failures propagate immediately; nothing is retried.
"""

from __future__ import annotations

import logging

from app.adapters.identity.base import MAX_USER_LOOKUP, AbstractIdentityProvider
from app.adapters.posts.base import AbstractPostStore
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.core.errors import AuthenticationAppError, NotFoundAppError, RateLimitAppError
from app.core.logging import hash_identifier
from app.schemas.post import CreatePostRequest, EnrichedPost, Post
from app.services.enrichment import add_author_data_to_posts

logger = logging.getLogger(__name__)


class PostService:
    """Reads feeds and creates posts.

    Attributes:
        store: Post persistence adapter.
        identity: Identity provider used to attach authors to posts.
        rate_limiter: Per-author write limiter; ``None`` disables the gate.
        feed_limit: Maximum posts per feed (never above the identity lookup cap).
    """

    def __init__(
        self,
        *,
        store: AbstractPostStore,
        identity: AbstractIdentityProvider,
        rate_limiter: AbstractRateLimiter | None,
        feed_limit: int = MAX_USER_LOOKUP,
    ) -> None:
        if not 1 <= feed_limit <= MAX_USER_LOOKUP:
            raise ValueError(f"feed_limit must be between 1 and {MAX_USER_LOOKUP}")

        self.store = store
        self.identity = identity
        self.rate_limiter = rate_limiter
        self.feed_limit = feed_limit

    async def get_all(self) -> list[EnrichedPost]:
        """Most recent posts across all authors, newest first."""
        posts = await self.store.list_recent(limit=self.feed_limit)
        return await add_author_data_to_posts(posts, self.identity)

    async def get_posts_by_user_id(self, user_id: str) -> list[EnrichedPost]:
        """Most recent posts by one author; an author with no posts yields ``[]``."""
        posts = await self.store.list_recent(limit=self.feed_limit, author_id=user_id)
        return await add_author_data_to_posts(posts, self.identity)

    async def get_single_post_by_id(self, post_id: str) -> EnrichedPost:
        """Fetch one post with its author.

        Raises:
            NotFoundAppError: If no post has this id.
            ConsistencyAppError: If the post's author no longer exists.
        """
        post = await self.store.get_by_id(post_id)
        if post is None:
            raise NotFoundAppError(
                code="post_not_found",
                message="Post not found",
                details={"post_id": post_id},
            )

        [enriched] = await add_author_data_to_posts([post], self.identity)
        return enriched

    async def _enforce_rate_limit(self, author_id: str) -> None:
        if self.rate_limiter is None:
            return

        decision = await self.rate_limiter.limit(author_id)
        author_hash = hash_identifier(author_id)

        if decision.success:
            logger.info(
                "rate_limit.allowed",
                extra={
                    "author_hash": author_hash,
                    "limit": decision.limit,
                    "remaining": decision.remaining,
                    "window_s": self.rate_limiter.window_seconds,
                },
            )
            return

        retry_after = decision.retry_after_seconds or 0
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "author_hash": author_hash,
                "limit": decision.limit,
                "window_s": self.rate_limiter.window_seconds,
                "retry_after_s": retry_after,
            },
        )
        raise RateLimitAppError(
            code="too_many_requests",
            message="Too many posts. Try again later.",
            details={
                "retry_after": retry_after,
                "limit": decision.limit,
                "remaining": decision.remaining,
                "reset_at": decision.reset_at,
            },
        )

    async def create(self, *, author_id: str | None, request: CreatePostRequest) -> Post:
        """Create a post for the authenticated caller.

        The author is always ``author_id`` from the caller's session; the
        request body carries content only.

        Args:
            author_id: Id of the authenticated caller.
            request: Validated post body.

        Returns:
            The stored post (not enriched).

        Raises:
            AuthenticationAppError: If there is no authenticated caller.
            RateLimitAppError: If the author exceeded the write budget; nothing
                is stored in that case.
        """
        if not author_id:
            raise AuthenticationAppError(
                code="unauthorized",
                message="You must be signed in to post",
            )

        await self._enforce_rate_limit(author_id)

        post = await self.store.create(author_id=author_id, content=request.content)

        logger.info(
            "posts.created",
            extra={
                "post_id": post.id,
                "author_hash": hash_identifier(author_id),
                "char_count": len(post.content),
            },
        )
        return post
