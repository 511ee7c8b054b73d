"""Joins posts with their authors' public profiles.

The join is fail-fast: if any post's author cannot be resolved by the
identity provider, the whole batch fails. A post without an author means the
post store and the user directory disagree, which is reported as an internal
error rather than hidden by dropping the post.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.adapters.identity.base import MAX_USER_LOOKUP, AbstractIdentityProvider
from app.core.errors import ConsistencyAppError
from app.core.logging import hash_identifier
from app.schemas.post import EnrichedPost, Post

logger = logging.getLogger(__name__)


async def add_author_data_to_posts(
    posts: Sequence[Post],
    identity: AbstractIdentityProvider,
) -> list[EnrichedPost]:
    """Attach author projections to posts, preserving input order.

    Args:
        posts: Posts to enrich. Callers limit batches to 100 posts so the
            distinct author ids fit one identity lookup.
        identity: Identity provider used for the single batched lookup.

    Returns:
        One EnrichedPost per input post, in the same order.

    Raises:
        ValueError: If the batch references more than 100 distinct authors.
        ConsistencyAppError: If any post's author is not returned by the
            identity provider (no partial result is produced).
    """
    if not posts:
        return []

    author_ids = list(dict.fromkeys(post.author_id for post in posts))
    if len(author_ids) > MAX_USER_LOOKUP:
        raise ValueError(
            f"cannot enrich posts from more than {MAX_USER_LOOKUP} authors in one batch"
        )

    authors = await identity.list_authors(user_ids=author_ids, limit=MAX_USER_LOOKUP)
    authors_by_id = {author.id: author for author in authors}

    enriched: list[EnrichedPost] = []
    for post in posts:
        author = authors_by_id.get(post.author_id)
        if author is None:
            logger.error(
                "enrichment.author_missing",
                extra={
                    "post_id": post.id,
                    "author_hash": hash_identifier(post.author_id),
                    "batch_size": len(posts),
                },
            )
            raise ConsistencyAppError(
                code="author_not_found",
                message="Author for post not found",
                details={"post_id": post.id},
            )
        enriched.append(EnrichedPost(post=post, author=author))

    return enriched
