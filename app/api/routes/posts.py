from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import get_post_service
from app.core.auth import get_current_user_id
from app.schemas.post import CreatePostRequest, EnrichedPost, Post
from app.services.post_service import PostService

router = APIRouter(tags=["Posts"])

PostServiceDep = Annotated[PostService, Depends(get_post_service)]


@router.get("/posts", response_model=list[EnrichedPost])
async def get_all(service: PostServiceDep) -> list[EnrichedPost]:
    """Global feed: the 100 most recent posts, newest first, with their authors.

    Raises:
        500 author_not_found: A post references a user the identity provider no longer has.
    """
    return await service.get_all()


@router.get("/users/{user_id}/posts", response_model=list[EnrichedPost])
async def get_posts_by_user_id(user_id: str, service: PostServiceDep) -> list[EnrichedPost]:
    """Feed of one author's posts. An author without posts returns an empty list."""
    return await service.get_posts_by_user_id(user_id)


@router.get("/posts/{post_id}", response_model=EnrichedPost)
async def get_single_post_by_id(post_id: str, service: PostServiceDep) -> EnrichedPost:
    """Single post with its author.

    Raises:
        404 post_not_found: No post has this id.
    """
    return await service.get_single_post_by_id(post_id)


@router.post(
    "/posts",
    response_model=Post,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    body: CreatePostRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: PostServiceDep,
) -> Post:
    """Create an emoji-only post as the signed-in user.

    The author is taken from the session token, never from the body.

    Raises:
        400 invalid_request: content is empty, longer than 280 characters or not only emoji.
        401 missing_session_token / invalid_session_token: no valid session.
        429 too_many_requests: more than 3 posts in the last minute.
    """
    return await service.create(author_id=user_id, request=body)
