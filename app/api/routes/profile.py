from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_profile_service
from app.schemas.author import AuthorProjection
from app.services.profile_service import ProfileService

router = APIRouter(tags=["Profiles"])


@router.get("/profiles/{username}", response_model=AuthorProjection)
async def get_user_by_username(
    username: str,
    service: Annotated[ProfileService, Depends(get_profile_service)],
) -> AuthorProjection:
    """Public profile by username; ``@name`` and ``name`` are equivalent.

    Raises:
        404 user_not_found: No user has this username.
    """
    return await service.get_user_by_username(username)
