"""Pydantic schemas for posts and feed responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from app.schemas.author import AuthorProjection
from app.utils.emoji import is_emoji_only

MAX_POST_CHARS = 280

EMOJI_ONLY_MESSAGE = "You can only post emojis."


class Post(BaseModel):
    """A stored post. Immutable once created."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(..., description="Post identifier assigned by the store.")
    author_id: str = Field(..., description="Identity provider id of the author.")
    content: str = Field(..., description="Emoji-only post body.")
    created_at: datetime = Field(..., description="Creation timestamp (UTC), assigned by the store.")


class EnrichedPost(BaseModel):
    """A post joined with its author's public projection."""

    post: Post
    author: AuthorProjection


class CreatePostRequest(BaseModel):
    """Body of the post creation call.

    Unknown fields are ignored: the author is always the authenticated caller,
    so an ``author_id`` sent by the client has no effect.
    """

    model_config = ConfigDict(extra="ignore")

    content: str = Field(
        ...,
        min_length=1,
        max_length=MAX_POST_CHARS,
        description="1 to 280 emoji characters.",
        examples=["🔥🔥"],
    )

    @field_validator("content")
    @classmethod
    def content_must_be_emoji(cls, value: str) -> str:
        if not is_emoji_only(value):
            raise PydanticCustomError("emoji", EMOJI_ONLY_MESSAGE)
        return value
