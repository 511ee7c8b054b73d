"""Pydantic schemas for identity-provider derived data."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AuthorProjection(BaseModel):
    """Client-safe view of an identity provider user.

    Only these three fields ever leave the identity adapter layer; email
    addresses, metadata and other provider-internal fields are dropped.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identity provider user id.")
    username: str | None = Field(
        default=None,
        description="Public username (may be unset for users who signed up without one).",
    )
    profile_image_url: str | None = Field(
        default=None,
        description="URL of the user's avatar image.",
    )
