"""Pydantic schemas describing user profiles on the wire."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising snake_case attributes as camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserRead(CamelModel):
    """Sanitised user view; the password hash is never part of this model."""

    id: str
    email: str
    username: str
    first_name: str
    last_name: str
    avatar_url: str | None = Field(
        None, description="Public URL of the avatar stored by the blob store."
    )
    created_at: datetime
    updated_at: datetime


class UserEnvelope(BaseModel):
    """``{"user": ...}`` container returned by the profile endpoints."""

    user: UserRead


class ProfileUpdate(CamelModel):
    """Partial profile update; every field is optional and independent."""

    first_name: str | None = Field(None, max_length=128)
    last_name: str | None = Field(None, max_length=128)
    username: str | None = Field(None, max_length=64)
    email: str | None = Field(None, max_length=320)
    avatar_base64: str | None = Field(
        None,
        description="Image encoded as a data URI; forwarded to the blob store.",
    )
