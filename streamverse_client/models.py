"""Wire models shared by the HTTP wrapper, the state store and the cache."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FavouriteType = Literal["movie", "music", "podcast"]


class ClientModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class UserProfile(ClientModel):
    id: str = Field(..., min_length=1)
    email: str
    username: str
    first_name: str
    last_name: str
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.username


class Session(ClientModel):
    """A signed-in user: bearer token plus the profile it was issued for."""

    token: str = Field(..., min_length=1)
    user: UserProfile


class CatalogueItem(ClientModel):
    """Display fields of a movie, track or podcast as shown in the catalogue."""

    id: str
    type: FavouriteType
    title: str
    description: str
    image: str
    status: str


class Favourite(CatalogueItem):
    added_at: datetime | None = None
