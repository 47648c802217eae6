"""Pydantic schemas that power the favourites API surface."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FavouriteType = Literal["movie", "music", "podcast"]


class FavouriteCandidate(BaseModel):
    """Catalogue item posted by the client when saving a favourite.

    Every field is optional at the schema level: the ledger validates the
    payload as a whole and answers ``Invalid favourite payload.`` for any gap,
    mirroring the single error message the mobile client displays.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(
        None, max_length=255, description="Catalogue identifier, e.g. 'movie-550'."
    )
    type: str | None = Field(
        None, max_length=16, description="One of movie, music or podcast."
    )
    title: str | None = Field(None, max_length=512)
    description: str | None = None
    image: str | None = Field(None, max_length=1024)
    status: str | None = Field(None, max_length=255)


class FavouriteItem(BaseModel):
    """Favourite as returned to clients; ``id`` is the catalogue item id."""

    id: str
    type: FavouriteType
    title: str
    description: str
    image: str
    status: str
    added_at: datetime = Field(..., alias="addedAt")

    model_config = ConfigDict(populate_by_name=True)


class FavouriteListResponse(BaseModel):
    """Authoritative favourites snapshot returned by every favourites call."""

    items: list[FavouriteItem] = Field(default_factory=list)
