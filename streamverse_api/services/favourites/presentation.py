"""Conversions between favourites rows, client payloads, and response schemas."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from streamverse_api.db.models import FAVOURITE_TYPES, FavouriteEntry
from streamverse_api.schemas.favourites import FavouriteCandidate, FavouriteItem


@dataclass(frozen=True, slots=True)
class NormalizedFavourite:
    """A candidate that passed validation and is ready to be stored."""

    item_id: str
    type: str
    title: str
    description: str
    image: str
    status: str


class FavouritesPresenter:
    """Stateless helpers used by :class:`FavouritesService`."""

    @staticmethod
    def normalize_candidate(candidate: FavouriteCandidate) -> NormalizedFavourite | None:
        """Return the storable form of ``candidate`` or ``None`` when it is incomplete.

        Every field must be a non-empty string and ``type`` (case-insensitive)
        one of the recognised kinds.
        """

        values = (
            candidate.id,
            candidate.type,
            candidate.title,
            candidate.description,
            candidate.image,
            candidate.status,
        )
        if any(value is None or not value.strip() for value in values):
            return None

        kind = candidate.type.strip().lower()
        if kind not in FAVOURITE_TYPES:
            return None

        return NormalizedFavourite(
            item_id=candidate.id.strip(),
            type=kind,
            title=candidate.title,
            description=candidate.description,
            image=candidate.image,
            status=candidate.status,
        )

    @staticmethod
    def entry_to_schema(entry: FavouriteEntry) -> FavouriteItem:
        return FavouriteItem(
            id=entry.item_id,
            type=entry.type,
            title=entry.title,
            description=entry.description,
            image=entry.image,
            status=entry.status,
            added_at=entry.added_at,
        )

    @classmethod
    def entries_to_schema(cls, entries: Iterable[FavouriteEntry]) -> list[FavouriteItem]:
        return [cls.entry_to_schema(entry) for entry in entries]
