"""Business logic powering the favourites API endpoints.

Collaborators:

* :class:`FavouritesPersistence` performs the atomic single-row insert and
  delete statements plus the ordered listing.
* :class:`FavouritesPresenter` validates candidates and converts rows into
  response schemas.
* :class:`FavouritesCache` keeps a read-through copy of each user's list and
  is invalidated on every effective mutation.

Both ``add`` and ``remove`` are idempotent and always answer with the full,
authoritative list so clients can replace their local copy wholesale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from streamverse_api.cache import CacheClient, get_cache_client
from streamverse_api.db.connection import get_db
from streamverse_api.db.models import User
from streamverse_api.errors import InvalidInputError
from streamverse_api.schemas.favourites import FavouriteCandidate, FavouriteItem
from streamverse_api.services.favourites import (
    FavouritesCache,
    FavouritesPersistence,
    FavouritesPresenter,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AddOutcome:
    """Result of :meth:`FavouritesService.add`; ``created`` drives 201 vs 200."""

    created: bool
    items: list[FavouriteItem]


class FavouritesService:
    """Orchestrates persistence, presentation, and caching for the ledger."""

    def __init__(
        self,
        *,
        persistence: FavouritesPersistence,
        cache: FavouritesCache,
        presenter: FavouritesPresenter | None = None,
    ) -> None:
        self._persistence = persistence
        self._cache = cache
        self._presenter = presenter or FavouritesPresenter()

    async def list_items(self, user: User) -> list[FavouriteItem]:
        cached = await self._cache.read_list(user_id=user.id)
        if cached is not None:
            return cached
        return await self._load_and_cache(user.id)

    async def add(self, user: User, candidate: FavouriteCandidate) -> AddOutcome:
        normalized = self._presenter.normalize_candidate(candidate)
        if normalized is None:
            raise InvalidInputError("Invalid favourite payload.")

        created = await self._persistence.insert_if_absent(
            user_id=user.id,
            item_id=normalized.item_id,
            type=normalized.type,
            title=normalized.title,
            description=normalized.description,
            image=normalized.image,
            status=normalized.status,
        )
        if created:
            await self._commit_and_invalidate(user.id)
            logger.info("User %s added favourite %s", user.id, normalized.item_id)
            items = await self._load(user.id)
        else:
            items = await self.list_items(user)
        return AddOutcome(created=created, items=items)

    async def remove(self, user: User, item_id: str) -> list[FavouriteItem]:
        normalized_id = (item_id or "").strip()
        if not normalized_id:
            raise InvalidInputError("Missing favourite id.")

        removed = await self._persistence.delete_item(user.id, normalized_id)
        if not removed:
            return await self.list_items(user)

        await self._commit_and_invalidate(user.id)
        logger.info("User %s removed favourite %s", user.id, normalized_id)
        return await self._load(user.id)

    async def _commit_and_invalidate(self, user_id: str) -> None:
        """Make the mutation durable, then drop the cached list.

        Invalidating before the commit would let a concurrent reader re-cache
        the pre-mutation rows. The list is dropped on both sides of the commit
        so only a read that straddles the commit itself can leave a stale copy.
        """

        await self._cache.invalidate(user_id=user_id)
        await self._persistence.commit()
        await self._cache.invalidate(user_id=user_id)

    async def _load(self, user_id: str) -> list[FavouriteItem]:
        entries = await self._persistence.list_for_user(user_id)
        return self._presenter.entries_to_schema(entries)

    async def _load_and_cache(self, user_id: str) -> list[FavouriteItem]:
        items = await self._load(user_id)
        await self._cache.write_list(user_id=user_id, items=items)
        return items


def build_favourites_service(session: AsyncSession, cache_client: CacheClient) -> FavouritesService:
    return FavouritesService(
        persistence=FavouritesPersistence(session),
        cache=FavouritesCache(cache_client),
    )


async def get_favourites_service(
    session: AsyncSession = Depends(get_db),
    cache_client: CacheClient = Depends(get_cache_client),
) -> FavouritesService:
    """FastAPI dependency that wires the orchestrator together."""

    return build_favourites_service(session, cache_client)
