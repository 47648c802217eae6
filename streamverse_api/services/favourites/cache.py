"""Caching helpers dedicated to the favourites ledger."""

from __future__ import annotations

from pydantic import ValidationError

from streamverse_api.cache import CacheClient, favourite_list_key
from streamverse_api.schemas.favourites import FavouriteItem


class FavouritesCache:
    """Typed wrapper around :class:`CacheClient` for per-user favourites lists.

    The cached value is the serialised authoritative list; any mutation
    invalidates it rather than patching it, so a cache hit is always a
    snapshot that once came from the database.
    """

    def __init__(self, client: CacheClient) -> None:
        self._client = client

    async def read_list(self, *, user_id: str) -> list[FavouriteItem] | None:
        cached = await self._client.get_json(favourite_list_key(user_id))
        if not isinstance(cached, list):
            return None
        try:
            return [FavouriteItem.model_validate(item) for item in cached]
        except ValidationError:
            # Written by an older schema; treat as a miss.
            return None

    async def write_list(self, *, user_id: str, items: list[FavouriteItem]) -> None:
        payload = [item.model_dump(mode="json", by_alias=True) for item in items]
        await self._client.set_json(favourite_list_key(user_id), payload)

    async def invalidate(self, *, user_id: str) -> None:
        await self._client.delete(favourite_list_key(user_id))
