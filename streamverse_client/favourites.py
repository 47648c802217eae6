"""Favourites actions: every successful call replaces the whole local list.

Nothing is applied optimistically. The list only ever changes to a snapshot
the server returned, and a response older than the last applied one is
dropped by the reducer.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from .api import ApiError, NetworkError, StreamVerseApi
from .models import CatalogueItem, Favourite
from .state import (
    AppState,
    FavouritesFailed,
    FavouritesLoaded,
    FavouritesRequested,
    FavouritesReset,
    Store,
)

logger = logging.getLogger(__name__)

SIGN_IN_MESSAGE = "Please sign in to manage favourites."


def reset_favourites(store: Store) -> None:
    store.dispatch(FavouritesReset(sequence=store.next_sequence()))


def is_favourite(state: AppState, item_id: str) -> bool:
    return any(item.id == item_id for item in state.favourites.items)


async def _run(
    store: Store,
    call: Callable[[str], Awaitable[list[Favourite]]],
    *,
    fetch: bool = False,
) -> bool:
    session = store.state.auth.session
    if session is None:
        if store.state.favourites.status != "unauthenticated" or store.state.favourites.items:
            reset_favourites(store)
        return False

    sequence = store.next_sequence()
    store.dispatch(FavouritesRequested(sequence=sequence, fetch=fetch))
    try:
        items = await call(session.token)
    except (ApiError, NetworkError) as exc:
        store.dispatch(FavouritesFailed(sequence=sequence, error=exc.message))
        return False

    store.dispatch(FavouritesLoaded(sequence=sequence, items=tuple(items)))
    return True


async def fetch_favourites(store: Store, api: StreamVerseApi) -> bool:
    return await _run(store, api.list_favourites, fetch=True)


async def add_favourite(store: Store, api: StreamVerseApi, item: CatalogueItem) -> bool:
    return await _run(store, lambda token: api.add_favourite(token, item))


async def remove_favourite(store: Store, api: StreamVerseApi, item_id: str) -> bool:
    return await _run(store, lambda token: api.remove_favourite(token, item_id))


async def toggle_favourite(store: Store, api: StreamVerseApi, item: CatalogueItem) -> bool:
    """Remove ``item`` when it is currently a favourite, otherwise add it."""

    if is_favourite(store.state, item.id):
        return await remove_favourite(store, api, item.id)
    return await add_favourite(store, api, item)
