"""Session lifecycle actions: restore, sign in, edit the profile, sign out."""

from __future__ import annotations

import logging
from collections.abc import Awaitable

from .api import ApiError, NetworkError, StreamVerseApi
from .favourites import reset_favourites
from .models import Session, UserProfile
from .session_cache import SessionCache
from .state import (
    AccountError,
    AuthFailed,
    AuthPending,
    AuthSucceeded,
    LoggedOut,
    ProfileUpdated,
    SessionRestored,
    Store,
)

logger = logging.getLogger(__name__)


async def bootstrap_session(store: Store, cache: SessionCache) -> Session | None:
    """Restore the persisted session at start-up. Makes no network calls."""

    session = await cache.load()
    store.dispatch(SessionRestored(session))
    return session


async def _sign_in(
    store: Store, cache: SessionCache, request: Awaitable[Session]
) -> Session | None:
    store.dispatch(AuthPending())
    try:
        session = await request
    except (ApiError, NetworkError) as exc:
        store.dispatch(AuthFailed(exc.message))
        return None

    await cache.save(session)
    store.dispatch(AuthSucceeded(session))
    logger.info("Signed in as %s", session.user.username)
    return session


async def login(
    store: Store,
    api: StreamVerseApi,
    cache: SessionCache,
    identifier: str,
    password: str,
) -> Session | None:
    return await _sign_in(store, cache, api.login(identifier.strip(), password))


async def register(
    store: Store,
    api: StreamVerseApi,
    cache: SessionCache,
    *,
    first_name: str,
    last_name: str,
    email: str,
    username: str,
    password: str,
) -> Session | None:
    request = api.register(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=email.strip(),
        username=username.strip(),
        password=password,
    )
    return await _sign_in(store, cache, request)


async def refresh_profile(
    store: Store, api: StreamVerseApi, cache: SessionCache
) -> Session | None:
    """Re-read the profile; a rejected token signs the user out locally."""

    session = store.state.auth.session
    if session is None:
        return None
    try:
        user = await api.get_profile(session.token)
    except ApiError as exc:
        if exc.status_code == 401:
            await logout(store, cache)
        else:
            store.dispatch(AccountError(exc.message))
        return None
    except NetworkError as exc:
        store.dispatch(AccountError(exc.message))
        return None

    return await _store_profile(store, cache, session, user)


async def update_profile(
    store: Store,
    api: StreamVerseApi,
    cache: SessionCache,
    **changes: str | None,
) -> Session | None:
    session = store.state.auth.session
    if session is None:
        return None
    try:
        user = await api.update_profile(session.token, **changes)
    except (ApiError, NetworkError) as exc:
        store.dispatch(AccountError(exc.message))
        return None

    return await _store_profile(store, cache, session, user)


async def _store_profile(
    store: Store, cache: SessionCache, session: Session, user: UserProfile
) -> Session:
    updated = session.model_copy(update={"user": user})
    await cache.save(updated)
    store.dispatch(ProfileUpdated(user))
    return updated


async def logout(store: Store, cache: SessionCache) -> None:
    await cache.clear()
    store.dispatch(LoggedOut())
    reset_favourites(store)


async def delete_account(store: Store, api: StreamVerseApi, cache: SessionCache) -> bool:
    """Delete the account on the server, then forget it locally."""

    session = store.state.auth.session
    if session is None:
        return False
    try:
        await api.delete_profile(session.token)
    except (ApiError, NetworkError) as exc:
        store.dispatch(AccountError(exc.message))
        return False

    await logout(store, cache)
    return True
