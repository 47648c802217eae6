"""Application state, actions and pure reducers.

State is a tree of frozen dataclasses. Every change goes through
:meth:`Store.dispatch`, which runs :func:`reduce` and notifies subscribers;
nothing mutates state in place.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Literal, Union

from .models import Favourite, Session, UserProfile

logger = logging.getLogger(__name__)

AuthStatus = Literal["idle", "loading", "authenticated", "failed"]
FavouritesStatus = Literal["unauthenticated", "idle", "loading", "succeeded", "failed"]


@dataclass(frozen=True)
class AuthState:
    status: AuthStatus = "idle"
    session: Session | None = None
    error: str | None = None
    # False until the cached session has been looked up at start-up.
    bootstrapped: bool = False


@dataclass(frozen=True)
class FavouritesState:
    status: FavouritesStatus = "unauthenticated"
    items: tuple[Favourite, ...] = ()
    error: str | None = None
    applied_sequence: int = 0


@dataclass(frozen=True)
class AppState:
    auth: AuthState = field(default_factory=AuthState)
    favourites: FavouritesState = field(default_factory=FavouritesState)


# -- Actions -------------------------------------------------------------------


@dataclass(frozen=True)
class SessionRestored:
    session: Session | None


@dataclass(frozen=True)
class AuthPending:
    pass


@dataclass(frozen=True)
class AuthSucceeded:
    session: Session


@dataclass(frozen=True)
class AuthFailed:
    error: str


@dataclass(frozen=True)
class AccountError:
    """An operation on an existing session failed; the session stays."""

    error: str


@dataclass(frozen=True)
class ProfileUpdated:
    user: UserProfile


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class FavouritesRequested:
    sequence: int
    fetch: bool = False


@dataclass(frozen=True)
class FavouritesLoaded:
    sequence: int
    items: tuple[Favourite, ...]


@dataclass(frozen=True)
class FavouritesFailed:
    sequence: int
    error: str


@dataclass(frozen=True)
class FavouritesReset:
    """Back to the unauthenticated state; responses issued before ``sequence`` are dropped."""

    sequence: int


Action = Union[
    SessionRestored,
    AuthPending,
    AuthSucceeded,
    AuthFailed,
    AccountError,
    ProfileUpdated,
    LoggedOut,
    FavouritesRequested,
    FavouritesLoaded,
    FavouritesFailed,
    FavouritesReset,
]


# -- Reducers ------------------------------------------------------------------


def auth_reducer(state: AuthState, action: Action) -> AuthState:
    if isinstance(action, SessionRestored):
        return AuthState(
            status="authenticated" if action.session else "idle",
            session=action.session,
            bootstrapped=True,
        )
    if isinstance(action, AuthPending):
        return replace(state, status="loading", error=None)
    if isinstance(action, AuthSucceeded):
        return replace(state, status="authenticated", session=action.session, error=None)
    if isinstance(action, AuthFailed):
        return replace(state, status="failed", session=None, error=action.error)
    if isinstance(action, AccountError):
        return replace(state, error=action.error)
    if isinstance(action, ProfileUpdated):
        if state.session is None:
            return state
        session = state.session.model_copy(update={"user": action.user})
        return replace(state, session=session, error=None)
    if isinstance(action, LoggedOut):
        return AuthState(bootstrapped=state.bootstrapped)
    return state


def favourites_reducer(state: FavouritesState, action: Action) -> FavouritesState:
    if isinstance(action, FavouritesReset):
        return FavouritesState(applied_sequence=max(state.applied_sequence, action.sequence))

    if isinstance(action, FavouritesRequested):
        if action.sequence < state.applied_sequence:
            return state
        if action.fetch:
            return replace(state, status="loading", error=None)
        return replace(state, error=None)

    if isinstance(action, FavouritesLoaded):
        if action.sequence < state.applied_sequence:
            logger.debug(
                "Dropping stale favourites response %s (applied %s)",
                action.sequence,
                state.applied_sequence,
            )
            return state
        return FavouritesState(
            status="succeeded",
            items=tuple(action.items),
            applied_sequence=action.sequence,
        )

    if isinstance(action, FavouritesFailed):
        if action.sequence < state.applied_sequence:
            return state
        # The list is left exactly as it was.
        status = "failed" if state.status == "loading" else state.status
        return replace(state, status=status, error=action.error)

    return state


def reduce(state: AppState, action: Action) -> AppState:
    auth = auth_reducer(state.auth, action)
    favourites = favourites_reducer(state.favourites, action)

    # A fresh session unlocks the favourites slice.
    if auth.session is not None and favourites.status == "unauthenticated":
        favourites = replace(favourites, status="idle")

    if auth is state.auth and favourites is state.favourites:
        return state
    return AppState(auth=auth, favourites=favourites)


Listener = Callable[[AppState], None]


class Store:
    """Holds the current :class:`AppState` and the request sequence counter."""

    def __init__(self, state: AppState | None = None) -> None:
        self._state = state or AppState()
        self._listeners: list[Listener] = []
        self._sequence = itertools.count(1)

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        new_state = reduce(self._state, action)
        if new_state is not self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def next_sequence(self) -> int:
        """Return a request number strictly greater than any issued before."""

        return next(self._sequence)
