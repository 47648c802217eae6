"""Tests for the pure reducers and the store."""

from __future__ import annotations

from streamverse_client.state import (
    AccountError,
    AppState,
    AuthFailed,
    AuthPending,
    AuthSucceeded,
    FavouritesFailed,
    FavouritesLoaded,
    FavouritesRequested,
    FavouritesReset,
    FavouritesState,
    LoggedOut,
    ProfileUpdated,
    SessionRestored,
    Store,
    favourites_reducer,
    reduce,
)

from .support import make_favourite, make_session


def _signed_in() -> AppState:
    return reduce(AppState(), AuthSucceeded(make_session()))


def test_initial_state_is_unauthenticated() -> None:
    state = AppState()

    assert state.auth.session is None
    assert state.auth.bootstrapped is False
    assert state.favourites.status == "unauthenticated"
    assert state.favourites.items == ()


def test_session_restored_marks_bootstrap_and_unlocks_favourites() -> None:
    restored = reduce(AppState(), SessionRestored(make_session()))
    empty = reduce(AppState(), SessionRestored(None))

    assert restored.auth.status == "authenticated"
    assert restored.auth.bootstrapped is True
    assert restored.favourites.status == "idle"
    assert empty.auth.status == "idle"
    assert empty.auth.bootstrapped is True
    assert empty.favourites.status == "unauthenticated"


def test_auth_failure_clears_session_and_keeps_message() -> None:
    state = reduce(reduce(AppState(), AuthPending()), AuthFailed("Invalid credentials."))

    assert state.auth.status == "failed"
    assert state.auth.session is None
    assert state.auth.error == "Invalid credentials."


def test_account_error_keeps_session() -> None:
    state = reduce(_signed_in(), AccountError("Unable to update profile."))

    assert state.auth.session is not None
    assert state.auth.error == "Unable to update profile."


def test_profile_updated_replaces_user_but_keeps_token() -> None:
    renamed = make_session(firstName="Anya").user

    state = reduce(_signed_in(), ProfileUpdated(renamed))

    assert state.auth.session.token == "token-1"
    assert state.auth.session.user.first_name == "Anya"


def test_profile_updated_without_session_is_ignored() -> None:
    state = AppState()

    assert reduce(state, ProfileUpdated(make_session().user)) is state


def test_logged_out_keeps_bootstrapped_flag() -> None:
    state = reduce(AppState(), SessionRestored(make_session()))

    state = reduce(state, LoggedOut())

    assert state.auth.session is None
    assert state.auth.bootstrapped is True


def test_loaded_replaces_whole_list() -> None:
    state = FavouritesState(status="succeeded", items=(make_favourite("movie-1"),))

    state = favourites_reducer(
        state,
        FavouritesLoaded(sequence=2, items=(make_favourite("music-3"), make_favourite("podcast-7"))),
    )

    assert [item.id for item in state.items] == ["music-3", "podcast-7"]
    assert state.status == "succeeded"
    assert state.applied_sequence == 2


def test_stale_response_is_dropped() -> None:
    state = favourites_reducer(
        FavouritesState(status="idle"),
        FavouritesLoaded(sequence=5, items=(make_favourite("movie-1"),)),
    )

    stale_load = favourites_reducer(state, FavouritesLoaded(sequence=4, items=()))
    stale_failure = favourites_reducer(state, FavouritesFailed(sequence=3, error="boom"))

    assert stale_load is state
    assert stale_failure is state


def test_failure_keeps_items() -> None:
    items = (make_favourite("movie-1"),)
    loading = favourites_reducer(
        FavouritesState(status="succeeded", items=items, applied_sequence=1),
        FavouritesRequested(sequence=2, fetch=True),
    )

    failed = favourites_reducer(loading, FavouritesFailed(sequence=2, error="Unable to load favourites."))

    assert loading.status == "loading"
    assert failed.status == "failed"
    assert failed.items == items
    assert failed.error == "Unable to load favourites."


def test_mutation_failure_does_not_mark_list_failed() -> None:
    state = FavouritesState(status="succeeded", items=(make_favourite(),), applied_sequence=1)

    state = favourites_reducer(state, FavouritesRequested(sequence=2))
    state = favourites_reducer(state, FavouritesFailed(sequence=2, error="Unable to save favourite."))

    assert state.status == "succeeded"
    assert state.error == "Unable to save favourite."


def test_reset_discards_items_and_in_flight_responses() -> None:
    state = FavouritesState(status="succeeded", items=(make_favourite(),), applied_sequence=1)

    state = favourites_reducer(state, FavouritesReset(sequence=3))
    late = favourites_reducer(state, FavouritesLoaded(sequence=2, items=(make_favourite(),)))

    assert state.status == "unauthenticated"
    assert state.items == ()
    assert late is state


def test_store_notifies_subscribers_until_unsubscribed() -> None:
    store = Store()
    seen: list[AppState] = []
    unsubscribe = store.subscribe(seen.append)

    store.dispatch(AuthSucceeded(make_session()))
    unsubscribe()
    store.dispatch(LoggedOut())

    assert len(seen) == 1
    assert seen[0].auth.status == "authenticated"
    assert store.state.auth.session is None


def test_store_skips_notification_when_nothing_changes() -> None:
    store = Store()
    seen: list[AppState] = []
    store.subscribe(seen.append)

    store.dispatch(ProfileUpdated(make_session().user))

    assert seen == []


def test_sequence_numbers_increase() -> None:
    store = Store()

    first, second = store.next_sequence(), store.next_sequence()

    assert 0 < first < second
