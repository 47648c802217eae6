"""HTTP-level tests for the auth, profile and favourites routers."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from streamverse_api.errors import BlobStorageError
from streamverse_api.settings import get_settings

from .support import MOVIE, PODCAST, FakeBlobStorage, bearer, register_user


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_register_returns_token_and_camel_case_user(client: AsyncClient) -> None:
    body = await register_user(client)

    assert body["token"]
    user = body["user"]
    assert set(user) == {
        "id",
        "email",
        "username",
        "firstName",
        "lastName",
        "avatarUrl",
        "createdAt",
        "updatedAt",
    }
    assert user["firstName"] == "Anna"


@pytest.mark.asyncio
async def test_register_duplicate_is_conflict(client: AsyncClient) -> None:
    await register_user(client)

    response = await client.post(
        "/api/auth/register",
        json={
            "firstName": "Anna",
            "lastName": "Arkadyevna",
            "email": "ANNA@example.com",
            "username": "other",
            "password": "troika1877",
        },
    )

    assert response.status_code == 409
    body = response.json()
    assert body["error_type"] == "conflict"
    assert body["message"] == "A user with that email or username already exists."
    assert body["request_id"] == response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_register_missing_fields_is_bad_request(client: AsyncClient) -> None:
    response = await client.post("/api/auth/register", json={"email": "anna@example.com"})

    assert response.status_code == 400
    assert response.json()["error_type"] == "validation_error"


@pytest.mark.asyncio
async def test_malformed_json_is_bad_request(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/login",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_with_mixed_case_username(client: AsyncClient) -> None:
    registered = await register_user(client)

    response = await client.post(
        "/api/auth/login", json={"identifier": "AnnaK", "password": "troika1877"}
    )

    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered["user"]["id"]


@pytest.mark.asyncio
async def test_login_with_wrong_password_is_unauthorized(client: AsyncClient) -> None:
    await register_user(client)

    response = await client.post(
        "/api/auth/login", json={"identifier": "annak", "password": "wrong-pass1"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials."


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/profile/me", "/api/profile", "/api/favourites"])
async def test_protected_routes_require_token(client: AsyncClient, path: str) -> None:
    response = await client.get(path)

    assert response.status_code == 401
    body = response.json()
    assert body["error_type"] == "authentication_error"
    assert body["message"] == "Authentication token missing."


@pytest.mark.asyncio
async def test_profile_me_and_alias_return_same_user(client: AsyncClient) -> None:
    registered = await register_user(client)
    headers = bearer(registered["token"])

    me = await client.get("/api/profile/me", headers=headers)
    alias = await client.get("/api/profile", headers=headers)

    assert me.status_code == alias.status_code == 200
    assert me.json() == alias.json() == {"user": registered["user"]}


@pytest.mark.asyncio
async def test_update_profile_conflict_and_self_assignment(client: AsyncClient) -> None:
    await register_user(client, username="vronsky", email="alexei@example.com")
    anna = await register_user(client)
    headers = bearer(anna["token"])

    conflict = await client.put("/api/profile", json={"username": "Vronsky"}, headers=headers)
    same = await client.put("/api/profile", json={"username": "annak"}, headers=headers)

    assert conflict.status_code == 409
    assert conflict.json()["message"] == "Another user already uses that username."
    assert same.status_code == 200
    assert same.json()["user"]["username"] == "annak"


@pytest.mark.asyncio
async def test_update_profile_uploads_avatar(
    client: AsyncClient, blob_storage: FakeBlobStorage
) -> None:
    anna = await register_user(client)

    response = await client.put(
        "/api/profile",
        json={"firstName": "Anya", "avatarBase64": "data:image/png;base64,AAAA"},
        headers=bearer(anna["token"]),
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["firstName"] == "Anya"
    assert user["avatarUrl"].endswith(f"{anna['user']['id']}.png")
    assert blob_storage.uploads == [(anna["user"]["id"], "data:image/png;base64,AAAA")]


@pytest.mark.asyncio
async def test_delete_profile_invalidates_token(client: AsyncClient) -> None:
    anna = await register_user(client)
    headers = bearer(anna["token"])
    await client.post("/api/favourites", json=MOVIE, headers=headers)

    deleted = await client.delete("/api/profile", headers=headers)
    after = await client.get("/api/profile/me", headers=headers)
    relogin = await client.post(
        "/api/auth/login", json={"identifier": "annak", "password": "troika1877"}
    )

    assert deleted.status_code == 204
    assert after.status_code == 401
    assert after.json()["message"] == "User not found."
    assert relogin.status_code == 401


@pytest.mark.asyncio
async def test_delete_profile_completes_when_avatar_removal_fails(
    client: AsyncClient, blob_storage: FakeBlobStorage, monkeypatch: pytest.MonkeyPatch
) -> None:
    anna = await register_user(client)
    headers = bearer(anna["token"])
    await client.put(
        "/api/profile", json={"avatarBase64": "data:image/png;base64,AAAA"}, headers=headers
    )

    async def failing_delete(user_id: str) -> None:
        raise BlobStorageError()

    monkeypatch.setattr(blob_storage, "delete_avatar", failing_delete)

    deleted = await client.delete("/api/profile", headers=headers)
    after = await client.get("/api/profile/me", headers=headers)

    assert deleted.status_code == 204
    assert after.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get("/api/favourites", headers=bearer("definitely.not.valid"))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid authentication token."


@pytest.mark.asyncio
async def test_favourites_round_trip(client: AsyncClient) -> None:
    """Register, log in, add movie-1, list it, remove it, list is empty."""

    await register_user(client)
    login = await client.post(
        "/api/auth/login", json={"identifier": "annak", "password": "troika1877"}
    )
    headers = bearer(login.json()["token"])

    added = await client.post("/api/favourites", json=MOVIE, headers=headers)
    assert added.status_code == 201
    items = added.json()["items"]
    assert [item["id"] for item in items] == ["movie-1"]
    assert set(items[0]) == {
        "id",
        "type",
        "title",
        "description",
        "image",
        "status",
        "addedAt",
    }

    listed = await client.get("/api/favourites", headers=headers)
    assert [item["id"] for item in listed.json()["items"]] == ["movie-1"]

    removed = await client.delete("/api/favourites/movie-1", headers=headers)
    assert removed.status_code == 200
    assert removed.json() == {"items": []}

    listed = await client.get("/api/favourites", headers=headers)
    assert listed.json() == {"items": []}


@pytest.mark.asyncio
async def test_re_adding_favourite_answers_ok_with_single_entry(client: AsyncClient) -> None:
    anna = await register_user(client)
    headers = bearer(anna["token"])

    first = await client.post("/api/favourites", json=MOVIE, headers=headers)
    second = await client.post("/api/favourites", json=MOVIE, headers=headers)

    assert first.status_code == 201
    assert second.status_code == 200
    assert len(second.json()["items"]) == 1


@pytest.mark.asyncio
async def test_favourites_are_per_user(client: AsyncClient) -> None:
    anna = await register_user(client)
    alexei = await register_user(client, username="vronsky", email="alexei@example.com")

    await client.post("/api/favourites", json=MOVIE, headers=bearer(anna["token"]))
    await client.post("/api/favourites", json=PODCAST, headers=bearer(alexei["token"]))
    # Same catalogue item saved by two users is two separate entries.
    await client.post("/api/favourites", json=MOVIE, headers=bearer(alexei["token"]))

    anna_items = await client.get("/api/favourites", headers=bearer(anna["token"]))
    alexei_items = await client.get("/api/favourites", headers=bearer(alexei["token"]))

    assert [item["id"] for item in anna_items.json()["items"]] == ["movie-1"]
    assert [item["id"] for item in alexei_items.json()["items"]] == ["podcast-7", "movie-1"]


@pytest.mark.asyncio
async def test_removing_unknown_favourite_returns_unchanged_list(client: AsyncClient) -> None:
    anna = await register_user(client)
    headers = bearer(anna["token"])
    await client.post("/api/favourites", json=MOVIE, headers=headers)

    response = await client.delete("/api/favourites/movie-404", headers=headers)

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["items"]] == ["movie-1"]


@pytest.mark.asyncio
async def test_invalid_favourite_payload_is_bad_request(client: AsyncClient) -> None:
    anna = await register_user(client)

    response = await client.post(
        "/api/favourites",
        json={**MOVIE, "type": "audiobook"},
        headers=bearer(anna["token"]),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid favourite payload."


@pytest.mark.asyncio
async def test_fields_longer_than_their_columns_are_bad_request(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        json={
            "firstName": "Anna",
            "lastName": "Karenina",
            "email": "anna@example.com",
            "username": "a" * 100,
            "password": "troika1877",
        },
    )
    assert response.status_code == 400

    anna = await register_user(client)
    response = await client.post(
        "/api/favourites",
        json={**MOVIE, "title": "T" * 600},
        headers=bearer(anna["token"]),
    )
    assert response.status_code == 400

    listing = await client.get("/api/favourites", headers=bearer(anna["token"]))
    assert listing.json()["items"] == []


@pytest.mark.asyncio
async def test_oversized_body_is_rejected(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(get_settings(), "max_request_bytes", 64)

    response = await client.post(
        "/api/auth/register", json={"firstName": "A" * 200, "lastName": "B"}
    )

    assert response.status_code == 413
    assert response.json()["error_type"] == "payload_too_large"


@pytest.mark.asyncio
async def test_unknown_route_uses_structured_not_found(client: AsyncClient) -> None:
    response = await client.get("/api/nothing-here")

    assert response.status_code == 404
    body = response.json()
    assert body["error_type"] == "not_found"
    assert body["path"] == "/api/nothing-here"
