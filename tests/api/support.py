"""Test doubles and request helpers shared by the API tests."""

from __future__ import annotations

from httpx import AsyncClient


class MemoryCache:
    """In-memory cache double that mimics :class:`streamverse_api.cache.CacheClient`."""

    def __init__(self) -> None:
        self.store: dict[str, object] = {}
        self.deleted: list[str] = []

    async def get_json(self, key: str) -> object | None:
        return self.store.get(key)

    async def set_json(self, key: str, value: object, ttl: int | None = None) -> None:
        self.store[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self.store.pop(key, None)
            self.deleted.append(key)


class FakeBlobStorage:
    """Records avatar uploads and deletions instead of calling Cloudinary."""

    def __init__(self) -> None:
        self.uploads: list[tuple[str, str]] = []
        self.deleted: list[str] = []

    async def upload_avatar(self, data_uri: str, user_id: str) -> str:
        self.uploads.append((user_id, data_uri))
        return f"https://res.cloudinary.test/streamverse/avatars/{user_id}.png"

    async def delete_avatar(self, user_id: str) -> None:
        self.deleted.append(user_id)


async def register_user(
    client: AsyncClient,
    *,
    username: str = "annak",
    email: str = "anna@example.com",
    password: str = "troika1877",
) -> dict:
    """Register through the API and return the ``{token, user}`` body."""

    response = await client.post(
        "/api/auth/register",
        json={
            "firstName": "Anna",
            "lastName": "Karenina",
            "email": email,
            "username": username,
            "password": password,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


MOVIE = {
    "id": "movie-1",
    "type": "movie",
    "title": "Fight Club",
    "description": "An insomniac office worker forms an underground club.",
    "image": "https://image.tmdb.org/t/p/w500/fight-club.jpg",
    "status": "Popular",
}

PODCAST = {
    "id": "podcast-7",
    "type": "Podcast",
    "title": "The Daily",
    "description": "Twenty minutes a day.",
    "image": "https://is1-ssl.mzstatic.com/the-daily.jpg",
    "status": "Trending",
}
