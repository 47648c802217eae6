"""Factories and a scriptable fake server for the client tests."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from streamverse_client.api import StreamVerseApi
from streamverse_client.models import Favourite, Session, UserProfile

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


def user_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "id": "u-1",
        "email": "anna@example.com",
        "username": "annak",
        "firstName": "Anna",
        "lastName": "Karenina",
        "avatarUrl": None,
        "createdAt": "2024-05-01T12:00:00Z",
        "updatedAt": "2024-05-01T12:00:00Z",
    }
    payload.update(overrides)
    return payload


def favourite_payload(item_id: str = "movie-1", **overrides: Any) -> dict[str, Any]:
    payload = {
        "id": item_id,
        "type": "movie",
        "title": "Fight Club",
        "description": "An insomniac office worker forms an underground club.",
        "image": "https://image.tmdb.org/t/p/w500/fight-club.jpg",
        "status": "Popular",
        "addedAt": "2024-05-02T08:30:00Z",
    }
    payload.update(overrides)
    return payload


def make_session(token: str = "token-1", **user: Any) -> Session:
    return Session(token=token, user=UserProfile.model_validate(user_payload(**user)))


def make_favourite(item_id: str = "movie-1") -> Favourite:
    return Favourite.model_validate(favourite_payload(item_id))


def items_response(*item_ids: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code, json={"items": [favourite_payload(item_id) for item_id in item_ids]}
    )


def error_response(status_code: int, message: str | None) -> httpx.Response:
    body = {"error_type": "internal_error", "status_code": status_code}
    if message is not None:
        body["message"] = message
    return httpx.Response(status_code, json=body)


class FakeServer:
    """Records every request and answers with the installed handler."""

    def __init__(self, handler: Handler | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = handler or (lambda request: items_response())

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if isinstance(response, Awaitable):
            response = await response
        return response

    def api(self) -> StreamVerseApi:
        return StreamVerseApi("http://api.test", transport=httpx.MockTransport(self))

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None
