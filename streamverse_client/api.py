"""Thin async wrapper over the StreamVerse REST API."""

from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from .models import CatalogueItem, Favourite, Session, UserProfile

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:4000"
DEFAULT_TIMEOUT_SECONDS = 10.0
NETWORK_ERROR_MESSAGE = "Unable to reach server. Check your connection and try again."
INVALID_RESPONSE_MESSAGE = "Invalid response"


class ApiError(Exception):
    """The server answered with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(Exception):
    """The server could not be reached at all."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


def resolve_api_base_url() -> str:
    return (os.getenv("STREAMVERSE_API_URL") or DEFAULT_API_URL).rstrip("/")


class StreamVerseApi:
    """One method per endpoint; every failure surfaces as ApiError or NetworkError."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=(base_url or resolve_api_base_url()).rstrip("/"),
            transport=transport,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> StreamVerseApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def register(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        username: str,
        password: str,
    ) -> Session:
        data = await self._request(
            "POST",
            "/api/auth/register",
            json={
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "username": username,
                "password": password,
            },
            fallback="Registration failed.",
        )
        return self._parse(Session, data)

    async def login(self, identifier: str, password: str) -> Session:
        data = await self._request(
            "POST",
            "/api/auth/login",
            json={"identifier": identifier, "password": password},
            fallback="Login failed.",
        )
        return self._parse(Session, data)

    async def get_profile(self, token: str) -> UserProfile:
        data = await self._request(
            "GET", "/api/profile/me", token=token, fallback="Unable to load profile."
        )
        return self._parse(UserProfile, (data or {}).get("user"))

    async def update_profile(self, token: str, **changes: str | None) -> UserProfile:
        """Send only the provided fields; keys are snake_case, e.g. ``first_name``."""

        body = {
            to_camel(key): value for key, value in changes.items() if value is not None
        }
        data = await self._request(
            "PUT",
            "/api/profile",
            token=token,
            json=body,
            fallback="Unable to update profile.",
        )
        return self._parse(UserProfile, (data or {}).get("user"))

    async def delete_profile(self, token: str) -> None:
        await self._request(
            "DELETE", "/api/profile", token=token, fallback="Unable to delete account."
        )

    async def list_favourites(self, token: str) -> list[Favourite]:
        data = await self._request(
            "GET", "/api/favourites", token=token, fallback="Unable to load favourites."
        )
        return self._parse_items(data)

    async def add_favourite(self, token: str, item: CatalogueItem) -> list[Favourite]:
        data = await self._request(
            "POST",
            "/api/favourites",
            token=token,
            json=item.model_dump(include=set(CatalogueItem.model_fields)),
            fallback="Unable to save favourite.",
        )
        return self._parse_items(data)

    async def remove_favourite(self, token: str, item_id: str) -> list[Favourite]:
        data = await self._request(
            "DELETE",
            f"/api/favourites/{quote(item_id, safe='')}",
            token=token,
            fallback="Unable to remove favourite.",
        )
        return self._parse_items(data)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        token: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TransportError as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            raise NetworkError() from exc

        if response.status_code == 204 or not response.content:
            data = None
        else:
            try:
                data = response.json()
            except ValueError:
                data = None

        if response.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            raise ApiError(message or fallback, response.status_code)
        return data if isinstance(data, dict) else None

    @staticmethod
    def _parse(model: type, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise ApiError(INVALID_RESPONSE_MESSAGE, 200) from exc

    @classmethod
    def _parse_items(cls, data: dict[str, Any] | None) -> list[Favourite]:
        items = (data or {}).get("items") or []
        return [cls._parse(Favourite, item) for item in items]
