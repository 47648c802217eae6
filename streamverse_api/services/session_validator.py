"""Bearer-token authentication for protected routes."""

from __future__ import annotations

import logging

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from streamverse_api.db.connection import get_db
from streamverse_api.db.models import User
from streamverse_api.db.repositories import UserRepository
from streamverse_api.errors import UnauthorizedError
from streamverse_api.security import InvalidTokenError, decode_token
from streamverse_api.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from ``Bearer <token>``; the scheme is case-insensitive."""

    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


class SessionValidator:
    """Resolves an ``Authorization`` header to a live :class:`User`.

    Read-only: it never writes to the database.
    """

    def __init__(self, users: UserRepository, settings: AppSettings | None = None) -> None:
        self._users = users
        self._settings = settings or get_settings()

    async def authenticate(self, authorization: str | None) -> User:
        token = extract_bearer_token(authorization)
        if token is None:
            raise UnauthorizedError("Authentication token missing.")

        try:
            user_id = decode_token(token, settings=self._settings)
        except InvalidTokenError as exc:
            logger.debug("Rejected token: %s", exc)
            raise UnauthorizedError("Invalid authentication token.") from exc

        user = await self._users.get(user_id)
        if user is None:
            raise UnauthorizedError("User not found.")
        return user


async def get_current_user(
    authorization: str | None = Header(None),
    session: AsyncSession = Depends(get_db),
) -> User:
    """FastAPI dependency guarding every profile and favourites route."""

    return await SessionValidator(UserRepository(session)).authenticate(authorization)
