"""Registration and login backed by the ``users`` table."""

from __future__ import annotations

import asyncio
import logging

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from streamverse_api.db.connection import get_db
from streamverse_api.db.repositories import UserRepository, normalize_identity
from streamverse_api.errors import ConflictError, InvalidInputError, UnauthorizedError
from streamverse_api.schemas.auth import LoginRequest, RegisterRequest
from streamverse_api.schemas.user import UserRead
from streamverse_api.security import hash_password, issue_token, verify_password
from streamverse_api.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72

DUPLICATE_ACCOUNT_MESSAGE = "A user with that email or username already exists."
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."


def _clean(value: str | None) -> str:
    return (value or "").strip()


class AuthService:
    """Credential store: creates accounts and exchanges credentials for tokens."""

    def __init__(self, users: UserRepository, settings: AppSettings | None = None) -> None:
        self._users = users
        self._settings = settings or get_settings()

    async def register(self, payload: RegisterRequest) -> tuple[str, UserRead]:
        email = normalize_identity(payload.email or "")
        username = normalize_identity(payload.username or "")
        first_name = _clean(payload.first_name)
        last_name = _clean(payload.last_name)
        password = payload.password or ""

        if not all((email, username, password.strip(), first_name, last_name)):
            raise InvalidInputError(
                "Email, username, password, first name and last name are required."
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidInputError("Password must be at most 72 bytes long.")

        existing = await self._users.find_by_email_or_username(
            email=email, username=username
        )
        if existing is not None:
            raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE)

        password_hash = await asyncio.to_thread(
            hash_password, password, rounds=self._settings.bcrypt_rounds
        )
        try:
            user = await self._users.create(
                email=email,
                username=username,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                avatar_url=_clean(payload.avatar_url) or None,
            )
        except IntegrityError as exc:
            # Lost a race against a concurrent registration.
            logger.info("Registration conflict for username %s", username)
            raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE) from exc

        logger.info("Registered user %s (%s)", user.id, username)
        return self._issue(user.id), UserRead.model_validate(user)

    async def login(self, payload: LoginRequest) -> tuple[str, UserRead]:
        identifier = normalize_identity(payload.lookup_value)
        password = payload.password or ""
        if not identifier or not password:
            raise InvalidInputError("Identifier and password are required.")

        user = await self._users.find_by_identifier(identifier)
        if user is None:
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        matches = await asyncio.to_thread(verify_password, password, user.password_hash)
        if not matches:
            logger.info("Failed login for user %s", user.id)
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        return self._issue(user.id), UserRead.model_validate(user)

    def _issue(self, user_id: str) -> str:
        return issue_token(user_id, settings=self._settings)


async def get_auth_service(session: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(UserRepository(session))
