"""Persistence helpers for :class:`~streamverse_api.db.models.User` rows."""

from __future__ import annotations

from typing import Literal

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamverse_api.db.models import FavouriteEntry, User

UniqueField = Literal["email", "username"]


def normalize_identity(value: str) -> str:
    """Trim and lowercase an email or username before comparing or storing it."""

    return value.strip().lower()


class UserRepository:
    """Encapsulates SQLAlchemy operations on the ``users`` table.

    Callers are expected to pass already normalised email and username values;
    see :func:`normalize_identity`.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> User | None:
        return await self._session.get(User, user_id)

    async def find_by_email_or_username(self, *, email: str, username: str) -> User | None:
        """Single lookup used by registration to detect either kind of duplicate."""

        query = select(User).where(or_(User.email == email, User.username == username))
        result = await self._session.execute(query.limit(1))
        return result.scalars().first()

    async def find_by_identifier(self, identifier: str) -> User | None:
        """Resolve a login identifier that may be an email or a username."""

        query = select(User).where(
            or_(User.email == identifier, User.username == identifier)
        )
        result = await self._session.execute(query.limit(1))
        return result.scalars().first()

    async def find_by_field(self, field: UniqueField, value: str) -> User | None:
        column = User.email if field == "email" else User.username
        result = await self._session.execute(select(User).where(column == value))
        return result.scalars().first()

    async def create(
        self,
        *,
        email: str,
        username: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        avatar_url: str | None = None,
    ) -> User:
        user = User(
            email=email,
            username=username,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            avatar_url=avatar_url,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def save(self, user: User) -> User:
        """Flush pending attribute changes and reload server-side timestamps."""

        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        """Delete the user and, explicitly, every favourite the user owns."""

        await self._session.execute(
            delete(FavouriteEntry).where(FavouriteEntry.user_id == user.id)
        )
        await self._session.delete(user)
        await self._session.flush()
