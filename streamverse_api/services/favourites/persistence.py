"""Database-oriented helpers for the per-user favourites ledger.

Mutations are expressed as single-row statements rather than a
read-modify-write of the user's whole list: ``INSERT`` guarded by the
``(user_id, item_id)`` unique constraint, and ``DELETE`` filtered by both
columns. Concurrent requests for the same user therefore never overwrite each
other's changes.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from streamverse_api.db.models import FavouriteEntry


class FavouritesPersistence:
    """Encapsulates SQLAlchemy operations on ``favourite_entries``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: str) -> list[FavouriteEntry]:
        """Return the user's favourites in the order they were added."""

        query = (
            select(FavouriteEntry)
            .where(FavouriteEntry.user_id == user_id)
            .order_by(FavouriteEntry.id)
        )
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def exists(self, user_id: str, item_id: str) -> bool:
        query = select(FavouriteEntry.id).where(
            FavouriteEntry.user_id == user_id,
            FavouriteEntry.item_id == item_id,
        )
        result = await self._session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def insert_if_absent(
        self,
        *,
        user_id: str,
        item_id: str,
        type: str,
        title: str,
        description: str,
        image: str,
        status: str,
    ) -> bool:
        """Insert a favourite unless one with ``item_id`` exists; return ``True`` if inserted.

        The existence probe handles the common retry case cheaply; the savepoint
        catches the race where a concurrent request inserted the same item
        between the probe and the insert.
        """

        if await self.exists(user_id, item_id):
            return False

        entry = FavouriteEntry(
            user_id=user_id,
            item_id=item_id,
            type=type,
            title=title,
            description=description,
            image=image,
            status=status,
            added_at=datetime.now(UTC),
        )
        try:
            async with self._session.begin_nested():
                self._session.add(entry)
        except IntegrityError:
            return False
        return True

    async def delete_item(self, user_id: str, item_id: str) -> bool:
        """Delete one favourite; return ``True`` when a row was actually removed."""

        result = await self._session.execute(
            delete(FavouriteEntry).where(
                FavouriteEntry.user_id == user_id,
                FavouriteEntry.item_id == item_id,
            )
        )
        return bool(result.rowcount)

    async def commit(self) -> None:
        await self._session.commit()
