from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Registered account.

    ``email`` and ``username`` are normalised (trimmed, lowercased) by the
    services before every write, so the unique indexes below enforce
    case-insensitive uniqueness without relying on database collation.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_user_id)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    favourites: Mapped[list["FavouriteEntry"]] = relationship(
        "FavouriteEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="FavouriteEntry.id",
        lazy="raise",
    )


# Imported late to avoid circular dependency with the favourites module.
from .favourites import FAVOURITE_TYPES, FavouriteEntry  # noqa: E402

__all__ = [
    "Base",
    "FAVOURITE_TYPES",
    "FavouriteEntry",
    "User",
    "utcnow",
]
