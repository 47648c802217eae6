"""SQLAlchemy ORM model for per-user favourites.

Each row is a denormalised snapshot of a catalogue item taken when the user
saved it. Rows are created and deleted, never updated: removing and re-adding
is the only way to refresh the snapshot.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from . import Base, utcnow

if TYPE_CHECKING:
    from . import User

FAVOURITE_TYPES: tuple[str, ...] = ("movie", "music", "podcast")


class FavouriteEntry(Base):
    """A catalogue item saved by a single user."""

    __tablename__ = "favourite_entries"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "item_id",
            name="uq_favourite_entries_user_item",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Monotonic surrogate key; ordering by it yields insertion order.",
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Catalogue identifier such as 'movie-550' or 'music-1440857781'.",
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(String(1024), nullable=False)
    status: Mapped[str] = mapped_column(String(255), nullable=False)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    user: Mapped[User] = relationship("User", back_populates="favourites")
