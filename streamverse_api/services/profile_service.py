"""User directory: reading, editing, and deleting the caller's own profile."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from streamverse_api.cache import CacheClient, get_cache_client
from streamverse_api.db.connection import get_db
from streamverse_api.db.models import User
from streamverse_api.db.repositories import UniqueField, UserRepository, normalize_identity
from streamverse_api.errors import BlobStorageError, ConflictError
from streamverse_api.schemas.user import ProfileUpdate, UserRead
from streamverse_api.services.blob_storage import BlobStorage, get_blob_storage
from streamverse_api.services.favourites import FavouritesCache

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(
        self,
        *,
        users: UserRepository,
        blob_storage: BlobStorage,
        favourites_cache: FavouritesCache,
    ) -> None:
        self._users = users
        self._blob_storage = blob_storage
        self._favourites_cache = favourites_cache

    def get_profile(self, user: User) -> UserRead:
        return UserRead.model_validate(user)

    async def update_profile(self, user: User, update: ProfileUpdate) -> UserRead:
        """Apply every non-blank field of ``update``; omitted fields are untouched."""

        first_name = (update.first_name or "").strip()
        if first_name:
            user.first_name = first_name
        last_name = (update.last_name or "").strip()
        if last_name:
            user.last_name = last_name

        for field, raw in (("username", update.username), ("email", update.email)):
            value = normalize_identity(raw or "")
            if not value or value == getattr(user, field):
                continue
            await self._ensure_available(user, field, value)
            setattr(user, field, value)

        avatar = (update.avatar_base64 or "").strip()
        if avatar:
            user.avatar_url = await self._blob_storage.upload_avatar(avatar, user.id)

        try:
            await self._users.save(user)
        except IntegrityError as exc:
            raise ConflictError("Another user already uses that username or email.") from exc

        logger.info("Updated profile for user %s", user.id)
        return UserRead.model_validate(user)

    async def delete_profile(self, user: User) -> None:
        had_avatar = bool(user.avatar_url)
        user_id = user.id

        await self._users.delete(user)
        await self._favourites_cache.invalidate(user_id=user_id)
        if had_avatar:
            try:
                await self._blob_storage.delete_avatar(user_id)
            except BlobStorageError as exc:
                # The account is gone either way; the orphaned image is only logged.
                logger.warning("Could not delete avatar for user %s: %s", user_id, exc.message)
        logger.info("Deleted user %s", user_id)

    async def _ensure_available(self, user: User, field: UniqueField, value: str) -> None:
        holder = await self._users.find_by_field(field, value)
        if holder is not None and holder.id != user.id:
            raise ConflictError(f"Another user already uses that {field}.")


async def get_profile_service(
    session: AsyncSession = Depends(get_db),
    cache_client: CacheClient = Depends(get_cache_client),
    blob_storage: BlobStorage = Depends(get_blob_storage),
) -> ProfileService:
    return ProfileService(
        users=UserRepository(session),
        blob_storage=blob_storage,
        favourites_cache=FavouritesCache(cache_client),
    )
