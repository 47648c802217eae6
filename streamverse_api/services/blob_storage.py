"""Avatar storage backed by Cloudinary's signed upload REST API.

The API never processes images itself: it forwards the client's data URI and
keeps the ``secure_url`` Cloudinary answers with. Each user owns exactly one
avatar public id, ``<folder>/avatars/<user_id>``, overwritten on every upload.
"""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Protocol

import httpx

from streamverse_api.errors import BlobStorageError
from streamverse_api.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
_REQUEST_TIMEOUT_SECONDS = 30.0


class BlobStorage(Protocol):
    """Operations the User Directory needs from the external blob store."""

    async def upload_avatar(self, data_uri: str, user_id: str) -> str:
        """Store the image and return its public URL."""
        ...

    async def delete_avatar(self, user_id: str) -> None:
        ...


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Cloudinary signature: SHA-1 of sorted ``k=v`` pairs joined by ``&`` plus the secret."""

    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryBlobStorage:
    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder.strip("/")
        self._transport = transport

    def avatar_public_id(self, user_id: str) -> str:
        return f"{self._folder}/avatars/{user_id}"

    async def upload_avatar(self, data_uri: str, user_id: str) -> str:
        params = {
            "public_id": self.avatar_public_id(user_id),
            "overwrite": "true",
            "invalidate": "true",
            "timestamp": str(int(time.time())),
        }
        payload = await self._post("upload", {**params, "file": data_uri}, params)
        secure_url = payload.get("secure_url")
        if not isinstance(secure_url, str) or not secure_url:
            raise BlobStorageError("Avatar upload did not return a URL.")
        logger.info("Uploaded avatar for user %s", user_id)
        return secure_url

    async def delete_avatar(self, user_id: str) -> None:
        params = {
            "public_id": self.avatar_public_id(user_id),
            "invalidate": "true",
            "timestamp": str(int(time.time())),
        }
        payload = await self._post("destroy", dict(params), params)
        logger.info(
            "Deleted avatar for user %s (result=%s)", user_id, payload.get("result")
        )

    async def _post(
        self, action: str, form: dict[str, str], signed: dict[str, str]
    ) -> dict:
        url = f"{CLOUDINARY_API_BASE}/{self._cloud_name}/image/{action}"
        form = {
            **form,
            "api_key": self._api_key,
            "signature": sign_params(signed, self._api_secret),
        }
        try:
            async with httpx.AsyncClient(
                timeout=_REQUEST_TIMEOUT_SECONDS, transport=self._transport
            ) as client:
                response = await client.post(url, data=form)
        except httpx.HTTPError as exc:
            logger.error("Cloudinary %s request failed: %s", action, exc)
            raise BlobStorageError() from exc

        if response.status_code >= 400:
            logger.error(
                "Cloudinary %s returned %s: %s",
                action,
                response.status_code,
                response.text[:300],
            )
            raise BlobStorageError()

        try:
            return response.json()
        except ValueError as exc:
            raise BlobStorageError() from exc


class UnconfiguredBlobStorage:
    """Stand-in used when Cloudinary credentials are absent."""

    async def upload_avatar(self, data_uri: str, user_id: str) -> str:
        raise BlobStorageError("Avatar storage is not configured.")

    async def delete_avatar(self, user_id: str) -> None:
        logger.debug("Skipping avatar deletion for %s; storage not configured", user_id)


def build_blob_storage(settings: AppSettings | None = None) -> BlobStorage:
    active = settings or get_settings()
    if not active.cloudinary_configured:
        return UnconfiguredBlobStorage()
    return CloudinaryBlobStorage(
        cloud_name=active.cloudinary_cloud_name,
        api_key=active.cloudinary_api_key,
        api_secret=active.cloudinary_api_secret,
        folder=active.cloudinary_upload_folder,
    )


def get_blob_storage() -> BlobStorage:
    """FastAPI dependency; overridden in tests with an in-memory fake."""

    return build_blob_storage()
