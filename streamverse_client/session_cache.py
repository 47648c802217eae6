"""Local persistence of the signed-in session across restarts.

The cache only reads and writes local storage; it never talks to the server,
so a restored session may refer to an account that no longer exists. The
first authenticated request settles that.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from .models import Session
from .storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

SESSION_KEY = "streamverse_session"
LOAD_TIMEOUT_SECONDS = 5.0


class SessionCache:
    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        load_timeout: float = LOAD_TIMEOUT_SECONDS,
    ) -> None:
        self._storage = storage
        self._load_timeout = load_timeout

    async def load(self) -> Session | None:
        """Return the persisted session, or ``None``.

        Storage failures and slow storage count as "no session". A record that
        does not parse into a token plus user id is removed.
        """

        try:
            raw = await asyncio.wait_for(
                self._storage.get_item(SESSION_KEY), timeout=self._load_timeout
            )
        except (StorageError, OSError, asyncio.TimeoutError) as exc:
            logger.warning("Could not read cached session: %s", exc)
            return None

        if raw is None:
            return None

        try:
            return Session.model_validate_json(raw)
        except ValidationError:
            logger.info("Discarding malformed cached session")
            await self._discard()
            return None

    async def save(self, session: Session) -> None:
        await self._storage.set_item(
            SESSION_KEY, session.model_dump_json(by_alias=True)
        )

    async def clear(self) -> None:
        await self._storage.remove_item(SESSION_KEY)

    async def _discard(self) -> None:
        try:
            await self._storage.remove_item(SESSION_KEY)
        except (StorageError, OSError) as exc:
            logger.warning("Could not remove malformed session: %s", exc)
