"""Theme preference persisted next to, but separately from, the session."""

from __future__ import annotations

import logging
from typing import Literal, get_args

from .storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

THEME_KEY = "streamverse_theme"

ThemePreference = Literal["light", "dark", "system"]
THEME_CHOICES: tuple[str, ...] = get_args(ThemePreference)
DEFAULT_THEME: ThemePreference = "system"


class ThemePreferenceStore:
    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    async def load(self) -> ThemePreference:
        try:
            value = await self._storage.get_item(THEME_KEY)
        except (StorageError, OSError) as exc:
            logger.warning("Could not read theme preference: %s", exc)
            return DEFAULT_THEME

        if value in THEME_CHOICES:
            return value  # type: ignore[return-value]
        if value is not None:
            # Unknown value written by some other version; forget it.
            await self._storage.remove_item(THEME_KEY)
        return DEFAULT_THEME

    async def save(self, theme: str) -> ThemePreference:
        if theme not in THEME_CHOICES:
            raise ValueError(f"Unknown theme {theme!r}; expected one of {THEME_CHOICES}")
        await self._storage.set_item(THEME_KEY, theme)
        return theme  # type: ignore[return-value]
