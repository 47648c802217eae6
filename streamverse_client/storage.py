"""Key/value persistence backends for the client.

Both backends expose the same small async interface so the session cache and
preference store never care where bytes end up.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = Path.home() / ".streamverse" / "storage.json"


class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""


class KeyValueStorage(Protocol):
    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage, used by tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._items)


class JsonFileStorage:
    """All keys stored as one JSON object in a single file.

    File access runs in worker threads. Writes go through a temporary file and
    ``os.replace`` so a crash never leaves a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_STORAGE_PATH) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def get_item(self, key: str) -> str | None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_document)
        value = document.get(key)
        if value is None or isinstance(value, str):
            return value
        # Hand foreign values back as JSON so callers can validate and drop them.
        return json.dumps(value)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_document_or_empty)
            document[key] = value
            await asyncio.to_thread(self._write_document, document)

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_document_or_empty)
            if document.pop(key, None) is not None:
                await asyncio.to_thread(self._write_document, document)

    def _read_document(self) -> dict[str, object]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read {self._path}: {exc}") from exc

        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"{self._path} is not valid JSON") from exc
        if not isinstance(document, dict):
            raise StorageError(f"{self._path} does not hold a JSON object")
        return document

    def _read_document_or_empty(self) -> dict[str, object]:
        try:
            return self._read_document()
        except StorageError as exc:
            logger.warning("Discarding unreadable storage file: %s", exc)
            return {}

    def _write_document(self, document: dict[str, object]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise StorageError(f"Cannot write {self._path}: {exc}") from exc
