"""Python client for the StreamVerse API: session cache, state store and CLI."""

from .api import ApiError, NetworkError, StreamVerseApi
from .session_cache import SessionCache
from .state import AppState, Store
from .storage import JsonFileStorage, MemoryStorage

__all__ = [
    "ApiError",
    "AppState",
    "JsonFileStorage",
    "MemoryStorage",
    "NetworkError",
    "SessionCache",
    "Store",
    "StreamVerseApi",
]
