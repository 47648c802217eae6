from __future__ import annotations

import asyncio
import json
import logging
import time
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from streamverse_api.settings import get_settings

if TYPE_CHECKING:
    from redis.asyncio import Redis as RedisClient

logger = logging.getLogger(__name__)

_DEFAULT_TTL_SECONDS = 600
_FAVOURITE_LIST_PREFIX = "favourites:list"

_redis_client: RedisClient | None = None
_client_lock = asyncio.Lock()
_redis_disabled_until: float = 0.0


def favourite_list_key(user_id: str) -> str:
    return f"{_FAVOURITE_LIST_PREFIX}:{user_id}"


@lru_cache(maxsize=1)
def _load_redis_components() -> tuple[Any, type[BaseException]]:
    """Return the Redis asyncio client class and connection error type."""

    from redis.asyncio import Redis as RedisClientType
    from redis.exceptions import ConnectionError as RedisConnectionErrorType

    return RedisClientType, RedisConnectionErrorType


def _is_redis_connection_error(exc: BaseException) -> bool:
    """Return ``True`` when ``exc`` represents a Redis connection failure."""

    _, connection_error = _load_redis_components()
    return isinstance(exc, (connection_error, OSError, asyncio.TimeoutError))


async def get_redis() -> RedisClient | None:
    """Get the shared Redis client, returning ``None`` while Redis is unreachable.

    After a failed connection attempt further attempts are suppressed for
    ``REDIS_RETRY_BACKOFF_SECONDS`` so a missing Redis does not add a connect
    timeout to every request.
    """
    global _redis_client, _redis_disabled_until

    if _redis_client is not None:
        return _redis_client

    if time.monotonic() < _redis_disabled_until:
        return None

    # Acquire the lock before creating the client so concurrent requests share one.
    async with _client_lock:
        if _redis_client is not None:
            return _redis_client

        if time.monotonic() < _redis_disabled_until:
            return None

        redis_class, _ = _load_redis_components()
        settings = get_settings()
        client = redis_class.from_url(
            settings.redis_url, decode_responses=True, encoding="utf-8"
        )
        try:
            await client.ping()
        except Exception as exc:
            if _is_redis_connection_error(exc):
                logger.warning(
                    "Redis connection failed: %s. Caching disabled for %.0fs.",
                    exc,
                    settings.redis_retry_backoff_seconds,
                )
                _redis_disabled_until = (
                    time.monotonic() + settings.redis_retry_backoff_seconds
                )
                await client.aclose()
                return None
            raise

        _redis_client = client
        logger.info("Redis connection established successfully")
        return _redis_client


class CacheClient:
    """JSON get/set/delete over Redis that degrades to a no-op without it."""

    def __init__(self, redis: RedisClient | None) -> None:
        self._redis = redis

    async def get_json(self, key: str) -> Any:
        if self._redis is None:
            return None
        try:
            payload = await self._redis.get(key)
            if payload is None:
                return None
            try:
                return json.loads(payload)
            except json.JSONDecodeError:
                return None
        except Exception as exc:
            if _is_redis_connection_error(exc):
                logger.debug("Redis get failed for key %s: %s", key, exc)
                return None
            raise

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        if self._redis is None:
            return
        try:
            encoded = json.dumps(value, default=str)
            await self._redis.set(key, encoded, ex=ttl or _DEFAULT_TTL_SECONDS)
        except Exception as exc:
            if _is_redis_connection_error(exc):
                logger.debug("Redis set failed for key %s: %s", key, exc)
                return
            raise

    async def delete(self, *keys: str) -> None:
        if self._redis is None or not keys:
            return
        try:
            await self._redis.delete(*keys)
        except Exception as exc:
            if _is_redis_connection_error(exc):
                logger.debug("Redis delete failed: %s", exc)
                return
            raise


async def get_cache_client() -> CacheClient:
    redis = await get_redis()
    return CacheClient(redis)


async def close_redis() -> None:
    """Close the global Redis connection gracefully."""
    global _redis_client, _redis_disabled_until
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
    _redis_disabled_until = 0.0


__all__ = [
    "CacheClient",
    "close_redis",
    "favourite_list_key",
    "get_cache_client",
    "get_redis",
]
