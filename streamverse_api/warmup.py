"""Startup warmup for the database and Redis connections.

The database ping is fatal: an API that cannot reach its database refuses to
start. Redis is optional and only logged about.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from streamverse_api.db.connection import begin_engine_transaction

logger = logging.getLogger(__name__)


async def warmup_database(
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    """Open a pooled transaction and run ``SELECT 1``; errors propagate."""

    if resolve_engine is None:
        from streamverse_api.db.connection import get_engine as resolve_engine

    start = time.time()
    engine = resolve_engine()
    try:
        async with begin_engine_transaction(engine) as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.critical("Database warmup failed; refusing to start")
        raise

    elapsed = (time.time() - start) * 1000
    logger.info("Database connection warmed up (%.0fms)", elapsed)


async def warmup_redis() -> None:
    """Ping Redis when configured; unavailability is only logged."""

    from streamverse_api.cache import get_redis

    try:
        start = time.time()
        redis = await get_redis()

        if redis is None:
            logger.info("Redis warmup skipped (connection unavailable)")
            return

        await redis.ping()

        elapsed = (time.time() - start) * 1000
        logger.info("Redis connection warmed up (%.0fms)", elapsed)
    except Exception as e:
        logger.warning(f"Redis warmup failed: {e}")


async def warmup_all(
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    logger.info("Warming up backend connections...")
    start = time.time()

    await warmup_database(resolve_engine=resolve_engine)
    await warmup_redis()

    total_elapsed = (time.time() - start) * 1000
    logger.info("Backend warmup complete (%.0fms)", total_elapsed)
