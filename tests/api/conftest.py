"""Shared fixtures for the API tests: a throwaway SQLite database and fakes."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from streamverse_api.cache import get_cache_client
from streamverse_api.db.connection import create_engine, create_session_factory, get_db
from streamverse_api.db.models import Base
from streamverse_api.main import app
from streamverse_api.services.blob_storage import get_blob_storage
from streamverse_api.settings import AppSettings

from .support import FakeBlobStorage, MemoryCache


@pytest.fixture
def test_settings() -> AppSettings:
    return AppSettings(
        jwt_secret="test-secret",
        jwt_expires_in="1h",
        bcrypt_rounds=4,
        use_sqlite=True,
    )


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite so every session sees the same database."""
    pytest.importorskip("aiosqlite")
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'streamverse.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = create_session_factory(engine)
    async with session_factory() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def blob_storage() -> FakeBlobStorage:
    return FakeBlobStorage()


@pytest_asyncio.fixture
async def client(
    engine: AsyncEngine,
    memory_cache: MemoryCache,
    blob_storage: FakeBlobStorage,
) -> AsyncIterator[AsyncClient]:
    """HTTP client wired to the app with the database and externals overridden."""

    session_factory = create_session_factory(engine)

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as db_session:
            try:
                yield db_session
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_client] = lambda: memory_cache
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as http:
            yield http
    finally:
        app.dependency_overrides.clear()
