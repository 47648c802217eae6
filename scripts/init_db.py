#!/usr/bin/env python
"""Create the StreamVerse tables directly, bypassing Alembic (development only)."""
import asyncio

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from streamverse_api.db.connection import create_engine, get_database_url
from streamverse_api.db.models import Base
from streamverse_api.main import _sanitize_database_url, validate_environment


async def init_db(url: str | None = None) -> None:
    engine = create_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print(f"✓ Database tables created at {_sanitize_database_url(url or get_database_url())}")


if __name__ == "__main__":
    validate_environment()
    asyncio.run(init_db())
