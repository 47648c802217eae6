"""Regression tests for startup warmup routines."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import AsyncMock

import pytest

import streamverse_api.warmup as warmup


class _DummyTransaction:
    """Async context manager that hands out a mocked connection."""

    def __init__(self, *, fail: bool = False) -> None:
        self.connection: AsyncMock = AsyncMock()
        if fail:
            self.connection.execute.side_effect = OSError("connection refused")

    async def __aenter__(self) -> AsyncMock:
        return self.connection

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        return False


@pytest.mark.asyncio
async def test_warmup_database_executes_ping(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    caplog.set_level(logging.INFO)
    dummy_txn = _DummyTransaction()
    sentinel_engine = object()
    captured: list[object] = []

    def _capture_engine(engine: object) -> _DummyTransaction:
        captured.append(engine)
        return dummy_txn

    monkeypatch.setattr(warmup, "begin_engine_transaction", _capture_engine)

    await warmup.warmup_database(resolve_engine=lambda: sentinel_engine)

    assert captured == [sentinel_engine]
    statement = dummy_txn.connection.execute.await_args.args[0]
    assert str(statement).strip().upper() == "SELECT 1"
    assert "Database connection warmed up" in caplog.text


@pytest.mark.asyncio
async def test_warmup_database_failure_is_fatal(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        warmup, "begin_engine_transaction", lambda engine: _DummyTransaction(fail=True)
    )

    with pytest.raises(OSError):
        await warmup.warmup_database(resolve_engine=lambda: object())

    assert any(record.levelno == logging.CRITICAL for record in caplog.records)


@pytest.mark.asyncio
async def test_warmup_redis_skips_when_unavailable(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    import streamverse_api.cache as cache

    caplog.set_level(logging.INFO)
    monkeypatch.setattr(cache, "get_redis", AsyncMock(return_value=None))

    await warmup.warmup_redis()

    assert "Redis warmup skipped" in caplog.text


@pytest.mark.asyncio
async def test_warmup_redis_failure_only_warns(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    import streamverse_api.cache as cache

    redis = AsyncMock()
    redis.ping.side_effect = RuntimeError("boom")
    monkeypatch.setattr(cache, "get_redis", AsyncMock(return_value=redis))

    await warmup.warmup_redis()

    assert "Redis warmup failed: boom" in caplog.text


@pytest.mark.asyncio
async def test_warmup_all_runs_both(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    async def fake_database(resolve_engine=None) -> None:
        calls.append("database")

    async def fake_redis() -> None:
        calls.append("redis")

    monkeypatch.setattr(warmup, "warmup_database", fake_database)
    monkeypatch.setattr(warmup, "warmup_redis", fake_redis)

    await warmup.warmup_all()

    assert calls == ["database", "redis"]
