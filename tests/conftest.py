"""Pytest configuration helpers for the StreamVerse project.

The ``pytest`` plugin system automatically imports ``tests.conftest`` before
any test module, so the environment defaults below are in place before
:mod:`streamverse_api.settings` builds its cached settings object.
"""

from __future__ import annotations

import os

import pytest

from tests import _ensure_repo_on_path

_TEST_ENVIRONMENT = {
    "USE_SQLITE": "1",
    "JWT_SECRET": "test-secret",
    "BCRYPT_ROUNDS": "4",
    # Nothing listens here; the cache client degrades to a no-op.
    "REDIS_URL": "redis://127.0.0.1:1/0",
    "LOG_LEVEL": "WARNING",
}

for _key, _value in _TEST_ENVIRONMENT.items():
    os.environ.setdefault(_key, _value)


def pytest_configure(config: pytest.Config) -> None:
    """Hook executed by pytest prior to running any tests."""

    _ensure_repo_on_path()
