"""Centralized configuration management for the StreamVerse API."""

from __future__ import annotations

import logging
import os
import re
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env file before the settings singleton is built so every
# consumer importing :mod:`streamverse_api.settings` observes the same values.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_SQLITE_DATABASE_URL = "sqlite+aiosqlite:///./data/streamverse.db"
POSTGRES_ASYNC_PREFIX = "postgresql+psycopg://"
POSTGRES_SYNC_PREFIXES = ("postgres://", "postgresql://")
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_REDIS_RETRY_BACKOFF_SECONDS = 30.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_JWT_SECRET = "change-this-secret"
DEFAULT_JWT_EXPIRES_IN = "7d"
DEFAULT_BCRYPT_ROUNDS = 10
DEFAULT_UPLOAD_FOLDER = "streamverse"
DEFAULT_MAX_REQUEST_BYTES = 10 * 1024 * 1024

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str) -> int:
    """Convert ``7d`` / ``12h`` / ``30m`` / ``45s`` / ``3600`` into seconds."""

    match = _DURATION_PATTERN.match(value or "")
    if match is None:
        raise ValueError(f"Unrecognised duration: {value!r}")
    amount, unit = match.groups()
    seconds = int(amount) * _DURATION_UNITS[unit.lower()]
    if seconds <= 0:
        raise ValueError("Durations must be positive")
    return seconds


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Besides raw environment values the class exposes derived helpers such as
    the async database URL and the token lifetime in seconds, so the rest of
    the code base never parses environment strings itself.
    """

    _explicit_redis_url: bool = PrivateAttr(default=False)
    _explicit_cors_allow_origins: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **values: object) -> None:
        """Capture explicit overrides prior to delegating to ``BaseSettings``."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_redis_url = "redis_url" in normalized_keys
        self._explicit_cors_allow_origins = (
            "cors_allow_origins_raw" in normalized_keys
            or "cors_allow_origins" in normalized_keys
        )
        redis_env = os.getenv("REDIS_URL")
        if redis_env is not None and redis_env.strip():
            self._explicit_redis_url = True
        cors_env = os.getenv("CORS_ALLOW_ORIGINS")
        if cors_env is not None and cors_env.strip():
            self._explicit_cors_allow_origins = True

    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description=(
            "SQLAlchemy database URL. Postgres URLs supplied in sync format"
            " (postgres:// or postgresql://) are coerced into the async psycopg"
            " driver string at runtime."
        ),
    )
    use_sqlite: bool = Field(
        default=False,
        alias="USE_SQLITE",
        description="Force the SQLite fallback regardless of DATABASE_URL.",
    )
    redis_url: str = Field(default=DEFAULT_REDIS_URL, alias="REDIS_URL")
    redis_retry_backoff_seconds: float = Field(
        default=DEFAULT_REDIS_RETRY_BACKOFF_SECONDS,
        alias="REDIS_RETRY_BACKOFF_SECONDS",
        description="Cooldown duration applied after Redis connection failures.",
    )
    jwt_secret: str = Field(
        default=DEFAULT_JWT_SECRET,
        alias="JWT_SECRET",
        description="HMAC secret used to sign session tokens.",
    )
    jwt_expires_in: str = Field(
        default=DEFAULT_JWT_EXPIRES_IN,
        alias="JWT_EXPIRES_IN",
        description="Session token lifetime such as '7d', '12h' or plain seconds.",
    )
    bcrypt_rounds: int = Field(
        default=DEFAULT_BCRYPT_ROUNDS,
        alias="BCRYPT_ROUNDS",
        ge=4,
        le=31,
        description="bcrypt cost factor applied when hashing new passwords.",
    )
    cloudinary_cloud_name: str | None = Field(
        default=None, alias="CLOUDINARY_CLOUD_NAME"
    )
    cloudinary_api_key: str | None = Field(default=None, alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = Field(
        default=None, alias="CLOUDINARY_API_SECRET"
    )
    cloudinary_upload_folder: str = Field(
        default=DEFAULT_UPLOAD_FOLDER, alias="CLOUDINARY_UPLOAD_FOLDER"
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, alias="LOG_LEVEL")
    port: int = Field(default=4000, alias="PORT")
    max_request_bytes: int = Field(
        default=DEFAULT_MAX_REQUEST_BYTES,
        alias="MAX_REQUEST_BYTES",
        description="Largest request body accepted; avatar data URIs dominate.",
    )
    slow_query_threshold: float = Field(
        default=0.1,
        alias="SLOW_QUERY_THRESHOLD",
        description="Seconds after which a SQL statement is logged as slow.",
    )

    @property
    def resolved_database_url(self) -> str:
        """Return the async-compatible database URL after applying fallbacks."""

        if self.use_sqlite or not self.database_url:
            return DEFAULT_SQLITE_DATABASE_URL

        url = self.database_url.strip()

        for prefix in POSTGRES_SYNC_PREFIXES:
            if url.startswith(prefix):
                return url.replace(prefix, POSTGRES_ASYNC_PREFIX, 1)

        if url.startswith(POSTGRES_ASYNC_PREFIX) or url.startswith("sqlite+aiosqlite"):
            return url

        raise RuntimeError(
            f"Expected a PostgreSQL or SQLite connection string, received: {url}"
        )

    @property
    def database_type(self) -> str:
        """Return ``sqlite`` when using SQLite otherwise ``postgresql``."""

        if self.resolved_database_url.startswith("sqlite"):
            return "sqlite"
        return "postgresql"

    @property
    def token_lifetime_seconds(self) -> int:
        """Session token lifetime parsed from ``jwt_expires_in``."""

        return parse_duration(self.jwt_expires_in)

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return normalised CORS origins supplied via environment variables."""

        if not self.cors_allow_origins_raw:
            return []

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin]

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if self.jwt_secret == DEFAULT_JWT_SECRET:
            warnings.append(
                "JWT_SECRET is not set - session tokens are signed with the "
                "development default and must not be used in production"
            )

        if not self._explicit_redis_url and self.redis_url == DEFAULT_REDIS_URL:
            warnings.append(
                "REDIS_URL is not set - favourites caching will be disabled "
                "unless a local Redis is reachable"
            )

        if not self.cloudinary_configured:
            warnings.append(
                "CLOUDINARY_* credentials are not set - avatar uploads will be rejected"
            )

        if not self._explicit_cors_allow_origins and not self.cors_allow_origins:
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - using default localhost origins only"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


settings = get_settings()

__all__ = [
    "AppSettings",
    "DEFAULT_BCRYPT_ROUNDS",
    "DEFAULT_JWT_EXPIRES_IN",
    "DEFAULT_JWT_SECRET",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_REDIS_URL",
    "DEFAULT_SQLITE_DATABASE_URL",
    "POSTGRES_ASYNC_PREFIX",
    "get_settings",
    "parse_duration",
    "settings",
]
