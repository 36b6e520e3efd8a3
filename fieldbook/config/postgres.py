"""
fieldbook.config.postgres – where the availability store lives and how it is pooled.

Env vars: DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT,
DB_LOCK_TIMEOUT_MS, DB_ECHO.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

URL_SCHEMES = ("postgresql", "postgres", "postgresql+asyncpg")

_TRUE = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class PostgresConfig:
    """
    Connection settings for the PostgreSQL availability store.

    Only read when STORE_BACKEND is "postgres". Validated on construction.
    """

    url: str = "postgresql://localhost:5432/fieldbook"
    """Any of postgresql://, postgres:// or postgresql+asyncpg://."""

    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    """Seconds to wait for a pooled connection."""

    lock_timeout_ms: int = 5000
    """Longest wait for a field's write lock before the statement fails; 0 waits forever."""

    echo: bool = False

    def __post_init__(self) -> None:
        scheme = urlsplit(self.url).scheme
        if scheme not in URL_SCHEMES:
            raise ValueError(f"url must use one of {URL_SCHEMES}, got {scheme or self.url!r}")
        if not self.database:
            raise ValueError(f"url names no database: {self.url!r}")
        for name in ("pool_size", "pool_timeout"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be an integer >= 1, got {value!r}")
        for name in ("max_overflow", "lock_timeout_ms"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")

    @property
    def database(self) -> str:
        return urlsplit(self.url).path.lstrip("/")

    @property
    def async_url(self) -> str:
        """The URL with the asyncpg driver, as SQLAlchemy's async engine wants it."""
        return urlunsplit(urlsplit(self.url)._replace(scheme="postgresql+asyncpg"))

    @property
    def maintenance_url(self) -> str:
        """Plain DSN for the server's "postgres" database, used to create ours."""
        return urlunsplit(urlsplit(self.url)._replace(scheme="postgresql", path="/postgres"))

    @classmethod
    def from_env(cls) -> PostgresConfig:
        return cls(
            url=os.environ.get("DATABASE_URL", "postgresql://localhost:5432/fieldbook"),
            pool_size=int(os.environ.get("DB_POOL_SIZE", 10)),
            max_overflow=int(os.environ.get("DB_MAX_OVERFLOW", 20)),
            pool_timeout=int(os.environ.get("DB_POOL_TIMEOUT", 30)),
            lock_timeout_ms=int(os.environ.get("DB_LOCK_TIMEOUT_MS", 5000)),
            echo=os.environ.get("DB_ECHO", "").strip().lower() in _TRUE,
        )


def load_postgres_config() -> PostgresConfig:
    """Load and validate database settings from the environment."""
    return PostgresConfig.from_env()
