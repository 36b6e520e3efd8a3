"""
fieldbook.infra.database.engine – the commitments database for STORE_BACKEND=postgres.

One async engine and session factory per process, built at startup from
PostgresConfig and disposed at shutdown. Every connection carries the
configured lock_timeout, which bounds how long a writer waits for a
field's advisory lock.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

import asyncpg
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fieldbook.config.postgres import PostgresConfig, load_postgres_config
# Importing the package registers CommitmentRecord with Base.metadata
import fieldbook.infra.database.models  # noqa: F401
from fieldbook.infra.database.models.base import Base

logger = logging.getLogger(__name__)

# CREATE DATABASE cannot take a bind parameter
_SAFE_DB_NAME = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


async def ensure_database_exists(config: Optional[PostgresConfig] = None) -> bool:
    """Create the commitments database on first run. Returns True if it was created.

    A server that cannot be reached is left for build_engine to report.
    """
    config = config or load_postgres_config()
    name = config.database
    if name == "postgres":
        return False
    if not _SAFE_DB_NAME.match(name):
        logger.warning("Database: not creating %r, name is not a plain identifier", name)
        return False
    try:
        conn = await asyncpg.connect(config.maintenance_url)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.debug("Database: cannot reach server to check %s (%s)", name, exc)
        return False
    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", name):
            return False
        await conn.execute(f'CREATE DATABASE "{name}"')
    finally:
        await conn.close()
    logger.info("Database: created %s", name)
    return True


def build_engine(config: Optional[PostgresConfig] = None) -> AsyncEngine:
    """The process-wide engine, created on first call."""
    global _engine
    if _engine is None:
        config = config or load_postgres_config()
        _engine = create_async_engine(
            config.async_url,
            echo=config.echo,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_pre_ping=True,
            connect_args={
                "server_settings": {
                    "application_name": "fieldbook",
                    "lock_timeout": str(config.lock_timeout_ms),
                }
            },
        )
        logger.info(
            "Database: engine for %s (pool %d+%d, lock timeout %dms)",
            config.database, config.pool_size, config.max_overflow, config.lock_timeout_ms,
        )
    return _engine


def build_session_factory(engine: Optional[AsyncEngine] = None) -> async_sessionmaker[AsyncSession]:
    """Sessions keep loaded rows usable after commit; repositories flush explicitly."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            engine or build_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def init_db(config: Optional[PostgresConfig] = None) -> None:
    """Create the commitments table and its indexes if they are missing."""
    async with build_engine(config).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database: schema ready")


async def close_engine() -> None:
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database: engine disposed")
