"""
fieldbook.infra.database – PostgreSQL async engine, session, models and repositories.

Public API
──────────
  build_engine, build_session_factory, ensure_database_exists, init_db, close_engine
  Base, CommitmentRecord (models)
  BaseRepository, CommitmentRepository
"""
from fieldbook.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    init_db,
)
from fieldbook.infra.database.models import Base, CommitmentRecord
from fieldbook.infra.database.repositories import BaseRepository, CommitmentRepository

__all__ = [
    "build_engine",
    "build_session_factory",
    "ensure_database_exists",
    "init_db",
    "close_engine",
    "Base",
    "CommitmentRecord",
    "BaseRepository",
    "CommitmentRepository",
]
