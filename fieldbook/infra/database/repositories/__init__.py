"""Repositories for the fieldbook database."""
from fieldbook.infra.database.repositories.base import BaseRepository
from fieldbook.infra.database.repositories.commitment import CommitmentRepository

__all__ = [
    "BaseRepository",
    "CommitmentRepository",
]
