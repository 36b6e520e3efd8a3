"""
fieldbook.infra.database.models – SQLAlchemy 2.0 ORM models.

Exports Base, mixins, and all model classes.
"""
from fieldbook.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from fieldbook.infra.database.models.commitment import CommitmentRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "_uuid_pk",
    "CommitmentRecord",
]
