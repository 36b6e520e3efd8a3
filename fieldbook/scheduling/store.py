"""Availability store: the repository interface for commitments, plus an in-process implementation.

The PostgreSQL implementation lives in
``fieldbook.infra.database.repositories.commitment``.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional
from uuid import UUID

from fieldbook.core.exceptions import DuplicateIdError, NotFoundError
from fieldbook.scheduling.interval import Interval, overlaps
from fieldbook.scheduling.types import BookingStatus, Commitment, CommitmentKind

logger = logging.getLogger(__name__)


class AvailabilityStore(ABC):
    """Durable per-field set of commitments.

    The store never re-validates overlap on insert; callers run the
    conflict detector first, inside ``transaction(field_id)``.
    """

    @abstractmethod
    async def commitments_for(self, field_id: str, window: Interval) -> List[Commitment]:
        """All commitments of the field whose interval overlaps ``window``, ordered by start."""

    @abstractmethod
    async def insert(self, commitment: Commitment) -> Commitment:
        """Store a new commitment. Raises DuplicateIdError if the id exists."""

    @abstractmethod
    async def remove(self, commitment_id: UUID) -> Commitment:
        """Delete and return a commitment. Raises NotFoundError if absent."""

    @abstractmethod
    async def get(self, commitment_id: UUID) -> Optional[Commitment]:
        ...

    @abstractmethod
    async def set_status(self, commitment_id: UUID, status: BookingStatus) -> Commitment:
        """Change a booking's status. Raises NotFoundError if absent."""

    @abstractmethod
    async def blocks_for_owner(self, owner_ref: str, window: Interval) -> List[Commitment]:
        """Blocks created by ``owner_ref`` on any field, overlapping ``window``."""

    @abstractmethod
    def transaction(self, field_id: str):
        """Async context manager serialising check-then-write sequences on one field."""


class InMemoryAvailabilityStore(AvailabilityStore):
    """Process-local store guarded by one asyncio.Lock per field.

    Suitable for a single worker process (dev, demos, tests); anything
    multi-process needs the PostgreSQL store.
    """

    def __init__(self) -> None:
        self._items: Dict[UUID, Commitment] = {}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def commitments_for(self, field_id: str, window: Interval) -> List[Commitment]:
        found = [
            c for c in self._items.values()
            if c.field_id == field_id and overlaps(c.interval, window)
        ]
        return sorted(found, key=lambda c: (c.interval.start, str(c.id)))

    async def insert(self, commitment: Commitment) -> Commitment:
        if commitment.id in self._items:
            raise DuplicateIdError(
                f"Commitment {commitment.id} already exists",
                details={"commitmentId": str(commitment.id)},
            )
        self._items[commitment.id] = commitment
        return commitment

    async def remove(self, commitment_id: UUID) -> Commitment:
        removed = self._items.pop(commitment_id, None)
        if removed is None:
            raise NotFoundError(
                f"Commitment {commitment_id} not found",
                details={"commitmentId": str(commitment_id)},
            )
        return removed

    async def get(self, commitment_id: UUID) -> Optional[Commitment]:
        return self._items.get(commitment_id)

    async def set_status(self, commitment_id: UUID, status: BookingStatus) -> Commitment:
        current = self._items.get(commitment_id)
        if current is None or current.kind != CommitmentKind.BOOKING:
            raise NotFoundError(
                f"Booking {commitment_id} not found",
                details={"bookingId": str(commitment_id)},
            )
        updated = dataclasses.replace(current, status=status)
        self._items[commitment_id] = updated
        return updated

    async def blocks_for_owner(self, owner_ref: str, window: Interval) -> List[Commitment]:
        found = [
            c for c in self._items.values()
            if c.is_block and c.owner_ref == owner_ref and overlaps(c.interval, window)
        ]
        return sorted(found, key=lambda c: (c.interval.start, str(c.id)))

    @asynccontextmanager
    async def transaction(self, field_id: str) -> AsyncIterator["InMemoryAvailabilityStore"]:
        async with self._locks[field_id]:
            yield self

    @property
    def size(self) -> int:
        return len(self._items)
