"""Commitment repository: the PostgreSQL-backed availability store."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional
from uuid import UUID

from sqlalchemy import select, text

from fieldbook.core.exceptions import DuplicateIdError, NotFoundError
from fieldbook.infra.database.models.commitment import CommitmentRecord
from fieldbook.infra.database.repositories.base import BaseRepository
from fieldbook.scheduling.interval import Interval
from fieldbook.scheduling.store import AvailabilityStore
from fieldbook.scheduling.types import (
    BlockReason,
    BookingStatus,
    Commitment,
    CommitmentKind,
)

# Transaction-scoped: released by COMMIT / ROLLBACK, never explicitly.
_FIELD_LOCK_SQL = text("SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))")


def to_domain(r: CommitmentRecord) -> Commitment:
    return Commitment(
        id=r.id,
        field_id=r.field_id,
        interval=Interval(r.start_time, r.end_time),
        kind=CommitmentKind(r.kind),
        owner_ref=r.owner_ref,
        status=BookingStatus(r.status) if r.status else None,
        reason=BlockReason(r.reason) if r.reason else None,
        note=r.note,
        owner_name=r.owner_name,
        created_at=r.created_at,
    )


def to_row(c: Commitment) -> dict:
    return {
        "id": c.id,
        "field_id": c.field_id,
        "start_time": c.interval.start,
        "end_time": c.interval.end,
        "kind": c.kind.value,
        "status": c.status.value if c.status else None,
        "reason": c.reason.value if c.reason else None,
        "note": c.note,
        "owner_ref": c.owner_ref,
        "owner_name": c.owner_name,
    }


class CommitmentRepository(BaseRepository[CommitmentRecord], AvailabilityStore):
    """AvailabilityStore over the ``commitments`` table.

    ``transaction(field_id)`` takes a per-field advisory lock and commits on
    exit, so a check-then-insert inside it is atomic against every other
    writer on the same field, across processes.
    """

    model = CommitmentRecord

    async def commitments_for(self, field_id: str, window: Interval) -> List[Commitment]:
        stmt = (
            select(CommitmentRecord)
            .where(CommitmentRecord.field_id == field_id)
            .where(CommitmentRecord.start_time < window.end)
            .where(CommitmentRecord.end_time > window.start)
            .order_by(CommitmentRecord.start_time, CommitmentRecord.id)
        )
        result = await self.session.execute(stmt)
        return [to_domain(r) for r in result.scalars().all()]

    async def insert(self, commitment: Commitment) -> Commitment:
        if await self.get_by_id(commitment.id) is not None:
            raise DuplicateIdError(
                f"Commitment {commitment.id} already exists",
                details={"commitmentId": str(commitment.id)},
            )
        record = await self.create(to_row(commitment))
        return to_domain(record)

    async def remove(self, commitment_id: UUID) -> Commitment:
        record = await self.get_by_id(commitment_id)
        if record is None:
            raise NotFoundError(
                f"Commitment {commitment_id} not found",
                details={"commitmentId": str(commitment_id)},
            )
        removed = to_domain(record)
        await self.delete(commitment_id)
        return removed

    async def get(self, commitment_id: UUID) -> Optional[Commitment]:
        record = await self.get_by_id(commitment_id)
        return to_domain(record) if record is not None else None

    async def set_status(self, commitment_id: UUID, status: BookingStatus) -> Commitment:
        record = await self.get_by_id(commitment_id)
        if record is None or record.kind != CommitmentKind.BOOKING.value:
            raise NotFoundError(
                f"Booking {commitment_id} not found",
                details={"bookingId": str(commitment_id)},
            )
        record = await self.update(commitment_id, {"status": status.value})
        return to_domain(record)

    async def blocks_for_owner(self, owner_ref: str, window: Interval) -> List[Commitment]:
        stmt = (
            select(CommitmentRecord)
            .where(CommitmentRecord.owner_ref == owner_ref)
            .where(CommitmentRecord.kind == CommitmentKind.BLOCK.value)
            .where(CommitmentRecord.start_time < window.end)
            .where(CommitmentRecord.end_time > window.start)
            .order_by(CommitmentRecord.start_time, CommitmentRecord.id)
        )
        result = await self.session.execute(stmt)
        return [to_domain(r) for r in result.scalars().all()]

    @asynccontextmanager
    async def transaction(self, field_id: str) -> AsyncIterator["CommitmentRepository"]:
        await self.session.execute(_FIELD_LOCK_SQL, {"key": f"field:{field_id}"})
        try:
            yield self
        except BaseException:
            await self.session.rollback()
            raise
        else:
            await self.session.commit()
