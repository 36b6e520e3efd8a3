"""ScheduleBlockService: admit or reject manager schedule blocks against a field's commitments."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import List, Optional, Set
from uuid import UUID

from fieldbook.config.reservations import ReservationConfig
from fieldbook.core.exceptions import ConflictError, InvalidReasonError, NotFoundError
from fieldbook.scheduling.detector import detect
from fieldbook.scheduling.interval import Interval, days_touched, validate
from fieldbook.scheduling.store import AvailabilityStore
from fieldbook.scheduling.types import BlockReason, Commitment

logger = logging.getLogger(__name__)

_VALID_REASONS = ", ".join(r.value for r in BlockReason)


def parse_reason(reason: object) -> BlockReason:
    if isinstance(reason, BlockReason):
        return reason
    try:
        return BlockReason(str(reason).strip().lower())
    except ValueError:
        raise InvalidReasonError(
            f"Reason must be one of: {_VALID_REASONS}",
            details={"reason": reason},
        ) from None


class ScheduleBlockService:
    def __init__(self, store: AvailabilityStore, config: Optional[ReservationConfig] = None) -> None:
        self._store = store
        self._config = config or ReservationConfig()

    async def create_block(
        self,
        field_id: str,
        interval: Interval,
        reason: object,
        note: Optional[str],
        manager_ref: str,
    ) -> Commitment:
        """Create a block, or raise ConflictError carrying every overlapping commitment.

        1. Validate interval and reason
        2. Under the field's transaction, run the conflict detector
        3. Any confirmed booking, pending booking or block in range → reject, write nothing
        4. Otherwise insert the block

        Bookings are never cancelled to make room; the caller must cancel them and retry.
        """
        validate(interval)
        block_reason = parse_reason(reason)

        async with self._store.transaction(field_id):
            report = await detect(self._store, field_id, interval)
            if not report.is_empty:
                logger.info(
                    "ScheduleBlockService: rejected block on %s [%s, %s): %d confirmed, %d pending, %d blocks",
                    field_id, interval.start.isoformat(), interval.end.isoformat(),
                    len(report.confirmed_bookings), len(report.pending_bookings), len(report.blocks),
                )
                if report.bookings:
                    message = "Existing bookings overlap this time range; cancel them before blocking it"
                else:
                    message = "Another schedule block already overlaps this time range"
                raise ConflictError(message, report=report)

            block = await self._store.insert(
                Commitment.block(field_id, interval, block_reason, manager_ref, note=note)
            )

        logger.info(
            "ScheduleBlockService: created block %s on %s (%s) by %s",
            block.id, field_id, block_reason.value, manager_ref,
        )
        return block

    async def delete_block(self, block_id: UUID, manager_ref: str) -> Commitment:
        """Remove one of the manager's blocks.

        NotFoundError when the block is missing or belongs to another
        manager; callers may treat that as already done.
        """
        block = await self.get_block(block_id)
        if block.owner_ref != manager_ref:
            logger.info(
                "ScheduleBlockService: %s may not delete block %s of %s",
                manager_ref, block_id, block.owner_ref,
            )
            raise NotFoundError(
                f"Schedule block {block_id} not found",
                details={"blockId": str(block_id)},
            )
        async with self._store.transaction(block.field_id):
            removed = await self._store.remove(block_id)
        logger.info("ScheduleBlockService: %s deleted block %s on %s", manager_ref, block_id, removed.field_id)
        return removed

    async def get_block(self, block_id: UUID) -> Commitment:
        c = await self._store.get(block_id)
        if c is None or not c.is_block:
            raise NotFoundError(
                f"Schedule block {block_id} not found",
                details={"blockId": str(block_id)},
            )
        return c

    async def list_blocks(
        self,
        window: Interval,
        *,
        field_id: Optional[str] = None,
        manager_ref: Optional[str] = None,
    ) -> List[Commitment]:
        """Blocks overlapping ``window`` on one field, or every block the manager created."""
        if field_id is not None:
            items = await self._store.commitments_for(field_id, window)
            return [c for c in items if c.is_block]
        if manager_ref is not None:
            return await self._store.blocks_for_owner(manager_ref, window)
        return []

    async def is_time_slot_blocked(self, field_id: str, interval: Interval) -> bool:
        validate(interval)
        return bool(await self.list_blocks(interval, field_id=field_id))

    async def dates_with_blocks(self, field_id: str, month_window: Interval) -> Set[_dt.date]:
        """Calendar days inside ``month_window`` touched by at least one block.

        Days are computed in the configured local timezone; only the part of
        each block that falls inside the window is projected.
        """
        tz = self._config.tz
        days: Set[_dt.date] = set()
        for block in await self.list_blocks(month_window, field_id=field_id):
            clipped = block.interval.clip(month_window)
            if clipped is not None:
                days.update(days_touched(clipped, tz))
        return days
