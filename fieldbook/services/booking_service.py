"""BookingService: calendar listing and cancellation of stored bookings."""
from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from fieldbook.core.exceptions import NotFoundError
from fieldbook.scheduling.interval import Interval
from fieldbook.scheduling.store import AvailabilityStore
from fieldbook.scheduling.types import BookingStatus, Commitment

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, store: AvailabilityStore) -> None:
        self._store = store

    async def list_commitments(self, field_id: str, window: Interval) -> List[Commitment]:
        """Bookings (any status) and blocks of a field overlapping ``window``."""
        return await self._store.commitments_for(field_id, window)

    async def cancel_booking(self, booking_id: UUID) -> Commitment:
        """Cancel a booking, freeing its slot. Cancelling twice returns the cancelled booking."""
        booking = await self._store.get(booking_id)
        if booking is None or not booking.is_booking:
            raise NotFoundError(
                f"Booking {booking_id} not found",
                details={"bookingId": str(booking_id)},
            )
        if booking.status == BookingStatus.CANCELLED:
            return booking
        async with self._store.transaction(booking.field_id):
            updated = await self._store.set_status(booking_id, BookingStatus.CANCELLED)
        logger.info("BookingService: cancelled booking %s on %s", booking_id, booking.field_id)
        return updated
