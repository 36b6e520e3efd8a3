"""Service layer: schedule blocks, reservation holds and bookings."""
from fieldbook.services.booking_service import BookingService
from fieldbook.services.reservation_hold_service import ReservationHoldService
from fieldbook.services.schedule_block_service import ScheduleBlockService

__all__ = [
    "ScheduleBlockService",
    "ReservationHoldService",
    "BookingService",
]
