"""Bookings API: per-field calendar and booking cancellation."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from fieldbook.api.dependencies import get_booking_service, get_clock, get_config, get_owner_ref
from fieldbook.api.params import query_window
from fieldbook.api.schemas.reservation_holds import BookingCancelledResponse, CommitmentResponse
from fieldbook.config.reservations import ReservationConfig
from fieldbook.scheduling.types import Clock
from fieldbook.services import BookingService

router = APIRouter(tags=["bookings"])


@router.get("/fields/{field_id}/commitments", response_model=List[CommitmentResponse], response_model_by_alias=True)
async def list_commitments(
    field_id: str,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    service: BookingService = Depends(get_booking_service),
    config: ReservationConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
):
    """Bookings and blocks of a field inside the window, ordered by start."""
    window = query_window(startDate, endDate, config.tz, config.default_window_days, clock())
    items = await service.list_commitments(field_id, window)
    items = sorted(items, key=lambda c: (c.interval.start, str(c.id)))
    return [CommitmentResponse.from_commitment(c) for c in items]


@router.post("/bookings/{booking_id}/cancel", response_model=BookingCancelledResponse, response_model_by_alias=True)
async def cancel_booking(
    booking_id: UUID,
    owner_ref: str = Depends(get_owner_ref),
    service: BookingService = Depends(get_booking_service),
):
    booking = await service.cancel_booking(booking_id)
    return BookingCancelledResponse(booking_id=booking.id, status=booking.status.value)
