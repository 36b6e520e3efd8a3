"""Reservation Holds API: checkout holds and their confirmation into bookings."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from fieldbook.api.dependencies import get_config, get_hold_service, get_owner_name, get_owner_ref
from fieldbook.api.params import body_interval
from fieldbook.api.schemas.reservation_holds import BookingConfirmedResponse, HoldCreate, HoldResponse
from fieldbook.config.reservations import ReservationConfig
from fieldbook.core.exceptions import NotFoundError
from fieldbook.scheduling.types import Hold
from fieldbook.services import ReservationHoldService

router = APIRouter(prefix="/reservation-holds", tags=["reservation-holds"])


def _to_response(service: ReservationHoldService, hold: Hold) -> HoldResponse:
    return HoldResponse.from_hold(
        hold,
        state=service.state_of(hold),
        remaining_seconds=service.remaining_seconds(hold),
    )


@router.post("", response_model=HoldResponse, response_model_by_alias=True, status_code=201)
async def request_hold(
    body: HoldCreate,
    owner_ref: str = Depends(get_owner_ref),
    owner_name: Optional[str] = Depends(get_owner_name),
    service: ReservationHoldService = Depends(get_hold_service),
    config: ReservationConfig = Depends(get_config),
):
    """Hold a slot for the caller; any previous active hold of theirs is released."""
    interval = body_interval(body.start_time, body.end_time, config.tz)
    hold = await service.request_hold(owner_ref, body.field_id, interval, owner_name=owner_name)
    return _to_response(service, hold)


@router.get("/current", response_model=HoldResponse, response_model_by_alias=True)
async def current_hold(
    owner_ref: str = Depends(get_owner_ref),
    service: ReservationHoldService = Depends(get_hold_service),
):
    """The caller's active hold, so a reloaded checkout can resume its countdown."""
    hold = service.active_hold_for(owner_ref)
    if hold is None:
        raise NotFoundError("No active hold", details={"ownerRef": owner_ref})
    return _to_response(service, hold)


@router.get("/{hold_id}", response_model=HoldResponse, response_model_by_alias=True)
async def get_hold(
    hold_id: UUID,
    owner_ref: str = Depends(get_owner_ref),
    service: ReservationHoldService = Depends(get_hold_service),
):
    return _to_response(service, service.get_hold(hold_id, owner_ref))


@router.post("/{hold_id}/confirm", response_model=BookingConfirmedResponse, response_model_by_alias=True, status_code=201)
async def confirm_hold(
    hold_id: UUID,
    owner_ref: str = Depends(get_owner_ref),
    service: ReservationHoldService = Depends(get_hold_service),
):
    booking = await service.confirm(hold_id, owner_ref)
    return BookingConfirmedResponse(
        booking_id=booking.id,
        hold_id=hold_id,
        field_id=booking.field_id,
        start_time=booking.interval.start,
        end_time=booking.interval.end,
        status=booking.status.value,
    )


@router.delete("/{hold_id}", status_code=204)
async def cancel_hold(
    hold_id: UUID,
    owner_ref: str = Depends(get_owner_ref),
    service: ReservationHoldService = Depends(get_hold_service),
):
    await service.cancel(hold_id, owner_ref)
    return Response(status_code=204)
