"""Schedule Blocks API: manager-created closures of a field's time."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from fieldbook.api.dependencies import (
    get_block_service,
    get_clock,
    get_config,
    get_optional_owner_ref,
    get_owner_ref,
)
from fieldbook.api.params import body_interval, parse_month, query_window
from fieldbook.api.schemas.schedule_blocks import (
    BlockedDatesResponse,
    ScheduleBlockCreate,
    ScheduleBlockEnvelope,
    ScheduleBlockResponse,
)
from fieldbook.config.reservations import ReservationConfig
from fieldbook.core.exceptions import ValidationError
from fieldbook.scheduling.types import Clock
from fieldbook.services import ScheduleBlockService

router = APIRouter(prefix="/schedule-blocks", tags=["schedule-blocks"])


@router.get("", response_model=List[ScheduleBlockResponse], response_model_by_alias=True)
async def list_blocks(
    fieldId: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    owner_ref: Optional[str] = Depends(get_optional_owner_ref),
    service: ScheduleBlockService = Depends(get_block_service),
    config: ReservationConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
):
    """Blocks overlapping the window on one field, or the caller's blocks on every field."""
    if not fieldId and not owner_ref:
        raise ValidationError("fieldId is required when no X-Owner-Ref header is sent")
    window = query_window(startDate, endDate, config.tz, config.default_window_days, clock())
    if fieldId:
        blocks = await service.list_blocks(window, field_id=fieldId)
    else:
        blocks = await service.list_blocks(window, manager_ref=owner_ref)
    return [ScheduleBlockResponse.from_commitment(b) for b in blocks]


@router.get("/dates", response_model=BlockedDatesResponse, response_model_by_alias=True)
async def blocked_dates(
    fieldId: str,
    month: Optional[str] = None,
    service: ScheduleBlockService = Depends(get_block_service),
    config: ReservationConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
):
    """Local calendar days of a month that have at least one block (calendar highlighting)."""
    window = parse_month(month, config.tz, clock())
    days = await service.dates_with_blocks(fieldId, window)
    label = window.start.astimezone(config.tz).strftime("%Y-%m")
    return BlockedDatesResponse(field_id=fieldId, month=label, dates=sorted(days))


@router.get("/{block_id}", response_model=ScheduleBlockEnvelope, response_model_by_alias=True)
async def get_block(
    block_id: UUID,
    service: ScheduleBlockService = Depends(get_block_service),
):
    block = await service.get_block(block_id)
    return ScheduleBlockEnvelope(
        message="Schedule block found",
        block=ScheduleBlockResponse.from_commitment(block),
    )


@router.post("", response_model=ScheduleBlockEnvelope, response_model_by_alias=True, status_code=201)
async def create_block(
    body: ScheduleBlockCreate,
    owner_ref: str = Depends(get_owner_ref),
    service: ScheduleBlockService = Depends(get_block_service),
    config: ReservationConfig = Depends(get_config),
):
    interval = body_interval(body.start_time, body.end_time, config.tz)
    block = await service.create_block(body.field_id, interval, body.reason, body.note, owner_ref)
    return ScheduleBlockEnvelope(
        message="Schedule block created",
        block=ScheduleBlockResponse.from_commitment(block),
    )


@router.delete("/{block_id}", status_code=204)
async def delete_block(
    block_id: UUID,
    owner_ref: str = Depends(get_owner_ref),
    service: ScheduleBlockService = Depends(get_block_service),
):
    await service.delete_block(block_id, owner_ref)
    return Response(status_code=204)
