"""Pydantic schemas for the Reservation Holds and Bookings APIs."""
from __future__ import annotations

import datetime as _dt
from typing import Optional
from uuid import UUID

from pydantic import Field

from fieldbook.api.schemas.schedule_blocks import CamelModel
from fieldbook.scheduling.types import Commitment, Hold, HoldState


class HoldCreate(CamelModel):
    field_id: str = Field(..., min_length=1, max_length=64)
    start_time: _dt.datetime
    end_time: _dt.datetime


class HoldResponse(CamelModel):
    hold_id: UUID
    field_id: str
    start_time: _dt.datetime
    end_time: _dt.datetime
    state: HoldState
    expires_at: _dt.datetime
    remaining_seconds: int
    booking_id: Optional[UUID] = None

    @classmethod
    def from_hold(cls, hold: Hold, *, state: HoldState, remaining_seconds: int) -> HoldResponse:
        return cls(
            hold_id=hold.id,
            field_id=hold.field_id,
            start_time=hold.interval.start,
            end_time=hold.interval.end,
            state=state,
            expires_at=hold.expires_at,
            remaining_seconds=remaining_seconds,
            booking_id=hold.booking_id,
        )


class CommitmentResponse(CamelModel):
    id: UUID
    field_id: str
    kind: str
    status: Optional[str] = None
    reason: Optional[str] = None
    start_time: _dt.datetime
    end_time: _dt.datetime
    owner_ref: str
    owner_name: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def from_commitment(cls, c: Commitment) -> CommitmentResponse:
        return cls(
            id=c.id,
            field_id=c.field_id,
            kind=c.kind.value,
            status=c.status.value if c.status else None,
            reason=c.reason.value if c.reason else None,
            start_time=c.interval.start,
            end_time=c.interval.end,
            owner_ref=c.owner_ref,
            owner_name=c.owner_name,
            note=c.note,
        )


class BookingConfirmedResponse(CamelModel):
    booking_id: UUID
    hold_id: UUID
    field_id: str
    start_time: _dt.datetime
    end_time: _dt.datetime
    status: str


class BookingCancelledResponse(CamelModel):
    booking_id: UUID
    status: str
