"""Pydantic schemas for the Schedule Blocks API."""
from __future__ import annotations

import datetime as _dt
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fieldbook.scheduling.types import Commitment


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case is accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScheduleBlockCreate(CamelModel):
    field_id: str = Field(..., min_length=1, max_length=64)
    start_time: _dt.datetime = Field(..., description="ISO 8601; naive values use the service's local timezone")
    end_time: _dt.datetime
    reason: str = Field(..., description="maintenance | personal | event")
    note: Optional[str] = Field(None, max_length=500)


class ScheduleBlockResponse(CamelModel):
    id: UUID
    field_id: str
    start_time: _dt.datetime
    end_time: _dt.datetime
    reason: str
    note: Optional[str] = None
    owner_ref: str
    created_at: Optional[_dt.datetime] = None

    @classmethod
    def from_commitment(cls, c: Commitment) -> ScheduleBlockResponse:
        return cls(
            id=c.id,
            field_id=c.field_id,
            start_time=c.interval.start,
            end_time=c.interval.end,
            reason=c.reason.value if c.reason else "",
            note=c.note,
            owner_ref=c.owner_ref,
            created_at=c.created_at,
        )


class ScheduleBlockEnvelope(CamelModel):
    message: str
    block: ScheduleBlockResponse


class BlockedDatesResponse(CamelModel):
    field_id: str
    month: str
    dates: List[_dt.date]
