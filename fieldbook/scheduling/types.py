"""Core data structures: commitments, holds and conflict reports."""
from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID, uuid4

from fieldbook.scheduling.interval import Interval

Clock = Callable[[], _dt.datetime]
"""Returns the current timezone-aware instant. Injected so TTL logic is testable."""


def utc_now() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


class CommitmentKind(str, Enum):
    BOOKING = "booking"
    BLOCK = "block"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class BlockReason(str, Enum):
    """Why a manager closed a time range."""
    MAINTENANCE = "maintenance"
    PERSONAL = "personal"
    EVENT = "event"


class HoldState(str, Enum):
    ACTIVE = "active"
    CONFIRMING = "confirming"
    CONFIRMED = "confirmed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


TERMINAL_HOLD_STATES = frozenset({HoldState.CONFIRMED, HoldState.EXPIRED, HoldState.CANCELLED})


@dataclass(frozen=True)
class Commitment:
    """A durable claim on a field's time: a booking or a schedule block.

    Bookings carry ``status``; blocks carry ``reason`` and have no status
    (a block exists or it does not).
    """

    id: UUID
    field_id: str
    interval: Interval
    kind: CommitmentKind
    owner_ref: str
    status: Optional[BookingStatus] = None
    reason: Optional[BlockReason] = None
    note: Optional[str] = None
    owner_name: Optional[str] = None
    created_at: Optional[_dt.datetime] = None

    @classmethod
    def booking(
        cls,
        field_id: str,
        interval: Interval,
        owner_ref: str,
        *,
        status: BookingStatus = BookingStatus.CONFIRMED,
        owner_name: Optional[str] = None,
        note: Optional[str] = None,
        id: Optional[UUID] = None,
        created_at: Optional[_dt.datetime] = None,
    ) -> Commitment:
        return cls(
            id=id or uuid4(),
            field_id=field_id,
            interval=interval,
            kind=CommitmentKind.BOOKING,
            owner_ref=owner_ref,
            status=status,
            note=note,
            owner_name=owner_name,
            created_at=created_at,
        )

    @classmethod
    def block(
        cls,
        field_id: str,
        interval: Interval,
        reason: BlockReason,
        owner_ref: str,
        *,
        note: Optional[str] = None,
        id: Optional[UUID] = None,
        created_at: Optional[_dt.datetime] = None,
    ) -> Commitment:
        return cls(
            id=id or uuid4(),
            field_id=field_id,
            interval=interval,
            kind=CommitmentKind.BLOCK,
            owner_ref=owner_ref,
            reason=reason,
            note=note,
            created_at=created_at,
        )

    @property
    def is_block(self) -> bool:
        return self.kind == CommitmentKind.BLOCK

    @property
    def is_booking(self) -> bool:
        return self.kind == CommitmentKind.BOOKING

    @property
    def is_cancelled(self) -> bool:
        return self.is_booking and self.status == BookingStatus.CANCELLED


@dataclass(frozen=True)
class ConflictEntry:
    commitment_id: UUID
    owner_ref: str
    interval: Interval
    kind: CommitmentKind
    status: Optional[BookingStatus] = None
    reason: Optional[BlockReason] = None
    owner_name: Optional[str] = None

    @classmethod
    def from_commitment(cls, c: Commitment) -> ConflictEntry:
        return cls(
            commitment_id=c.id,
            owner_ref=c.owner_ref,
            interval=c.interval,
            kind=c.kind,
            status=c.status,
            reason=c.reason,
            owner_name=c.owner_name,
        )

    def to_booking_payload(self) -> Dict[str, Any]:
        return {
            "bookingId": str(self.commitment_id),
            "customerName": self.owner_name or self.owner_ref,
            "ownerRef": self.owner_ref,
            "startTime": self.interval.start.isoformat(),
            "endTime": self.interval.end.isoformat(),
            "status": self.status.value if self.status else None,
        }

    def to_block_payload(self) -> Dict[str, Any]:
        return {
            "blockId": str(self.commitment_id),
            "ownerRef": self.owner_ref,
            "startTime": self.interval.start.isoformat(),
            "endTime": self.interval.end.isoformat(),
            "reason": self.reason.value if self.reason else None,
        }


@dataclass
class ConflictReport:
    """Commitments overlapping a candidate interval, partitioned by kind.

    Callers tell "cancel these bookings first" (bookings) apart from
    "another block already covers this range" (blocks).
    """

    confirmed_bookings: List[ConflictEntry] = field(default_factory=list)
    pending_bookings: List[ConflictEntry] = field(default_factory=list)
    blocks: List[ConflictEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.confirmed_bookings or self.pending_bookings or self.blocks)

    @property
    def bookings(self) -> List[ConflictEntry]:
        return self.confirmed_bookings + self.pending_bookings

    def __len__(self) -> int:
        return len(self.confirmed_bookings) + len(self.pending_bookings) + len(self.blocks)

    def without_pending(self) -> ConflictReport:
        """Only confirmed bookings and blocks: what a hold or confirmation must respect."""
        return ConflictReport(
            confirmed_bookings=list(self.confirmed_bookings),
            blocks=list(self.blocks),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "conflicts": [e.to_booking_payload() for e in self.bookings],
            "blockConflicts": [e.to_block_payload() for e in self.blocks],
        }


@dataclass
class Hold:
    """Ephemeral checkout claim on a field slot. Never written to the store.

    ``state`` records explicit transitions; expiry is derived from the
    clock on every read via ``state_at``. A hold in CONFIRMING has a
    booking write in flight and can be neither cancelled nor replaced
    until that write settles.
    """

    id: UUID
    field_id: str
    interval: Interval
    owner_ref: str
    created_at: _dt.datetime
    expires_at: _dt.datetime
    owner_name: Optional[str] = None
    state: HoldState = HoldState.ACTIVE
    booking_id: Optional[UUID] = None
    closed_at: Optional[_dt.datetime] = None
    cancel_requested: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_HOLD_STATES

    def state_at(self, now: _dt.datetime) -> HoldState:
        if self.state == HoldState.ACTIVE and now >= self.expires_at:
            return HoldState.EXPIRED
        return self.state

    def is_active_at(self, now: _dt.datetime) -> bool:
        return self.state_at(now) == HoldState.ACTIVE

    def remaining_seconds(self, now: _dt.datetime) -> int:
        """Whole seconds left, rounded up; 0 from ``expires_at`` on or once closed."""
        if self.is_terminal:
            return 0
        left = (self.expires_at - now).total_seconds()
        return max(0, math.ceil(left))

    def terminal_since(self, now: _dt.datetime) -> Optional[_dt.datetime]:
        """When the hold stopped being live, or None while it still is."""
        if self.is_terminal:
            return self.closed_at or now
        if self.state == HoldState.ACTIVE and now >= self.expires_at:
            return self.expires_at
        return None
