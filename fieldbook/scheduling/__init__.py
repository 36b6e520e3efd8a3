"""
fieldbook.scheduling – interval arithmetic, commitment model, conflict detection, stores and holds.

Public API
──────────
  Interval, overlaps, contains, validate, days_touched, month_window
  Commitment, CommitmentKind, BookingStatus, BlockReason
  Hold, HoldState, ConflictEntry, ConflictReport, Clock, utc_now
  detect, classify
  AvailabilityStore, InMemoryAvailabilityStore, HoldRegistry
"""
from fieldbook.scheduling.detector import classify, detect
from fieldbook.scheduling.holds import HoldRegistry
from fieldbook.scheduling.interval import (
    Interval,
    contains,
    days_touched,
    month_window,
    overlaps,
    validate,
)
from fieldbook.scheduling.store import AvailabilityStore, InMemoryAvailabilityStore
from fieldbook.scheduling.types import (
    BlockReason,
    BookingStatus,
    Clock,
    Commitment,
    CommitmentKind,
    ConflictEntry,
    ConflictReport,
    Hold,
    HoldState,
    utc_now,
)

__all__ = [
    "Interval",
    "overlaps",
    "contains",
    "validate",
    "days_touched",
    "month_window",
    "Commitment",
    "CommitmentKind",
    "BookingStatus",
    "BlockReason",
    "Hold",
    "HoldState",
    "ConflictEntry",
    "ConflictReport",
    "Clock",
    "utc_now",
    "detect",
    "classify",
    "AvailabilityStore",
    "InMemoryAvailabilityStore",
    "HoldRegistry",
]
