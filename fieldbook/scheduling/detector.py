"""Conflict detection: which stored commitments would a candidate interval violate."""
from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID

from fieldbook.scheduling.interval import Interval, overlaps
from fieldbook.scheduling.store import AvailabilityStore
from fieldbook.scheduling.types import BookingStatus, Commitment, ConflictEntry, ConflictReport


async def detect(
    store: AvailabilityStore,
    field_id: str,
    candidate: Interval,
    exclude_id: Optional[UUID] = None,
) -> ConflictReport:
    """Return the conflict report for ``candidate`` on ``field_id``.

    1. Load the field's commitments overlapping the candidate
    2. Drop ``exclude_id`` (re-validating an edit against itself)
    3. Drop cancelled bookings
    4. Partition the rest into confirmed bookings, pending bookings and blocks

    Run inside ``store.transaction(field_id)`` when the result gates a write.
    """
    commitments = await store.commitments_for(field_id, candidate)
    return classify(candidate, commitments, exclude_id=exclude_id)


def classify(
    candidate: Interval,
    commitments: Iterable[Commitment],
    *,
    exclude_id: Optional[UUID] = None,
) -> ConflictReport:
    """Pure part of ``detect``: partition overlapping commitments into a report."""
    report = ConflictReport()
    ordered = sorted(commitments, key=lambda c: (c.interval.start, str(c.id)))
    for c in ordered:
        if exclude_id is not None and c.id == exclude_id:
            continue
        if c.is_cancelled:
            continue
        if not overlaps(candidate, c.interval):
            continue
        entry = ConflictEntry.from_commitment(c)
        if c.is_block:
            report.blocks.append(entry)
        elif c.status == BookingStatus.CONFIRMED:
            report.confirmed_bookings.append(entry)
        else:
            report.pending_bookings.append(entry)
    return report
