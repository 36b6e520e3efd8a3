"""In-process registry of checkout holds, one active hold per owner."""
from __future__ import annotations

import asyncio
import datetime as _dt
import logging
from typing import Dict, Optional
from uuid import UUID

from fieldbook.scheduling.types import Hold, HoldState

logger = logging.getLogger(__name__)


class HoldRegistry:
    """Holds keyed by id, with an owner index for the at-most-one-active rule.

    Terminal holds (confirmed, cancelled, lapsed) stay as tombstones for
    ``retention_seconds`` so late confirms see HOLD_EXPIRED rather than a
    missing hold; ``purge`` drops them lazily.

    State lives in this process only. The API must run as a single worker,
    whatever the store backend: a second worker would neither see these
    holds nor enforce one active hold per owner across both.
    """

    def __init__(self, retention_seconds: int = 3600) -> None:
        self._retention = _dt.timedelta(seconds=retention_seconds)
        self._holds: Dict[UUID, Hold] = {}
        self._by_owner: Dict[str, UUID] = {}
        self.lock = asyncio.Lock()

    def get(self, hold_id: UUID) -> Optional[Hold]:
        return self._holds.get(hold_id)

    def current_for(self, owner_ref: str) -> Optional[Hold]:
        """Latest hold issued to the owner, whatever its state."""
        hold_id = self._by_owner.get(owner_ref)
        return self._holds.get(hold_id) if hold_id else None

    def active_for(self, owner_ref: str, now: _dt.datetime) -> Optional[Hold]:
        hold = self.current_for(owner_ref)
        if hold is not None and hold.is_active_at(now):
            return hold
        return None

    def replace(self, hold: Hold, now: _dt.datetime) -> Optional[Hold]:
        """Register ``hold`` as the owner's hold, cancelling the previous active one.

        Call with ``lock`` held. Returns the hold that was cancelled, if any.
        A previous hold that is mid-confirmation is left to settle on its own;
        ``end_confirm`` cancels it if its booking write fails.
        """
        previous = self.active_for(hold.owner_ref, now)
        if previous is not None:
            self.close(previous, HoldState.CANCELLED, now)
        self._holds[hold.id] = hold
        self._by_owner[hold.owner_ref] = hold.id
        return previous

    def close(self, hold: Hold, state: HoldState, now: _dt.datetime) -> Hold:
        """Move an active hold to ``state``. Any other hold is returned unchanged."""
        if hold.state != HoldState.ACTIVE:
            return hold
        return self._settle(hold, state, now)

    def begin_confirm(self, hold: Hold) -> None:
        """Pin an active hold while its booking is written. Call with ``lock`` held."""
        hold.state = HoldState.CONFIRMING
        hold.cancel_requested = False

    def end_confirm(self, hold: Hold, now: _dt.datetime, booking_id: Optional[UUID] = None) -> Hold:
        """Settle a confirming hold. Call with ``lock`` held.

        With ``booking_id`` the hold is confirmed. Without it the write failed:
        a cancel or replacement that arrived meanwhile takes effect now,
        otherwise the hold goes back to active (or expired, past its TTL).
        """
        if hold.state != HoldState.CONFIRMING:
            return hold
        if booking_id is not None:
            hold.booking_id = booking_id
            return self._settle(hold, HoldState.CONFIRMED, now)
        if hold.cancel_requested or self._by_owner.get(hold.owner_ref) != hold.id:
            return self._settle(hold, HoldState.CANCELLED, now)
        if now >= hold.expires_at:
            return self._settle(hold, HoldState.EXPIRED, hold.expires_at)
        hold.state = HoldState.ACTIVE
        return hold

    @staticmethod
    def _settle(hold: Hold, state: HoldState, now: _dt.datetime) -> Hold:
        hold.state = state
        hold.closed_at = now
        return hold

    def purge(self, now: _dt.datetime) -> int:
        """Drop tombstones older than the retention window. Returns how many were dropped."""
        stale = []
        for hold_id, hold in self._holds.items():
            since = hold.terminal_since(now)
            if since is not None and now - since >= self._retention:
                stale.append(hold_id)
        for hold_id in stale:
            hold = self._holds.pop(hold_id)
            if self._by_owner.get(hold.owner_ref) == hold_id:
                del self._by_owner[hold.owner_ref]
        if stale:
            logger.debug("HoldRegistry: purged %d stale holds", len(stale))
        return len(stale)

    def count_active(self, now: _dt.datetime) -> int:
        return sum(1 for h in self._holds.values() if h.is_active_at(now))

    @property
    def size(self) -> int:
        return len(self._holds)
