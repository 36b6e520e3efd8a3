"""ReservationHoldService: time-boxed checkout holds and their promotion to confirmed bookings."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Optional
from uuid import UUID, uuid4

from fieldbook.config.reservations import ReservationConfig
from fieldbook.core.exceptions import ConflictError, HoldExpiredError, NotFoundError
from fieldbook.scheduling.detector import detect
from fieldbook.scheduling.holds import HoldRegistry
from fieldbook.scheduling.interval import Interval, validate
from fieldbook.scheduling.store import AvailabilityStore
from fieldbook.scheduling.types import (
    BookingStatus,
    Clock,
    Commitment,
    Hold,
    HoldState,
    utc_now,
)

logger = logging.getLogger(__name__)


class ReservationHoldService:
    """Per-owner hold state machine: NoHold → Active → Confirming → {Confirmed, Expired, Cancelled}.

    Holds live in the HoldRegistry, never in the store, so two owners may
    hold the same slot at once. ``confirm`` re-checks the durable store and
    only one of the racing confirmations wins.
    """

    def __init__(
        self,
        store: AvailabilityStore,
        registry: HoldRegistry,
        config: Optional[ReservationConfig] = None,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._registry = registry
        self._config = config or ReservationConfig()
        self._clock = clock

    @property
    def ttl(self) -> _dt.timedelta:
        return _dt.timedelta(seconds=self._config.hold_ttl_seconds)

    async def request_hold(
        self,
        owner_ref: str,
        field_id: str,
        interval: Interval,
        owner_name: Optional[str] = None,
    ) -> Hold:
        """Grant a hold, replacing the owner's current active hold.

        Fails with ConflictError when confirmed bookings or blocks overlap.
        Pending bookings and other owners' holds do not block a hold.
        """
        validate(interval)
        report = (await detect(self._store, field_id, interval)).without_pending()
        if not report.is_empty:
            logger.info(
                "ReservationHoldService: hold refused for %s on %s: %d conflicts",
                owner_ref, field_id, len(report),
            )
            raise ConflictError("The requested time slot is no longer available", report=report)

        async with self._registry.lock:
            now = self._clock()
            self._registry.purge(now)
            hold = Hold(
                id=uuid4(),
                field_id=field_id,
                interval=interval,
                owner_ref=owner_ref,
                owner_name=owner_name,
                created_at=now,
                expires_at=now + self.ttl,
            )
            replaced = self._registry.replace(hold, now)

        if replaced is not None:
            logger.info("ReservationHoldService: hold %s replaced by %s for %s", replaced.id, hold.id, owner_ref)
        logger.info(
            "ReservationHoldService: hold %s granted to %s on %s until %s",
            hold.id, owner_ref, field_id, hold.expires_at.isoformat(),
        )
        return hold

    def remaining_seconds(self, hold: Hold) -> int:
        return hold.remaining_seconds(self._clock())

    def state_of(self, hold: Hold) -> HoldState:
        return hold.state_at(self._clock())

    def get_hold(self, hold_id: UUID, owner_ref: str) -> Hold:
        hold = self._registry.get(hold_id)
        if hold is None or hold.owner_ref != owner_ref:
            raise NotFoundError(f"Hold {hold_id} not found", details={"holdId": str(hold_id)})
        return hold

    def active_hold_for(self, owner_ref: str) -> Optional[Hold]:
        return self._registry.active_for(owner_ref, self._clock())

    async def confirm(self, hold_id: UUID, owner_ref: str) -> Commitment:
        """Promote an active hold to a confirmed booking.

        Raises HoldExpiredError once the TTL has elapsed or the hold was
        closed, and ConflictError if a confirmed booking or block landed on
        the slot meanwhile. On conflict the hold stays active.

        The hold is CONFIRMING while the booking is written. A cancel or a
        replacement arriving in that window only takes effect if the write
        fails, so a hold never ends cancelled with its booking stored.
        """
        async with self._registry.lock:
            hold = self.get_hold(hold_id, owner_ref)
            now = self._clock()
            state = hold.state_at(now)
            if state != HoldState.ACTIVE:
                if state == HoldState.EXPIRED:
                    self._registry.close(hold, HoldState.EXPIRED, hold.expires_at)
                logger.info("ReservationHoldService: confirm refused for hold %s (%s)", hold_id, state.value)
                raise self._expired(hold, state)
            self._registry.begin_confirm(hold)

        booking: Optional[Commitment] = None
        try:
            async with self._store.transaction(hold.field_id):
                # The field lock may have been contended past expires_at
                if self._clock() >= hold.expires_at:
                    raise self._expired(hold, HoldState.EXPIRED)
                report = (await detect(self._store, hold.field_id, hold.interval)).without_pending()
                if not report.is_empty:
                    logger.info(
                        "ReservationHoldService: confirm of hold %s lost to %d conflicts",
                        hold_id, len(report),
                    )
                    raise ConflictError("The time slot was booked by someone else", report=report)
                inserted = await self._store.insert(
                    Commitment.booking(
                        hold.field_id,
                        hold.interval,
                        hold.owner_ref,
                        status=BookingStatus.CONFIRMED,
                        owner_name=hold.owner_name,
                    )
                )
            # Only a committed transaction counts as a booking
            booking = inserted
        finally:
            async with self._registry.lock:
                self._registry.end_confirm(
                    hold, self._clock(), booking.id if booking is not None else None
                )

        logger.info("ReservationHoldService: hold %s confirmed as booking %s", hold_id, booking.id)
        return booking

    async def cancel(self, hold_id: UUID, owner_ref: str) -> None:
        """Cancel a hold. Unknown ids, other owners' holds and closed holds are no-ops.

        A hold being confirmed is only flagged; it ends cancelled if the
        confirmation fails and confirmed otherwise.
        """
        async with self._registry.lock:
            hold = self._registry.get(hold_id)
            if hold is None or hold.owner_ref != owner_ref:
                return
            if hold.state == HoldState.CONFIRMING:
                hold.cancel_requested = True
                logger.info("ReservationHoldService: cancel of hold %s deferred, confirmation in flight", hold_id)
                return
            now = self._clock()
            if not hold.is_active_at(now):
                return
            self._registry.close(hold, HoldState.CANCELLED, now)
        logger.info("ReservationHoldService: hold %s cancelled by %s", hold_id, owner_ref)

    @staticmethod
    def _expired(hold: Hold, state: HoldState) -> HoldExpiredError:
        return HoldExpiredError(
            "Hold has expired or is no longer active",
            details={"holdId": str(hold.id), "state": state.value,
                     "expiresAt": hold.expires_at.isoformat()},
        )
