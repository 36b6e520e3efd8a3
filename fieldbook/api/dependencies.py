"""FastAPI dependency providers."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Depends, Header, Request

from fieldbook.config.reservations import ReservationConfig
from fieldbook.core.exceptions import UnauthorizedError
from fieldbook.infra.database.repositories import CommitmentRepository
from fieldbook.scheduling.store import AvailabilityStore
from fieldbook.scheduling.types import Clock, utc_now
from fieldbook.services import BookingService, ReservationHoldService, ScheduleBlockService


async def get_store(request: Request) -> AsyncGenerator[AvailabilityStore, None]:
    """Yield the availability store.

    With the memory backend the app-level store is shared; otherwise a
    request-scoped repository over a transactional AsyncSession
    (commit on success, rollback on error).
    """
    store = getattr(request.app.state, "store", None)
    if store is not None:
        yield store
        return
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield CommitmentRepository(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_config(request: Request) -> ReservationConfig:
    return getattr(request.app.state, "config", None) or ReservationConfig()


def get_clock(request: Request) -> Clock:
    return getattr(request.app.state, "clock", None) or utc_now


def get_owner_ref(x_owner_ref: Optional[str] = Header(None, alias="X-Owner-Ref")) -> str:
    """Caller identity, forwarded by the upstream auth gateway."""
    owner = (x_owner_ref or "").strip()
    if not owner:
        raise UnauthorizedError("Missing X-Owner-Ref header")
    return owner


def get_optional_owner_ref(x_owner_ref: Optional[str] = Header(None, alias="X-Owner-Ref")) -> Optional[str]:
    return (x_owner_ref or "").strip() or None


def get_owner_name(x_owner_name: Optional[str] = Header(None, alias="X-Owner-Name")) -> Optional[str]:
    return (x_owner_name or "").strip() or None


def get_block_service(
    store: AvailabilityStore = Depends(get_store),
    config: ReservationConfig = Depends(get_config),
) -> ScheduleBlockService:
    return ScheduleBlockService(store, config)


def get_hold_service(
    request: Request,
    store: AvailabilityStore = Depends(get_store),
    config: ReservationConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
) -> ReservationHoldService:
    return ReservationHoldService(store, request.app.state.holds, config, clock=clock)


def get_booking_service(store: AvailabilityStore = Depends(get_store)) -> BookingService:
    return BookingService(store)
