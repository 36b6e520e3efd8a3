"""Fieldbook FastAPI application: entry point.

Start with:
    uvicorn fieldbook.api.main:app --reload --host 0.0.0.0 --port 8000

STORE_BACKEND=memory runs without PostgreSQL (single process, nothing persisted).

Run one worker with either backend. Checkout holds live in this process
(HoldRegistry), so a second worker would miss them and let an owner hold
two slots at once; PostgreSQL only makes bookings and blocks durable.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from fieldbook.api.errors import register_exception_handlers
from fieldbook.config.reservations import load_reservation_config
from fieldbook.core.logger import configure
from fieldbook.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    init_db,
)
from fieldbook.scheduling.holds import HoldRegistry
from fieldbook.scheduling.store import InMemoryAvailabilityStore
from fieldbook.scheduling.types import utc_now

logger = logging.getLogger(__name__)

_config = load_reservation_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure()

    app.state.config = _config
    app.state.clock = utc_now
    app.state.holds = HoldRegistry(retention_seconds=_config.hold_retention_seconds)

    if _config.store_backend == "memory":
        app.state.store = InMemoryAvailabilityStore()
        logger.info("API: using in-memory availability store")
    else:
        await ensure_database_exists()
        engine = build_engine()
        app.state.session_factory = build_session_factory(engine)
        await init_db()
        logger.info("API: PostgreSQL availability store ready")

    logger.info(
        "API: hold TTL %ds, local timezone %s",
        _config.hold_ttl_seconds, _config.local_tz,
    )

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    if _config.store_backend != "memory":
        await close_engine()
        logger.info("API: engine disposed")


app = FastAPI(
    title="Fieldbook Reservation API",
    version="1.0.0",
    description="Field rental availability: schedule blocks, checkout holds and bookings.",
    lifespan=lifespan,
)

# Rate limiter: limit is configurable via API_RATE_LIMIT env var (default 120/minute)
limiter = Limiter(key_func=get_remote_address, default_limits=[_config.rate_limit])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_config.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# ── Routers ───────────────────────────────────────────────────────
from fieldbook.api.routers import bookings, reservation_holds, schedule_blocks  # noqa: E402

app.include_router(schedule_blocks.router)
app.include_router(reservation_holds.router)
app.include_router(bookings.router)


@app.get("/health", tags=["health"])
async def health(request: Request):
    holds = getattr(request.app.state, "holds", None)
    return {
        "status": "ok",
        "store": _config.store_backend,
        "activeHolds": holds.count_active(utc_now()) if holds is not None else 0,
    }
