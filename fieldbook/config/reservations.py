"""
fieldbook.config.reservations – hold TTL, store backend and calendar settings.

Env vars: HOLD_TTL_SECONDS, HOLD_RETENTION_SECONDS, STORE_BACKEND, LOCAL_TZ,
DEFAULT_WINDOW_DAYS, API_RATE_LIMIT, CORS_ORIGINS.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

STORE_BACKENDS = ("postgres", "memory")


@dataclass(frozen=True)
class ReservationConfig:
    """
    Reservation engine settings.

    Validated on construction; use load_reservation_config() to build from env.
    """

    hold_ttl_seconds: int = 15 * 60
    """How long a checkout hold stays valid."""

    hold_retention_seconds: int = 60 * 60
    """How long terminal holds are kept so late confirms report HOLD_EXPIRED."""

    store_backend: str = "postgres"
    """"postgres" (durable, default) or "memory" (nothing persisted, dev/demo).

    Holds are in-process with either backend, so the API runs as one worker.
    """

    local_tz: str = "America/Lima"
    """Timezone for naive timestamps and calendar-day projections."""

    default_window_days: int = 30
    """Listing window when the caller gives no startDate/endDate."""

    rate_limit: str = "120/minute"
    """slowapi default limit applied to every route."""

    cors_origins: Tuple[str, ...] = field(
        default_factory=lambda: ("http://localhost:3000", "http://127.0.0.1:3000")
    )

    def __post_init__(self) -> None:
        if not isinstance(self.hold_ttl_seconds, int) or self.hold_ttl_seconds < 1:
            raise ValueError(f"hold_ttl_seconds must be an integer >= 1, got {self.hold_ttl_seconds!r}")
        if not isinstance(self.hold_retention_seconds, int) or self.hold_retention_seconds < 0:
            raise ValueError(
                f"hold_retention_seconds must be a non-negative integer, got {self.hold_retention_seconds!r}"
            )
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(f"store_backend must be one of {STORE_BACKENDS}, got {self.store_backend!r}")
        if not isinstance(self.default_window_days, int) or self.default_window_days < 1:
            raise ValueError(f"default_window_days must be an integer >= 1, got {self.default_window_days!r}")
        try:
            ZoneInfo(self.local_tz)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"local_tz is not a known timezone: {self.local_tz!r}") from exc

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.local_tz)

    @classmethod
    def from_env(cls) -> ReservationConfig:
        origins = os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
        return cls(
            hold_ttl_seconds=int(os.environ.get("HOLD_TTL_SECONDS", 900)),
            hold_retention_seconds=int(os.environ.get("HOLD_RETENTION_SECONDS", 3600)),
            store_backend=os.environ.get("STORE_BACKEND", "postgres").strip().lower(),
            local_tz=os.environ.get("LOCAL_TZ", "America/Lima"),
            default_window_days=int(os.environ.get("DEFAULT_WINDOW_DAYS", 30)),
            rate_limit=os.environ.get("API_RATE_LIMIT", "120/minute"),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )


def load_reservation_config() -> ReservationConfig:
    """Load and validate reservation settings from the environment."""
    return ReservationConfig.from_env()
