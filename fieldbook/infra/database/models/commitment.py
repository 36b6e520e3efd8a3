"""CommitmentRecord ORM: bookings and schedule blocks on a field."""

import datetime as _dt
import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fieldbook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class CommitmentRecord(Base, TimestampMixin):
    """
    A durable claim on a field's time.
    kind: "booking" | "block"
    status (booking only): "pending" | "confirmed" | "cancelled"
    reason (block only): "maintenance" | "personal" | "event"
    """

    __tablename__ = "commitments"
    __table_args__ = (
        Index("ix_commitments_field_window", "field_id", "start_time", "end_time"),
        Index("ix_commitments_owner_kind", "owner_ref", "kind"),
        CheckConstraint("start_time < end_time", name="ck_commitments_interval"),
        CheckConstraint(
            "(kind = 'booking' AND status IS NOT NULL AND reason IS NULL)"
            " OR (kind = 'block' AND status IS NULL AND reason IS NOT NULL)",
            name="ck_commitments_kind_fields",
        ),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    field_id: Mapped[str] = mapped_column(String(64), nullable=False)
    start_time: Mapped[_dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[_dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    owner_ref: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
