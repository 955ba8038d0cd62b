"""AvailabilitySlot ORM — bookable visit windows for a property.

Invariants:
    - Unique per (property_id, slot_date, start_time)
    - is_available flips to False when active bookings reach capacity
"""

import uuid
from datetime import date, time, datetime, timezone

from sqlalchemy import (
    Integer, Boolean, Date, Time, DateTime, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from urbanestate.db.base import Base


class AvailabilitySlot(Base):
    """One visit window on one day."""
    __tablename__ = "availability_slots"
    __table_args__ = (
        UniqueConstraint(
            "property_id", "slot_date", "start_time",
            name="uq_availability_slot_start",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    slot_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
