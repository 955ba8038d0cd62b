"""Property ORM — rental listings with photos and agent-blocked date ranges.

Invariants:
    - Always owned by an agent profile (agent_id FK)
    - status is draft | published; only published listings are public
    - Photos and blocks are deleted with their property

Design Decisions:
    - amenities stored as a JSON list of display names ("Pool", "Gym", ...)
    - photos loaded with selectin: every listing response includes them
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    String, Text, Integer, Float, Boolean, Date, DateTime, JSON, ForeignKey,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from urbanestate.db.base import Base


class Property(Base):
    """Rental listing."""
    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    agent_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    rent: Mapped[float] = mapped_column(Float, nullable=False)
    deposit: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="AED")
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    area: Mapped[str | None] = mapped_column(String(100), nullable=True)
    street_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    beds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    baths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    size_sqft: Mapped[int | None] = mapped_column(Integer, nullable=True)
    furnished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    amenities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    photos: Mapped[list["PropertyPhoto"]] = relationship(
        "PropertyPhoto", back_populates="property",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="PropertyPhoto.position",
    )

class PropertyPhoto(Base):
    """Photo URL attached to a property (upload handled elsewhere)."""
    __tablename__ = "property_photos"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_cover: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    property: Mapped["Property"] = relationship(
        "Property", back_populates="photos",
    )


class PropertyBlock(Base):
    """Inclusive date range during which no visit slots may be created."""
    __tablename__ = "property_blocks"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
