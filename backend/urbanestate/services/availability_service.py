"""Availability Service — visit slot management for agents and the public slot list.

Invariants:
    - Single creation rejects past dates, inverted times and blocked dates (400)
    - Duplicate (property, date, start) → ConflictError (409)
    - Bulk creation silently drops invalid entries and existing duplicates;
      nothing left to insert → 400
    - A slot with non-cancelled bookings cannot be deleted (409)
    - The public list shows only open slots from today onward
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.core.auth_context import AuthContext
from urbanestate.core.availability import BlockedRange, filter_valid_slots, slot_error
from urbanestate.core.domain_types import BookingStatus
from urbanestate.core.errors import ConflictError, ResourceNotFoundError, ValidationFailedError
from urbanestate.infrastructure.database import write_unique
from urbanestate.models.availability_slot import AvailabilitySlot
from urbanestate.models.booking import Booking
from urbanestate.models.property import Property, PropertyBlock
from urbanestate.schemas.availability import SlotCreate
from urbanestate.services.audit import log_audit
from urbanestate.services.property_service import get_owned_property, get_property

logger = logging.getLogger(__name__)


async def _blocked_ranges(db: AsyncSession, property_id: UUID) -> list[BlockedRange]:
    result = await db.execute(
        select(PropertyBlock.start_date, PropertyBlock.end_date)
        .where(PropertyBlock.property_id == property_id),
    )
    return [BlockedRange(start=r.start_date, end=r.end_date) for r in result.all()]


async def _owned_slot(db: AsyncSession, auth: AuthContext, slot_id: UUID) -> AvailabilitySlot:
    slot = await db.get(AvailabilitySlot, slot_id)
    if slot is None:
        raise ResourceNotFoundError("Slot", str(slot_id))
    prop = await db.get(Property, slot.property_id)
    auth.require_owner(prop.agent_id if prop else None, "slot")
    return slot


async def create_slot(
    db: AsyncSession, auth: AuthContext, property_id: UUID, data: SlotCreate,
    today: date | None = None,
) -> AvailabilitySlot:
    await get_owned_property(db, property_id, auth)
    error = slot_error(
        data.slot_date, data.start_time, data.end_time,
        await _blocked_ranges(db, property_id), today or date.today(),
    )
    if error:
        raise ValidationFailedError(error)

    slot = AvailabilitySlot(
        property_id=property_id,
        slot_date=data.slot_date,
        start_time=data.start_time,
        end_time=data.end_time,
        capacity=data.capacity,
        is_available=True,
    )
    db.add(slot)
    await write_unique(db, "A slot already exists for this date and time")

    await log_audit(db, auth.user_id, "slot_created", "availability_slots", slot.id, {
        "property_id": str(property_id),
        "slot_date": data.slot_date.isoformat(),
        "start_time": data.start_time.isoformat(),
        "end_time": data.end_time.isoformat(),
    })
    return slot


async def bulk_create_slots(
    db: AsyncSession, auth: AuthContext, property_id: UUID, slots: list[SlotCreate],
    today: date | None = None,
) -> int:
    """Insert every valid, not-yet-existing slot. Returns how many were created."""
    await get_owned_property(db, property_id, auth)
    valid = filter_valid_slots(
        slots, await _blocked_ranges(db, property_id), today or date.today(),
    )
    if not valid:
        raise ValidationFailedError("No valid slots to create")

    existing = await db.execute(
        select(AvailabilitySlot.slot_date, AvailabilitySlot.start_time)
        .where(AvailabilitySlot.property_id == property_id),
    )
    taken = {(r.slot_date, r.start_time) for r in existing.all()}

    created = 0
    for s in valid:
        key = (s.slot_date, s.start_time)
        if key in taken:
            continue
        taken.add(key)
        db.add(AvailabilitySlot(
            property_id=property_id,
            slot_date=s.slot_date,
            start_time=s.start_time,
            end_time=s.end_time,
            capacity=1,
            is_available=True,
        ))
        created += 1

    await write_unique(db, "Some slots were created concurrently. Please retry.")

    await log_audit(db, auth.user_id, "slots_bulk_created", "availability_slots", None, {
        "property_id": str(property_id),
        "count": created,
    })
    return created


async def delete_slot(db: AsyncSession, auth: AuthContext, slot_id: UUID) -> None:
    slot = await _owned_slot(db, auth, slot_id)
    active = await db.scalar(
        select(Booking.id).where(
            Booking.slot_id == slot_id,
            Booking.status != BookingStatus.CANCELLED.value,
        ).limit(1),
    )
    if active is not None:
        raise ConflictError(
            "Cannot delete a slot with active bookings. Cancel the booking first.",
        )
    await db.delete(slot)
    await db.commit()
    await log_audit(db, auth.user_id, "slot_deleted", "availability_slots", slot_id)


async def toggle_slot(
    db: AsyncSession, auth: AuthContext, slot_id: UUID, is_available: bool,
) -> AvailabilitySlot:
    slot = await _owned_slot(db, auth, slot_id)
    slot.is_available = is_available
    await db.commit()
    return slot


async def list_open_slots(
    db: AsyncSession, property_id: UUID, today: date | None = None,
) -> list[AvailabilitySlot]:
    await get_property(db, property_id)
    result = await db.execute(
        select(AvailabilitySlot).where(
            AvailabilitySlot.property_id == property_id,
            AvailabilitySlot.is_available.is_(True),
            AvailabilitySlot.slot_date >= (today or date.today()),
        ).order_by(AvailabilitySlot.slot_date, AvailabilitySlot.start_time),
    )
    return list(result.scalars().all())


async def list_property_slots(
    db: AsyncSession, auth: AuthContext, property_id: UUID,
) -> list[AvailabilitySlot]:
    """All slots of an owned property, open or not, for the agent calendar."""
    await get_owned_property(db, property_id, auth)
    result = await db.execute(
        select(AvailabilitySlot)
        .where(AvailabilitySlot.property_id == property_id)
        .order_by(AvailabilitySlot.slot_date, AvailabilitySlot.start_time),
    )
    return list(result.scalars().all())
