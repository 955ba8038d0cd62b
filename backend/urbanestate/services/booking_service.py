"""Booking Service — public visit requests and agent/admin status changes.

Invariants:
    - Create order: honeypot → rate limit → field validation → idempotency lookup →
      slot checks → insert (each step may stop the request)
    - A known idempotency key returns the existing booking instead of a new one
    - A unique-constraint race on insert → ConflictError "This slot was just booked"
    - When non-cancelled bookings reach capacity the slot is closed
    - Cancelling a booking reopens its slot when capacity frees up

Design Decisions:
    - Idempotency key derived from (property, slot, phone, client IP) unless the client sends one
    - Audit entries store the normalized phone, never the email
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import BookingStatus
from urbanestate.core.errors import (
    ConflictError, ErrorContext, ResourceNotFoundError, ValidationFailedError,
)
from urbanestate.core.idempotency import generate_idempotency_key
from urbanestate.core.rate_limit import enforce_rate_limit
from urbanestate.core.sanitize import sanitize_text
from urbanestate.core.validation import (
    normalize_phone, validate_email, validate_name, validate_phone_number,
)
from urbanestate.infrastructure.database import write_unique
from urbanestate.models.availability_slot import AvailabilitySlot
from urbanestate.models.booking import Booking
from urbanestate.models.property import Property
from urbanestate.schemas.booking import BookingCreate
from urbanestate.services.audit import log_audit

logger = logging.getLogger(__name__)

SUBMITTED_MESSAGE = "You will receive a confirmation once your visit is approved."
DUPLICATE_MESSAGE = "Your visit request has already been submitted!"


def check_contact_fields(name: str, phone: str, email: str | None) -> None:
    """Raise ValidationFailedError on the first invalid contact field."""
    for field, error in (
        ("customer_name", validate_name(name)),
        ("customer_phone", validate_phone_number(phone)),
        ("customer_email", validate_email(email)),
    ):
        if error:
            raise ValidationFailedError(error, field=field)


async def _active_count(db: AsyncSession, slot_id: UUID) -> int:
    count = await db.scalar(
        select(func.count()).select_from(Booking).where(
            Booking.slot_id == slot_id,
            Booking.status != BookingStatus.CANCELLED.value,
        ),
    )
    return count or 0


async def create_booking(
    db: AsyncSession, data: BookingCreate, client_ip: str,
) -> tuple[Booking, bool]:
    """Returns (booking, duplicate)."""
    if data.website:
        raise ValidationFailedError("Invalid submission")

    enforce_rate_limit(client_ip, "booking_create")
    check_contact_fields(data.customer_name, data.customer_phone, data.customer_email)

    phone = normalize_phone(data.customer_phone)
    key = data.idempotency_key or generate_idempotency_key(
        str(data.property_id), str(data.slot_id), phone, client_ip,
    )

    existing = await db.scalar(select(Booking).where(Booking.idempotency_key == key))
    if existing is not None:
        logger.info(
            "Duplicate booking submission",
            extra={"entity_id": str(existing.id), "client_id": client_ip},
        )
        return existing, True

    slot = await db.get(AvailabilitySlot, data.slot_id)
    if slot is None or not slot.is_available:
        raise ConflictError("This time slot is no longer available")
    if slot.property_id != data.property_id:
        raise ValidationFailedError("Invalid property/slot combination", field="slot_id")

    booking = Booking(
        property_id=data.property_id,
        slot_id=data.slot_id,
        customer_name=sanitize_text(data.customer_name.strip(), 100),
        customer_phone=phone,
        customer_nationality=sanitize_text(data.customer_nationality, 100) or None,
        customer_email=(data.customer_email or "").strip() or None,
        idempotency_key=key,
        status=BookingStatus.PENDING.value,
    )
    db.add(booking)
    await write_unique(
        db, "This slot was just booked. Please select another time.",
        flush_only=True,
        context=ErrorContext(client_id=client_ip, entity_id=str(data.slot_id)),
    )

    if await _active_count(db, slot.id) >= slot.capacity:
        slot.is_available = False
    await db.commit()

    await log_audit(db, None, "booking_created", "bookings", booking.id, {
        "customer_phone": phone,
        "ip_address": client_ip,
        "property_id": str(data.property_id),
        "slot_id": str(data.slot_id),
    })
    return booking, False


async def _set_status(db: AsyncSession, booking: Booking, status: str) -> None:
    booking.status = status
    await db.flush()
    slot = await db.get(AvailabilitySlot, booking.slot_id)
    if slot is not None:
        slot.is_available = await _active_count(db, slot.id) < slot.capacity
    await db.commit()


async def list_bookings(db: AsyncSession, auth: AuthContext) -> list[Booking]:
    """Bookings on the caller's properties; admins see all."""
    query = select(Booking).order_by(Booking.created_at.desc())
    if not auth.is_admin:
        query = query.join(Property, Property.id == Booking.property_id).where(
            Property.agent_id == auth.user_id,
        )
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_booking_status(
    db: AsyncSession, auth: AuthContext, booking_id: UUID, status: str,
) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise ResourceNotFoundError("Booking", str(booking_id))
    prop = await db.get(Property, booking.property_id)
    auth.require_owner(prop.agent_id if prop else None, "booking")

    await _set_status(db, booking, status)
    await log_audit(db, auth.user_id, f"booking_{status}", "bookings", booking_id, {
        "property_id": str(booking.property_id),
    })
    return booking


async def admin_override_status(
    db: AsyncSession, auth: AuthContext, booking_id: UUID, status: str,
) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise ResourceNotFoundError("Booking", str(booking_id))
    await _set_status(db, booking, status)
    await log_audit(db, auth.user_id, f"admin_booking_{status}", "bookings", booking_id)
    return booking
