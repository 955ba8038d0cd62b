"""Marketplace Service — household item CRUD, purchase requests and admin decisions.

Invariants:
    - Only agents and admins list items; the creator becomes seller_id
    - Public listing shows available items only
    - Purchase requests: honeypot → field validation → rate limit → item available →
      idempotency lookup → insert
    - The handling agent resolves as request.agent_id, then item.agent_id, then seller_id
    - Approval records a warm lead (score 60) for the handling agent
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import (
    ItemStatus, LeadStatus, LeadTemperature, RequestStatus,
)
from urbanestate.core.errors import ConflictError, ResourceNotFoundError, ValidationFailedError
from urbanestate.core.idempotency import generate_idempotency_key
from urbanestate.core.rate_limit import enforce_rate_limit
from urbanestate.core.sanitize import sanitize_input, sanitize_text
from urbanestate.core.validation import normalize_phone
from urbanestate.infrastructure.database import try_unique_write
from urbanestate.models.household_item import HouseholdItem
from urbanestate.models.lead import Lead
from urbanestate.models.marketplace_request import MarketplaceRequest
from urbanestate.schemas.marketplace import ItemCreate, ItemUpdate, PurchaseRequestCreate
from urbanestate.services.audit import log_audit
from urbanestate.services.booking_service import check_contact_fields

logger = logging.getLogger(__name__)

APPROVED_LEAD_SCORE = 60
REQUEST_RECEIVED_MESSAGE = (
    "You will receive a confirmation email once your request is approved."
)


# ─── Items ──────────────────────────────────────────────────────

async def list_available_items(
    db: AsyncSession,
    *,
    category: str | None = None,
    city: str | None = None,
    max_price: float | None = None,
    condition: str | None = None,
    limit: int = 50,
) -> list[HouseholdItem]:
    query = select(HouseholdItem).where(
        HouseholdItem.status == ItemStatus.AVAILABLE.value,
    )
    if category:
        query = query.where(HouseholdItem.category == category)
    if city:
        query = query.where(HouseholdItem.city.ilike(f"%{city}%"))
    if max_price is not None:
        query = query.where(HouseholdItem.price <= max_price)
    if condition:
        query = query.where(HouseholdItem.condition == condition)
    result = await db.execute(
        query.order_by(HouseholdItem.created_at.desc()).limit(min(limit, 100)),
    )
    return list(result.scalars().all())


async def get_item(db: AsyncSession, item_id: UUID) -> HouseholdItem:
    item = await db.get(HouseholdItem, item_id)
    if item is None or item.status == ItemStatus.REMOVED.value:
        raise ResourceNotFoundError("Item", str(item_id))
    return item


async def _owned_item(db: AsyncSession, auth: AuthContext, item_id: UUID) -> HouseholdItem:
    item = await db.get(HouseholdItem, item_id)
    if item is None:
        raise ResourceNotFoundError("Item", str(item_id))
    auth.require_owner(item.seller_id, "item")
    return item


async def create_item(db: AsyncSession, auth: AuthContext, data: ItemCreate) -> HouseholdItem:
    item = HouseholdItem(
        seller_id=auth.user_id,
        agent_id=data.agent_id or auth.user_id,
        title=sanitize_text(data.title, 200),
        category=data.category.value,
        price=data.price,
        currency=data.currency.upper(),
        condition=data.condition.value,
        description=sanitize_input(data.description, 5000) or None,
        city=sanitize_text(data.city, 100),
        area=sanitize_text(data.area, 100) or None,
        delivery_available=data.delivery_available,
        is_negotiable=data.is_negotiable,
        status=ItemStatus.AVAILABLE.value,
    )
    db.add(item)
    await db.commit()
    await log_audit(db, auth.user_id, "item_created", "household_items", item.id)
    return item


async def update_item(
    db: AsyncSession, auth: AuthContext, item_id: UUID, data: ItemUpdate,
) -> HouseholdItem:
    item = await _owned_item(db, auth, item_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if hasattr(value, "value"):
            value = value.value
        if field == "description":
            value = sanitize_input(value, 5000) or None
        elif field in ("title", "city", "area") and value is not None:
            value = sanitize_text(value, 200)
        setattr(item, field, value)
    await db.commit()
    await log_audit(db, auth.user_id, "item_updated", "household_items", item.id, {
        "fields": sorted(data.model_fields_set),
    })
    return item


async def delete_item(db: AsyncSession, auth: AuthContext, item_id: UUID) -> None:
    item = await _owned_item(db, auth, item_id)
    await db.delete(item)
    await db.commit()
    await log_audit(db, auth.user_id, "item_deleted", "household_items", item_id)


# ─── Purchase requests ──────────────────────────────────────────

async def create_purchase_request(
    db: AsyncSession, item_id: UUID, data: PurchaseRequestCreate, client_ip: str,
) -> tuple[MarketplaceRequest | None, bool]:
    """Returns (request, duplicate). request is None when a concurrent duplicate won."""
    if data.website:
        raise ValidationFailedError("Invalid submission")
    if not data.customer_email or not data.customer_email.strip():
        raise ValidationFailedError("Email is required", field="customer_email")
    check_contact_fields(data.customer_name, data.customer_phone, data.customer_email)

    enforce_rate_limit(client_ip, "marketplace_request_create")

    item = await db.get(HouseholdItem, item_id)
    if item is None or item.status != ItemStatus.AVAILABLE.value:
        raise ConflictError("This item is no longer available")

    agent_id = item.agent_id or item.seller_id
    phone = normalize_phone(data.customer_phone)
    key = data.idempotency_key or generate_idempotency_key(
        str(item.id), str(agent_id), phone, client_ip,
    )

    existing = await db.scalar(
        select(MarketplaceRequest).where(MarketplaceRequest.idempotency_key == key),
    )
    if existing is not None:
        return existing, True

    request = MarketplaceRequest(
        item_id=item.id,
        seller_id=item.seller_id,
        agent_id=agent_id,
        customer_name=sanitize_text(data.customer_name.strip(), 100),
        customer_phone=phone,
        customer_email=data.customer_email.strip(),
        customer_note=sanitize_text(data.customer_note, 1000) or None,
        status=RequestStatus.PENDING.value,
        idempotency_key=key,
    )
    db.add(request)
    if not await try_unique_write(db):
        return None, True

    await log_audit(db, None, "marketplace_request_created", "marketplace_requests", request.id, {
        "item_id": str(item.id),
        "seller_id": str(item.seller_id),
        "agent_id": str(agent_id),
        "customer_phone": phone,
        "ip_address": client_ip,
    })
    return request, False


async def list_requests(
    db: AsyncSession, status: str | None = None,
) -> list[MarketplaceRequest]:
    query = select(MarketplaceRequest).order_by(MarketplaceRequest.created_at.desc())
    if status:
        query = query.where(MarketplaceRequest.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


async def decide_request(
    db: AsyncSession, auth: AuthContext, request_id: UUID,
    status: RequestStatus, note: str | None = None,
) -> MarketplaceRequest:
    request = await db.get(MarketplaceRequest, request_id)
    if request is None:
        raise ResourceNotFoundError("Request", str(request_id))

    item = await db.get(HouseholdItem, request.item_id)
    agent_id = request.agent_id or (item.agent_id if item else None) or request.seller_id
    now = datetime.now(timezone.utc)

    request.status = status.value
    request.admin_actor_id = auth.user_id
    request.admin_decision_note = sanitize_text(note, 1000) or None
    if status == RequestStatus.APPROVED:
        request.approved_at = now
        db.add(Lead(
            property_id=None,
            agent_id=agent_id,
            contact_name=request.customer_name,
            contact_phone=request.customer_phone,
            contact_email=request.customer_email,
            message=f"Approved marketplace request for {item.title if item else 'item'}.",
            source="marketplace_approved",
            temperature=LeadTemperature.WARM.value,
            score=APPROVED_LEAD_SCORE,
            status=LeadStatus.NEW.value,
            ai_reasons=[],
        ))
    else:
        request.rejected_at = now
    await db.commit()

    await log_audit(
        db, auth.user_id, f"marketplace_request_{status.value}",
        "marketplace_requests", request_id,
        {
            "item_id": str(request.item_id),
            "seller_id": str(request.seller_id),
            "agent_id": str(agent_id),
        },
    )
    return request
