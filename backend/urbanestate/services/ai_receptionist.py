"""AI Receptionist — conversational search over live listings and marketplace items.

Invariants:
    - The user message is sanitized to 500 chars before it reaches the model
    - The model only sees up to 8 recent published properties and 8 available items
    - Matching cards (max 4 each) are fetched only when the model asks for them
    - Any failure after input validation returns a degraded reply with intent "error"

Design Decisions:
    - Model keys are camelCase, response keys are snake_case; normalized here
    - Filters are applied leniently: unknown or mistyped filter values are ignored
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.config import get_settings
from urbanestate.core.domain_types import ItemStatus, ListingStatus
from urbanestate.core.sanitize import sanitize_input
from urbanestate.core.validation import as_finite_number
from urbanestate.models.household_item import HouseholdItem
from urbanestate.models.property import Property
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_prompts import (
    RECEPTIONIST_SYSTEM_PROMPT, build_receptionist_prompt,
)

logger = logging.getLogger(__name__)

INVENTORY_LIMIT = 8
CARD_LIMIT = 4
MESSAGE_MAX_LENGTH = 500

DEGRADED_REPLY = {
    "message": "I'm having a brief moment. Could you try again?",
    "intent": "error",
    "filters": {},
    "listings": [],
    "marketplace_items": [],
    "cart_action": None,
    "capture_lead_info": None,
}


def _number(value: object) -> float | None:
    number = as_finite_number(value)
    return number if number is not None and number > 0 else None


def property_card(p: Property) -> dict:
    cover = next((ph.url for ph in p.photos if ph.is_cover), None)
    if cover is None and p.photos:
        cover = p.photos[0].url
    return {
        "id": str(p.id), "title": p.title, "city": p.city, "area": p.area,
        "rent": p.rent, "currency": p.currency, "beds": p.beds,
        "baths": p.baths, "type": p.type, "furnished": p.furnished,
        "amenities": list(p.amenities or []), "agent_id": str(p.agent_id),
        "cover_photo": cover,
    }


def _item_card(i: HouseholdItem) -> dict:
    return {
        "id": str(i.id), "title": i.title, "city": i.city, "area": i.area,
        "price": i.price, "currency": i.currency, "category": i.category,
        "condition": i.condition, "seller_id": str(i.seller_id),
    }


async def _inventory(db: AsyncSession) -> dict[str, list[dict]]:
    props = await db.execute(
        select(Property)
        .where(Property.status == ListingStatus.PUBLISHED.value)
        .order_by(Property.created_at.desc()).limit(INVENTORY_LIMIT),
    )
    items = await db.execute(
        select(HouseholdItem)
        .where(HouseholdItem.status == ItemStatus.AVAILABLE.value)
        .order_by(HouseholdItem.created_at.desc()).limit(INVENTORY_LIMIT),
    )
    return {
        "properties": [
            {
                "id": str(p.id), "title": p.title, "city": p.city, "area": p.area,
                "price": p.rent, "currency": p.currency, "beds": p.beds,
                "baths": p.baths, "type": p.type,
            }
            for p in props.scalars().all()
        ],
        "marketplace_items": [
            {
                "id": str(i.id), "title": i.title, "city": i.city, "area": i.area,
                "price": i.price, "currency": i.currency,
                "category": i.category, "condition": i.condition,
            }
            for i in items.scalars().all()
        ],
    }


async def _matching_listings(db: AsyncSession, filters: dict) -> list[dict]:
    query = select(Property).where(Property.status == ListingStatus.PUBLISHED.value)
    if isinstance(filters.get("city"), str) and filters["city"]:
        query = query.where(Property.city.ilike(f"%{filters['city']}%"))
    if min_rent := _number(filters.get("minRent")):
        query = query.where(Property.rent >= min_rent)
    if max_rent := _number(filters.get("maxRent")):
        query = query.where(Property.rent <= max_rent)
    if beds := _number(filters.get("beds")):
        query = query.where(Property.beds >= beds)
    if filters.get("type") in ("apartment", "house", "flat"):
        query = query.where(Property.type == filters["type"])
    result = await db.execute(
        query.order_by(Property.created_at.desc()).limit(CARD_LIMIT),
    )
    return [property_card(p) for p in result.scalars().all()]


async def _matching_items(db: AsyncSession, filters: dict) -> list[dict]:
    query = select(HouseholdItem).where(
        HouseholdItem.status == ItemStatus.AVAILABLE.value,
    )
    if isinstance(filters.get("city"), str) and filters["city"]:
        query = query.where(HouseholdItem.city.ilike(f"%{filters['city']}%"))
    if max_price := _number(filters.get("maxPrice")):
        query = query.where(HouseholdItem.price <= max_price)
    if isinstance(filters.get("category"), str) and filters["category"]:
        query = query.where(HouseholdItem.category == filters["category"])
    if isinstance(filters.get("condition"), str) and filters["condition"]:
        query = query.where(HouseholdItem.condition == filters["condition"])
    result = await db.execute(
        query.order_by(HouseholdItem.created_at.desc()).limit(CARD_LIMIT),
    )
    return [_item_card(i) for i in result.scalars().all()]


async def respond(
    db: AsyncSession,
    ai_client: AIClient,
    message: str,
    history: list[dict],
    context: dict | None = None,
) -> dict:
    try:
        prompt = build_receptionist_prompt(
            sanitize_input(message, MESSAGE_MAX_LENGTH),
            history,
            await _inventory(db),
            context,
        )
        reply = await ai_client.generate_json(
            model=get_settings().ai_model_instant,
            system=RECEPTIONIST_SYSTEM_PROMPT,
            prompt=prompt,
            max_tokens=500,
            temperature=0.6,
        )
        filters = reply.get("filters") if isinstance(reply.get("filters"), dict) else {}
        listings = (
            await _matching_listings(db, filters)
            if reply.get("shouldShowListings") else []
        )
        items = (
            await _matching_items(db, filters)
            if reply.get("shouldShowMarketplace") else []
        )
    except Exception as e:
        logger.error(f"Receptionist failed: {e}", exc_info=True)
        return dict(DEGRADED_REPLY)

    return {
        "message": str(reply.get("message") or ""),
        "intent": str(reply.get("intent") or "other"),
        "filters": filters,
        "listings": listings,
        "marketplace_items": items,
        "cart_action": reply.get("cartAction") or None,
        "capture_lead_info": reply.get("captureLeadInfo") or None,
    }
