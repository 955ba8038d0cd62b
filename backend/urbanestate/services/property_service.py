"""Property Service — listing CRUD, public search and blocked date ranges.

Invariants:
    - Only agents and admins create listings; the creator becomes agent_id
    - Drafts are visible only to their owner and admins (404 for everyone else)
    - Updates and deletes require ownership or admin role
    - Free-text fields are sanitized before they are stored
    - Every write is audit logged after it commits

Design Decisions:
    - Public search uses ILIKE on title/description/area; good enough at listing scale
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import ListingStatus
from urbanestate.core.errors import ResourceNotFoundError
from urbanestate.core.sanitize import sanitize_input, sanitize_text
from urbanestate.models.property import Property, PropertyBlock, PropertyPhoto
from urbanestate.schemas.property import BlockCreate, PhotoIn, PropertyCreate, PropertyUpdate
from urbanestate.services.audit import log_audit

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50
_TEXT_LIMITS = {
    "title": 200, "city": 100, "area": 100, "street_address": 255,
}


def _clean(field: str, value):
    if value is None or not isinstance(value, str):
        return value
    if field == "description":
        return sanitize_input(value, 10_000)
    if field in _TEXT_LIMITS:
        return sanitize_text(value, _TEXT_LIMITS[field])
    return value


def _photos(photos: list[PhotoIn]) -> list[PropertyPhoto]:
    return [
        PropertyPhoto(url=p.url, position=p.position, is_cover=p.is_cover)
        for p in photos
    ]


# ─── Public reads ───────────────────────────────────────────────

async def list_published(
    db: AsyncSession,
    *,
    city: str | None = None,
    type: str | None = None,
    min_rent: float | None = None,
    max_rent: float | None = None,
    beds: int | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Property], int]:
    conditions = [Property.status == ListingStatus.PUBLISHED.value]
    if city:
        conditions.append(Property.city.ilike(f"%{city}%"))
    if type:
        conditions.append(Property.type == type)
    if min_rent is not None:
        conditions.append(Property.rent >= min_rent)
    if max_rent is not None:
        conditions.append(Property.rent <= max_rent)
    if beds is not None:
        conditions.append(Property.beds >= beds)
    if search:
        term = f"%{sanitize_text(search, 100)}%"
        conditions.append(or_(
            Property.title.ilike(term),
            Property.description.ilike(term),
            Property.area.ilike(term),
        ))

    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
    page = max(page, 1)
    total = await db.scalar(
        select(func.count()).select_from(Property).where(*conditions),
    )
    result = await db.execute(
        select(Property).where(*conditions)
        .order_by(Property.created_at.desc())
        .limit(page_size).offset((page - 1) * page_size),
    )
    return list(result.scalars().all()), total or 0


async def get_property(
    db: AsyncSession, property_id: UUID, auth: AuthContext | None = None,
) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise ResourceNotFoundError("Property", str(property_id))
    if prop.status != ListingStatus.PUBLISHED.value and (
        auth is None or not auth.can_manage(prop.agent_id)
    ):
        raise ResourceNotFoundError("Property", str(property_id))
    return prop


async def get_owned_property(
    db: AsyncSession, property_id: UUID, auth: AuthContext,
) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise ResourceNotFoundError("Property", str(property_id))
    auth.require_owner(prop.agent_id, "property")
    return prop


# ─── Writes ─────────────────────────────────────────────────────

async def create_property(
    db: AsyncSession, auth: AuthContext, data: PropertyCreate,
) -> Property:
    fields = data.model_dump(exclude={"photos"})
    prop = Property(
        agent_id=auth.user_id,
        **{k: _clean(k, v) for k, v in fields.items()},
    )
    prop.type = data.type.value
    prop.status = data.status.value
    prop.photos = _photos(data.photos)
    db.add(prop)
    await db.commit()
    await db.refresh(prop)
    await log_audit(db, auth.user_id, "property_created", "properties", prop.id, {
        "status": prop.status,
    })
    logger.info("Property created", extra={"entity_id": str(prop.id)})
    return prop


async def update_property(
    db: AsyncSession, auth: AuthContext, property_id: UUID, data: PropertyUpdate,
) -> Property:
    prop = await get_owned_property(db, property_id, auth)
    changes = data.model_dump(exclude_unset=True, exclude={"photos"})
    for field, value in changes.items():
        if hasattr(value, "value"):
            value = value.value
        setattr(prop, field, _clean(field, value))
    if data.photos is not None:
        prop.photos = _photos(data.photos)
    await db.commit()
    await db.refresh(prop)
    await log_audit(db, auth.user_id, "property_updated", "properties", prop.id, {
        "fields": sorted(data.model_fields_set),
    })
    return prop


async def delete_property(
    db: AsyncSession, auth: AuthContext, property_id: UUID,
    action: str = "property_deleted",
) -> None:
    prop = await get_owned_property(db, property_id, auth)
    await db.delete(prop)
    await db.commit()
    await log_audit(db, auth.user_id, action, "properties", property_id)


# ─── Blocked date ranges ────────────────────────────────────────

async def list_blocks(
    db: AsyncSession, auth: AuthContext, property_id: UUID,
) -> list[PropertyBlock]:
    await get_owned_property(db, property_id, auth)
    result = await db.execute(
        select(PropertyBlock)
        .where(PropertyBlock.property_id == property_id)
        .order_by(PropertyBlock.start_date),
    )
    return list(result.scalars().all())


async def create_block(
    db: AsyncSession, auth: AuthContext, property_id: UUID, data: BlockCreate,
) -> PropertyBlock:
    await get_owned_property(db, property_id, auth)
    block = PropertyBlock(
        property_id=property_id,
        start_date=data.start_date,
        end_date=data.end_date,
        note=sanitize_text(data.note) or None,
    )
    db.add(block)
    await db.commit()
    await log_audit(db, auth.user_id, "block_created", "property_blocks", block.id, {
        "property_id": str(property_id),
        "start_date": data.start_date.isoformat(),
        "end_date": data.end_date.isoformat(),
    })
    return block


async def delete_block(
    db: AsyncSession, auth: AuthContext, property_id: UUID, block_id: UUID,
) -> None:
    await get_owned_property(db, property_id, auth)
    result = await db.execute(
        delete(PropertyBlock).where(
            PropertyBlock.id == block_id,
            PropertyBlock.property_id == property_id,
        ),
    )
    if result.rowcount == 0:
        raise ResourceNotFoundError("Block", str(block_id))
    await db.commit()
    await log_audit(db, auth.user_id, "block_deleted", "property_blocks", block_id)
