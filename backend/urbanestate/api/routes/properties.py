"""Property Routes — public listing search and agent listing management.

Invariants:
    - Reads are public (drafts only for owner/admin); writes need agent or admin role
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.api.dependencies import get_optional_auth, require_agent
from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import PropertyType
from urbanestate.infrastructure.database import get_db
from urbanestate.schemas.property import (
    BlockCreate, BlockResponse, PropertyCreate, PropertyListResponse,
    PropertyResponse, PropertyUpdate,
)
from urbanestate.services import property_service

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    city: str | None = Query(None, max_length=100),
    type: PropertyType | None = None,
    min_rent: float | None = Query(None, ge=0),
    max_rent: float | None = Query(None, ge=0),
    beds: int | None = Query(None, ge=0),
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=property_service.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    items, total = await property_service.list_published(
        db, city=city, type=type.value if type else None,
        min_rent=min_rent, max_rent=max_rent, beds=beds, search=search,
        page=page, page_size=page_size,
    )
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in items],
        total=total, page=page, page_size=page_size,
    )


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID,
    auth: AuthContext | None = Depends(get_optional_auth),
    db: AsyncSession = Depends(get_db),
):
    return await property_service.get_property(db, property_id, auth)


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    body: PropertyCreate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await property_service.create_property(db, auth, body)


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    body: PropertyUpdate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await property_service.update_property(db, auth, property_id, body)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: UUID,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    await property_service.delete_property(db, auth, property_id)


# ─── Blocked date ranges ────────────────────────────────────────

@router.get("/{property_id}/blocks", response_model=list[BlockResponse])
async def list_blocks(
    property_id: UUID,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await property_service.list_blocks(db, auth, property_id)


@router.post(
    "/{property_id}/blocks", response_model=BlockResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_block(
    property_id: UUID,
    body: BlockCreate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await property_service.create_block(db, auth, property_id, body)


@router.delete(
    "/{property_id}/blocks/{block_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_block(
    property_id: UUID,
    block_id: UUID,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    await property_service.delete_block(db, auth, property_id, block_id)
