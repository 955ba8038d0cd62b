"""Availability Routes — visit slots per property and per slot.

Invariants:
    - GET /properties/{id}/slots is public and lists open future slots only
    - Every other endpoint needs agent/admin role and ownership
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.api.dependencies import require_agent
from urbanestate.core.auth_context import AuthContext
from urbanestate.infrastructure.database import get_db
from urbanestate.schemas.availability import (
    BulkCreateResponse, SlotBulkCreate, SlotCreate, SlotResponse, SlotToggle,
)
from urbanestate.services import availability_service

router = APIRouter(prefix="/api/v1", tags=["availability"])


@router.get("/properties/{property_id}/slots", response_model=list[SlotResponse])
async def list_open_slots(property_id: UUID, db: AsyncSession = Depends(get_db)):
    return await availability_service.list_open_slots(db, property_id)


@router.get("/properties/{property_id}/slots/all", response_model=list[SlotResponse])
async def list_property_slots(
    property_id: UUID,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await availability_service.list_property_slots(db, auth, property_id)


@router.post(
    "/properties/{property_id}/slots", response_model=SlotResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_slot(
    property_id: UUID,
    body: SlotCreate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await availability_service.create_slot(db, auth, property_id, body)


@router.post(
    "/properties/{property_id}/slots/bulk", response_model=BulkCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def bulk_create_slots(
    property_id: UUID,
    body: SlotBulkCreate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    count = await availability_service.bulk_create_slots(db, auth, property_id, body.slots)
    return BulkCreateResponse(count=count)


@router.patch("/slots/{slot_id}", response_model=SlotResponse)
async def toggle_slot(
    slot_id: UUID,
    body: SlotToggle,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await availability_service.toggle_slot(db, auth, slot_id, body.is_available)


@router.delete("/slots/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_slot(
    slot_id: UUID,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    await availability_service.delete_slot(db, auth, slot_id)
