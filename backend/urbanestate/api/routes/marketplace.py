"""Marketplace Routes — household item listings and public purchase requests.

Invariants:
    - Browsing and purchase requests are public; item writes need agent/admin role
    - A repeated purchase request returns 200 with duplicate=true instead of 201
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.api.dependencies import get_client_ip, require_agent
from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import ItemCategory, ItemCondition
from urbanestate.infrastructure.database import get_db
from urbanestate.schemas.marketplace import (
    ItemCreate, ItemResponse, ItemUpdate, PurchaseRequestCreate,
    PurchaseRequestCreateResponse,
)
from urbanestate.services import marketplace_service

router = APIRouter(prefix="/api/v1/marketplace", tags=["marketplace"])

DUPLICATE_MESSAGE = "Your request has already been submitted!"


@router.get("/items", response_model=list[ItemResponse])
async def list_items(
    category: ItemCategory | None = None,
    city: str | None = Query(None, max_length=100),
    max_price: float | None = Query(None, ge=0),
    condition: ItemCondition | None = None,
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    return await marketplace_service.list_available_items(
        db,
        category=category.value if category else None,
        city=city, max_price=max_price,
        condition=condition.value if condition else None,
        limit=limit,
    )


@router.get("/items/{item_id}", response_model=ItemResponse)
async def get_item(item_id: UUID, db: AsyncSession = Depends(get_db)):
    return await marketplace_service.get_item(db, item_id)


@router.post("/items", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    body: ItemCreate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await marketplace_service.create_item(db, auth, body)


@router.patch("/items/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: UUID,
    body: ItemUpdate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await marketplace_service.update_item(db, auth, item_id, body)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: UUID,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    await marketplace_service.delete_item(db, auth, item_id)


@router.post(
    "/items/{item_id}/requests", response_model=PurchaseRequestCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_purchase_request(
    item_id: UUID,
    body: PurchaseRequestCreate,
    client_ip: str = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
):
    request, duplicate = await marketplace_service.create_purchase_request(
        db, item_id, body, client_ip,
    )
    if duplicate:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=PurchaseRequestCreateResponse(
                request_id=request.id if request else None,
                duplicate=True, message=DUPLICATE_MESSAGE,
            ).model_dump(mode="json"),
        )
    return PurchaseRequestCreateResponse(
        request_id=request.id, message=marketplace_service.REQUEST_RECEIVED_MESSAGE,
    )
