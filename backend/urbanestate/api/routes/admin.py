"""Admin Routes — user roles, booking overrides, listing removal, audit log, marketplace review.

Invariants:
    - Every endpoint requires the admin role (403 otherwise)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.api.dependencies import require_admin
from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import RequestStatus
from urbanestate.infrastructure.database import get_db
from urbanestate.schemas.admin import AuditLogResponse, BookingOverride, RoleUpdate
from urbanestate.schemas.booking import BookingResponse
from urbanestate.schemas.marketplace import PurchaseRequestResponse, RequestDecision
from urbanestate.services import (
    admin_service, audit, booking_service, marketplace_service, property_service,
)

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.patch("/users/{user_id}/role")
async def change_user_role(
    user_id: UUID,
    body: RoleUpdate,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    profile = await admin_service.change_user_role(db, auth, user_id, body.role)
    return {"id": str(profile.id), "role": profile.role}


@router.patch("/bookings/{booking_id}/status", response_model=BookingResponse)
async def override_booking_status(
    booking_id: UUID,
    body: BookingOverride,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.admin_override_status(db, auth, booking_id, body.status)


@router.delete("/properties/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_property(
    property_id: UUID,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await property_service.delete_property(
        db, auth, property_id, action="admin_property_deleted",
    )


@router.get("/audit-logs", response_model=list[AuditLogResponse])
async def list_audit_logs(
    action: str | None = Query(None, max_length=100),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await audit.list_audit_logs(db, limit=limit, offset=offset, action=action)


# ─── Marketplace review ─────────────────────────────────────────

@router.get("/marketplace/requests", response_model=list[PurchaseRequestResponse])
async def list_marketplace_requests(
    request_status: RequestStatus | None = Query(None, alias="status"),
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await marketplace_service.list_requests(
        db, request_status.value if request_status else None,
    )


@router.post(
    "/marketplace/requests/{request_id}/approve",
    response_model=PurchaseRequestResponse,
)
async def approve_request(
    request_id: UUID,
    body: RequestDecision | None = None,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await marketplace_service.decide_request(
        db, auth, request_id, RequestStatus.APPROVED, body.note if body else None,
    )


@router.post(
    "/marketplace/requests/{request_id}/reject",
    response_model=PurchaseRequestResponse,
)
async def reject_request(
    request_id: UUID,
    body: RequestDecision | None = None,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await marketplace_service.decide_request(
        db, auth, request_id, RequestStatus.REJECTED, body.note if body else None,
    )
