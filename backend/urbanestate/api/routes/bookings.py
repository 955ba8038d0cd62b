"""Booking Routes — public visit requests, agent booking management."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.api.dependencies import get_client_ip, require_agent
from urbanestate.core.auth_context import AuthContext
from urbanestate.infrastructure.database import get_db
from urbanestate.schemas.booking import (
    BookingCreate, BookingCreateResponse, BookingResponse, BookingStatusUpdate,
)
from urbanestate.services import booking_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post("", response_model=BookingCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    body: BookingCreate,
    client_ip: str = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
):
    booking, duplicate = await booking_service.create_booking(db, body, client_ip)
    if duplicate:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=BookingCreateResponse(
                booking_id=booking.id, duplicate=True,
                message=booking_service.DUPLICATE_MESSAGE,
            ).model_dump(mode="json"),
        )
    return BookingCreateResponse(
        booking_id=booking.id, message=booking_service.SUBMITTED_MESSAGE,
    )


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.list_bookings(db, auth)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    body: BookingStatusUpdate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.update_booking_status(db, auth, booking_id, body.status)
