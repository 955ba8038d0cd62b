"""Booking Schemas — public visit request and agent/admin status changes.

Invariants:
    - `website` is a honeypot: humans never fill it, a value means a bot
    - Name/phone/email rules live in core/validation.py so the messages match the forms
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BookingCreate(BaseModel):
    property_id: UUID
    slot_id: UUID
    customer_name: str = Field(max_length=200)
    customer_phone: str = Field(max_length=40)
    customer_nationality: str | None = Field(None, max_length=100)
    customer_email: str | None = Field(None, max_length=254)
    idempotency_key: str | None = Field(None, min_length=8, max_length=64)
    website: str | None = Field(None, max_length=200)


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    property_id: UUID
    slot_id: UUID
    customer_name: str
    customer_phone: str
    customer_nationality: str | None
    customer_email: str | None
    status: str
    created_at: datetime


class BookingCreateResponse(BaseModel):
    booking_id: UUID
    duplicate: bool = False
    message: str


class BookingStatusUpdate(BaseModel):
    status: Literal["confirmed", "cancelled", "completed"]
