"""Marketplace Schemas — household items and purchase requests.

Invariants:
    - category/condition are validated against core/domain_types.py enums
    - Purchase requests require an email (approval is confirmed by mail)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from urbanestate.core.domain_types import ItemCategory, ItemCondition, ItemStatus


class ItemCreate(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    category: ItemCategory
    price: float = Field(ge=0)
    currency: str = Field("AED", min_length=3, max_length=3)
    condition: ItemCondition
    description: str | None = Field(None, max_length=5000)
    city: str = Field(min_length=1, max_length=100)
    area: str | None = Field(None, max_length=100)
    delivery_available: bool = False
    is_negotiable: bool = False
    agent_id: UUID | None = None


class ItemUpdate(BaseModel):
    title: str | None = Field(None, min_length=3, max_length=200)
    category: ItemCategory | None = None
    price: float | None = Field(None, ge=0)
    condition: ItemCondition | None = None
    description: str | None = Field(None, max_length=5000)
    city: str | None = Field(None, min_length=1, max_length=100)
    area: str | None = Field(None, max_length=100)
    delivery_available: bool | None = None
    is_negotiable: bool | None = None
    status: ItemStatus | None = None


class ItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    seller_id: UUID
    agent_id: UUID | None
    title: str
    category: str
    price: float
    currency: str
    condition: str
    description: str | None
    city: str
    area: str | None
    delivery_available: bool
    is_negotiable: bool
    status: str
    created_at: datetime


class PurchaseRequestCreate(BaseModel):
    customer_name: str = Field(max_length=200)
    customer_phone: str = Field(max_length=40)
    customer_email: str = Field(max_length=254)
    customer_note: str | None = Field(None, max_length=2000)
    idempotency_key: str | None = Field(None, min_length=8, max_length=64)
    website: str | None = Field(None, max_length=200)


class PurchaseRequestCreateResponse(BaseModel):
    request_id: UUID | None
    duplicate: bool = False
    message: str


class PurchaseRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    item_id: UUID
    seller_id: UUID
    agent_id: UUID | None
    customer_name: str
    customer_phone: str
    customer_email: str | None
    customer_note: str | None
    status: str
    admin_decision_note: str | None
    approved_at: datetime | None
    rejected_at: datetime | None
    created_at: datetime


class RequestDecision(BaseModel):
    note: str | None = Field(None, max_length=2000)
