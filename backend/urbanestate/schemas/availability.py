"""Availability Schemas — visit slot creation, bulk creation and toggling.

Invariants:
    - Date/time ordering is checked in the service (core/availability.py), not here,
      so bulk creation can drop bad entries instead of rejecting the batch
"""

from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SlotCreate(BaseModel):
    slot_date: date
    start_time: time
    end_time: time
    capacity: int = Field(1, ge=1, le=50)


class SlotBulkCreate(BaseModel):
    slots: list[SlotCreate] = Field(min_length=1, max_length=200)


class SlotToggle(BaseModel):
    is_available: bool


class SlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    property_id: UUID
    slot_date: date
    start_time: time
    end_time: time
    capacity: int
    is_available: bool


class BulkCreateResponse(BaseModel):
    count: int
