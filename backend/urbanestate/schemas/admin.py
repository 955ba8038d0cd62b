"""Admin Schemas — role changes, booking overrides and audit log entries."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from urbanestate.core.domain_types import UserRole


class RoleUpdate(BaseModel):
    role: UserRole


class BookingOverride(BaseModel):
    status: Literal["confirmed", "cancelled", "completed"]


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    actor_id: UUID | None
    action: str
    entity_type: str
    entity_id: str | None
    details: dict[str, Any] = Field(serialization_alias="metadata")
    created_at: datetime
