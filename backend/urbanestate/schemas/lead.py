"""Lead Schemas — public lead capture and agent-side lead management."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LeadCreate(BaseModel):
    """Public inquiry. agent_id may be omitted when property_id identifies the agent."""
    message: str = Field(min_length=1, max_length=5000)
    property_id: UUID | None = None
    agent_id: UUID | None = None
    contact_name: str | None = Field(None, max_length=200)
    contact_phone: str | None = Field(None, max_length=40)
    contact_email: str | None = Field(None, max_length=254)
    source: str | None = Field(None, max_length=50)
    metadata: dict[str, Any] | None = None


class LeadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    property_id: UUID | None
    agent_id: UUID | None
    contact_name: str
    contact_phone: str | None
    contact_email: str | None
    message: str | None
    source: str
    temperature: str
    score: int
    status: str
    ai_reasons: list[str]
    suggested_follow_up: str | None
    follow_up_delay: int | None
    created_at: datetime


class LeadStatusUpdate(BaseModel):
    status: Literal["new", "contacted", "qualified", "closed"]
    notes: str | None = Field(None, max_length=2000)
