"""AI Schemas — request/response models for the model-assisted endpoints.

Invariants:
    - Required free-text inputs reject blank strings (stripped before length checks)
    - Response models mirror the dicts produced by core/ rules, so rule-only and
      merged results serialize identically

Design Decisions:
    - Copilot languages accept market codes ("gcc", "eu") next to language codes;
      expansion happens in the service
"""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from urbanestate.core.domain_types import ComplianceMode, ListingTone


def _not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


# ─── Compliance ─────────────────────────────────────────────────

class ComplianceRequest(BaseModel):
    text: str = Field(min_length=1, max_length=10_000)
    mode: ComplianceMode = ComplianceMode.FULL

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _not_blank(v)


class Violation(BaseModel):
    type: str
    severity: Literal["warning", "critical"]
    text: str
    suggestion: str
    regulation: str


class ComplianceResponse(BaseModel):
    passed: bool
    violations: list[Violation]
    sanitized_text: str | None = None
    changes: list[str] | None = None


# ─── Copilot ────────────────────────────────────────────────────

class CopilotRequest(BaseModel):
    bullet_points: str = Field(min_length=1, max_length=5000)
    tone: ListingTone = ListingTone.PREMIUM
    languages: list[str] = Field(default_factory=lambda: ["en"], max_length=10)
    property_data: dict[str, Any] | None = None

    @field_validator("bullet_points")
    @classmethod
    def strip_bullets(cls, v: str) -> str:
        return _not_blank(v)


class ListingText(BaseModel):
    title: str
    description: str


class CopilotResponse(BaseModel):
    title: str
    description: str
    translations: dict[str, ListingText]


# ─── Fraud ──────────────────────────────────────────────────────

class FraudRequest(BaseModel):
    property_id: UUID


class FraudFlag(BaseModel):
    type: str
    severity: Literal["low", "medium", "high"]
    description: str


class FraudResponse(BaseModel):
    risk_score: int = Field(ge=0, le=100)
    flags: list[FraudFlag]
    recommendation: Literal["approve", "review", "reject"]


# ─── Leads ──────────────────────────────────────────────────────

class LeadQualifyRequest(BaseModel):
    message: str = Field(min_length=1, max_length=5000)
    property_id: str | None = Field(None, max_length=64)
    response_time: float | None = Field(None, ge=0)
    engagement_history: Any | None = None

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        return _not_blank(v)


class LeadClassification(BaseModel):
    temperature: Literal["hot", "warm", "cold"]
    score: int = Field(ge=0, le=100)
    reasons: list[str]
    suggested_follow_up: str
    follow_up_delay: int


# ─── Pricing ────────────────────────────────────────────────────

class PricingRequest(BaseModel):
    city: str = Field(min_length=1, max_length=100)
    area: str | None = Field(None, max_length=100)
    beds: int = Field(ge=1, le=50)
    type: str = "apartment"
    current_price: float = Field(gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    amenities: list[str] = Field(default_factory=list, max_length=50)
    furnished: bool = False


class PriceBand(BaseModel):
    low: float
    median: float
    high: float
    currency: str


class PricingResponse(BaseModel):
    suggested_range: PriceBand
    current_price: float
    price_position: Literal["below", "competitive", "above", "premium"]
    comparable_count: int
    seasonal_adjustment: int
    confidence: Literal["low", "medium", "high"]
    insights: list[str]


# ─── Receptionist ───────────────────────────────────────────────

class ChatTurn(BaseModel):
    role: str = Field(max_length=20)
    content: str = Field(max_length=4000)


class ReceptionistContext(BaseModel):
    property_title: str | None = Field(None, max_length=200)
    property_city: str | None = Field(None, max_length=100)


class ReceptionistRequest(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    history: list[ChatTurn] = Field(default_factory=list, max_length=50)
    context: ReceptionistContext | None = None

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        return _not_blank(v)


class ReceptionistResponse(BaseModel):
    message: str
    intent: str
    filters: dict[str, Any] = {}
    listings: list[dict[str, Any]] = []
    marketplace_items: list[dict[str, Any]] = []
    cart_action: dict[str, Any] | None = None
    capture_lead_info: dict[str, Any] | None = None


# ─── Search ─────────────────────────────────────────────────────

class SearchRequest(BaseModel):
    query: str = Field(min_length=1, max_length=500)

    @field_validator("query")
    @classmethod
    def strip_query(cls, v: str) -> str:
        return _not_blank(v)


class SearchFilters(BaseModel):
    city: str | None = None
    area: str | None = None
    type: str | None = None
    min_rent: float | None = None
    max_rent: float | None = None
    beds: int | None = None
    baths: int | None = None
    furnished: bool | None = None
    amenities: list[str] = []
    move_in_date: str | None = None
    currency: str | None = None


class SearchMatch(BaseModel):
    property: dict[str, Any]
    match_score: int = Field(ge=0, le=100)
    match_reasons: list[str]


class SearchResponse(BaseModel):
    results: list[SearchMatch]
    explanation: str
    extracted_filters: SearchFilters
    original_query: str


# ─── Listing summary ────────────────────────────────────────────

class SummaryRequest(BaseModel):
    description: str = Field(min_length=1, max_length=10_000)
    price: float | None = Field(None, gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return _not_blank(v)


class SummaryField(BaseModel):
    label: str
    value: str
    truth_label: Literal["confirmed", "unclear", "missing"]
    note: str | None = None


class SummaryResponse(BaseModel):
    fields: list[SummaryField]
    red_flags: list[str]
    move_in_costs: str
    overall_score: int = Field(ge=1, le=10)


# ─── WhatsApp composer ──────────────────────────────────────────

class WhatsAppRequest(BaseModel):
    property_title: str = Field(min_length=1, max_length=200)
    property_details: dict[str, Any] | None = None
    agent_name: str = Field(min_length=1, max_length=100)

    @field_validator("property_title", "agent_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        return _not_blank(v)


class WhatsAppMessage(BaseModel):
    intent: str
    label: str
    emoji: str
    message: str


class WhatsAppResponse(BaseModel):
    messages: list[WhatsAppMessage]
    property_context: str
