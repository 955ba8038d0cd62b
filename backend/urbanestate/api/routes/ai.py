"""AI Routes — compliance, copilot, fraud, leads, pricing, receptionist, search, summary, WhatsApp.

Invariants:
    - Every endpoint is rate limited per client with its own preset
    - Required free text that is empty after sanitization → 400 before any model call
    - Compliance, fraud and lead scoring degrade to rule-only results without a model
    - Copilot, receptionist, search, summary and WhatsApp need the model: no API key → 503
    - The receptionist never fails the request; model errors yield a degraded reply

Design Decisions:
    - Pricing is purely statistical and never calls the model
    - Compliance drops unset optional fields so quick/full answers keep their two keys
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.api.dependencies import (
    get_ai_client, rate_limit, require_agent, require_ai_client,
)
from urbanestate.core.auth_context import AuthContext
from urbanestate.core.sanitize import sanitize_required, sanitize_text
from urbanestate.infrastructure.database import get_db
from urbanestate.schemas.ai import (
    ComplianceRequest, ComplianceResponse, CopilotRequest, CopilotResponse,
    FraudRequest, FraudResponse, LeadClassification, LeadQualifyRequest,
    PricingRequest, PricingResponse, ReceptionistRequest, ReceptionistResponse,
    SearchRequest, SearchResponse, SummaryRequest, SummaryResponse,
    WhatsAppRequest, WhatsAppResponse,
)
from urbanestate.services import (
    ai_compliance, ai_copilot, ai_fraud, ai_leads, ai_receptionist, ai_search,
    ai_summary, ai_whatsapp, pricing_service,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ai", tags=["ai"])


@router.post(
    "/compliance", response_model=ComplianceResponse, response_model_exclude_none=True,
    dependencies=[Depends(rate_limit("general"))],
)
async def check_compliance(body: ComplianceRequest, ai_client=Depends(get_ai_client)):
    text = sanitize_required(body.text, 10_000, "text", "Text is required")
    return await ai_compliance.check_compliance(ai_client, text, body.mode)


@router.post(
    "/copilot", response_model=CopilotResponse,
    dependencies=[Depends(rate_limit("copilot"))],
)
async def generate_listing(body: CopilotRequest, ai_client=Depends(require_ai_client)):
    bullet_points = sanitize_required(
        body.bullet_points, 5000, "bullet_points", "Bullet points are required",
    )
    return await ai_copilot.generate_listing(
        ai_client, bullet_points, body.tone.value, body.languages, body.property_data,
    )


@router.post(
    "/fraud", response_model=FraudResponse,
    dependencies=[Depends(rate_limit("general"))],
)
async def analyze_fraud(
    body: FraudRequest,
    auth: AuthContext = Depends(require_agent),
    ai_client=Depends(get_ai_client),
    db: AsyncSession = Depends(get_db),
):
    return await ai_fraud.analyze_listing(db, ai_client, body.property_id)


@router.post(
    "/leads", response_model=LeadClassification,
    dependencies=[Depends(rate_limit("leads"))],
)
async def qualify_lead(body: LeadQualifyRequest, ai_client=Depends(get_ai_client)):
    message = sanitize_required(body.message, 5000, "message", "Message is required")
    return await ai_leads.qualify_lead(
        ai_client, message, body.property_id, body.response_time, body.engagement_history,
    )


@router.post(
    "/pricing", response_model=PricingResponse,
    dependencies=[Depends(rate_limit("general"))],
)
async def recommend_price(body: PricingRequest, db: AsyncSession = Depends(get_db)):
    return await pricing_service.recommend_price(
        db,
        city=sanitize_text(body.city, 100),
        area=sanitize_text(body.area, 100) or None,
        beds=body.beds,
        current_price=body.current_price,
        currency=body.currency.upper(),
        amenities=[sanitize_text(a, 50) for a in body.amenities],
        furnished=body.furnished,
    )


@router.post(
    "/receptionist", response_model=ReceptionistResponse,
    dependencies=[Depends(rate_limit("receptionist"))],
)
async def receptionist(
    body: ReceptionistRequest,
    ai_client=Depends(require_ai_client),
    db: AsyncSession = Depends(get_db),
):
    message = sanitize_required(body.message, 4000, "message", "Message is required")
    return await ai_receptionist.respond(
        db, ai_client, message,
        [turn.model_dump() for turn in body.history],
        body.context.model_dump() if body.context else None,
    )


@router.post(
    "/search", response_model=SearchResponse,
    dependencies=[Depends(rate_limit("search"))],
)
async def search(
    body: SearchRequest,
    ai_client=Depends(require_ai_client),
    db: AsyncSession = Depends(get_db),
):
    query = sanitize_required(body.query, 500, "query", "Search query is required")
    return await ai_search.search_properties(db, ai_client, query)


@router.post(
    "/summarize", response_model=SummaryResponse,
    dependencies=[Depends(rate_limit("general"))],
)
async def summarize_listing(body: SummaryRequest, ai_client=Depends(require_ai_client)):
    description = sanitize_required(
        body.description, 10_000, "description", "Property description is required",
    )
    return await ai_summary.summarize_listing(
        ai_client, description, body.price, body.currency.upper(),
    )


@router.post(
    "/whatsapp", response_model=WhatsAppResponse,
    dependencies=[Depends(rate_limit("general"))],
)
async def compose_whatsapp(body: WhatsAppRequest, ai_client=Depends(require_ai_client)):
    title = sanitize_required(
        body.property_title, 200, "property_title", "Property title is required",
    )
    agent_name = sanitize_required(body.agent_name, 100, "agent_name", "Agent name is required")
    return await ai_whatsapp.compose_messages(
        ai_client, title, body.property_details, agent_name,
    )
