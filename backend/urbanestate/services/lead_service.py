"""Lead Service — public lead capture with background qualification, agent lead management.

Invariants:
    - Captured leads start as warm / 50 / new and are returned before qualification
    - Qualification runs after the response with its own session; its failure is logged
      and leaves the captured lead untouched
    - Agents see and update only their own leads; admins see all
    - A lead must resolve to an agent, either explicitly or through its property
"""

import json
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import LeadStatus, LeadTemperature
from urbanestate.core.errors import ResourceNotFoundError, ValidationFailedError
from urbanestate.core.lead_scoring import NEUTRAL_SCORE
from urbanestate.core.rate_limit import enforce_rate_limit
from urbanestate.core.sanitize import sanitize_input, sanitize_required, sanitize_text
from urbanestate.infrastructure import database
from urbanestate.models.lead import Lead
from urbanestate.models.property import Property
from urbanestate.schemas.lead import LeadCreate
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_leads import qualify_lead

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "form"


async def capture_lead(
    db: AsyncSession, data: LeadCreate, client_ip: str,
) -> Lead:
    enforce_rate_limit(client_ip, "leads")

    message = sanitize_required(data.message, 1000, "message", "Message is required")

    agent_id = data.agent_id
    if data.property_id is not None:
        prop = await db.get(Property, data.property_id)
        if prop is None:
            raise ResourceNotFoundError("Property", str(data.property_id))
        agent_id = agent_id or prop.agent_id
    if agent_id is None:
        raise ValidationFailedError("Agent ID or property ID is required", field="agent_id")

    lead = Lead(
        property_id=data.property_id,
        agent_id=agent_id,
        contact_name=sanitize_text(data.contact_name, 100) or "Anonymous",
        contact_phone=sanitize_text(data.contact_phone, 20) or None,
        contact_email=sanitize_text(data.contact_email, 100) or None,
        message=message,
        source=sanitize_text(data.source, 50) or DEFAULT_SOURCE,
        temperature=LeadTemperature.WARM.value,
        score=NEUTRAL_SCORE,
        status=LeadStatus.NEW.value,
        ai_reasons=[],
        notes=json.dumps(data.metadata, default=str) if data.metadata else None,
    )
    db.add(lead)
    await db.commit()
    logger.info("Lead captured", extra={"entity_id": str(lead.id), "client_id": client_ip})
    return lead


async def qualify_and_store(
    lead_id: UUID,
    message: str,
    property_id: UUID | None,
    source: str,
    ai_client: AIClient | None,
) -> None:
    """Background task: classify the lead and write the result back."""
    try:
        classification = await qualify_lead(
            ai_client, message,
            str(property_id) if property_id else None,
            engagement_history={"source": source},
        )
        async with database.get_db_manager().session() as db:
            lead = await db.get(Lead, lead_id)
            if lead is None:
                return
            lead.temperature = classification["temperature"]
            lead.score = classification["score"]
            lead.ai_reasons = classification["reasons"]
            lead.suggested_follow_up = classification["suggested_follow_up"]
            lead.follow_up_delay = classification["follow_up_delay"]
            await db.commit()
    except Exception as e:
        logger.error(
            f"Lead qualification failed: {e}",
            exc_info=True, extra={"entity_id": str(lead_id)},
        )


async def list_leads(
    db: AsyncSession, auth: AuthContext,
    temperature: str | None = None, status: str | None = None,
) -> list[Lead]:
    query = select(Lead).order_by(Lead.score.desc(), Lead.created_at.desc())
    if not auth.is_admin:
        query = query.where(Lead.agent_id == auth.user_id)
    if temperature:
        query = query.where(Lead.temperature == temperature)
    if status:
        query = query.where(Lead.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_lead_status(
    db: AsyncSession, auth: AuthContext, lead_id: UUID,
    status: str, notes: str | None = None,
) -> Lead:
    lead = await db.get(Lead, lead_id)
    if lead is None:
        raise ResourceNotFoundError("Lead", str(lead_id))
    auth.require_owner(lead.agent_id, "lead")
    lead.status = status
    if notes is not None:
        lead.notes = sanitize_input(notes, 2000)
    await db.commit()
    return lead
