"""Lead Routes — public lead capture and agent lead management.

Invariants:
    - Capture responds immediately; qualification runs as a background task
"""

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.api.dependencies import get_ai_client, get_client_ip, require_agent
from urbanestate.core.auth_context import AuthContext
from urbanestate.core.domain_types import LeadStatus, LeadTemperature
from urbanestate.infrastructure.database import get_db
from urbanestate.schemas.lead import LeadCreate, LeadResponse, LeadStatusUpdate
from urbanestate.services import lead_service

router = APIRouter(prefix="/api/v1/leads", tags=["leads"])


@router.post("", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
async def capture_lead(
    body: LeadCreate,
    background_tasks: BackgroundTasks,
    client_ip: str = Depends(get_client_ip),
    ai_client=Depends(get_ai_client),
    db: AsyncSession = Depends(get_db),
):
    lead = await lead_service.capture_lead(db, body, client_ip)
    background_tasks.add_task(
        lead_service.qualify_and_store,
        lead.id, lead.message, lead.property_id, lead.source, ai_client,
    )
    return lead


@router.get("", response_model=list[LeadResponse])
async def list_leads(
    temperature: LeadTemperature | None = None,
    lead_status: LeadStatus | None = Query(None, alias="status"),
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await lead_service.list_leads(
        db, auth,
        temperature=temperature.value if temperature else None,
        status=lead_status.value if lead_status else None,
    )


@router.patch("/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: UUID,
    body: LeadStatusUpdate,
    auth: AuthContext = Depends(require_agent),
    db: AsyncSession = Depends(get_db),
):
    return await lead_service.update_lead_status(db, auth, lead_id, body.status, body.notes)
