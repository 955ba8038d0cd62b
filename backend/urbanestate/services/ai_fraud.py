"""Fraud Analysis — rule flags for a stored listing merged with a model risk score.

Invariants:
    - Unknown property → ResourceNotFoundError (404)
    - Area average uses other published listings in the same city
    - The model can raise the risk score but never lower it below the rule score
    - Model failure is treated as risk 0 with no extra flags
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.config import get_settings
from urbanestate.core.domain_types import ListingStatus
from urbanestate.core.errors import ResourceNotFoundError
from urbanestate.core.fraud_rules import (
    area_average, merge_fraud_analysis, rule_based_fraud_flags,
)
from urbanestate.models.property import Property, PropertyPhoto
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_prompts import FRAUD_SYSTEM_PROMPT, build_fraud_prompt

logger = logging.getLogger(__name__)


async def _area_rents(db: AsyncSession, prop: Property) -> list[float]:
    result = await db.execute(
        select(Property.rent).where(
            Property.city == prop.city,
            Property.status == ListingStatus.PUBLISHED.value,
            Property.id != prop.id,
        ),
    )
    return [r for r in result.scalars().all()]


async def analyze_listing(
    db: AsyncSession, ai_client: AIClient | None, property_id: UUID,
) -> dict:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise ResourceNotFoundError("Property", str(property_id))

    photo_count = await db.scalar(
        select(func.count()).select_from(PropertyPhoto)
        .where(PropertyPhoto.property_id == prop.id),
    )
    avg = area_average(await _area_rents(db, prop))
    flags = rule_based_fraud_flags(
        prop.rent, prop.currency, photo_count or 0, prop.description, avg,
    )

    model_output = None
    if ai_client is not None:
        listing = {
            "title": prop.title, "type": prop.type, "rent": prop.rent,
            "currency": prop.currency, "city": prop.city, "area": prop.area,
            "beds": prop.beds, "baths": prop.baths,
            "description": prop.description, "photo_count": photo_count,
        }
        try:
            model_output = await ai_client.generate_json(
                model=get_settings().ai_model_fast,
                system=FRAUD_SYSTEM_PROMPT,
                prompt=build_fraud_prompt(listing, avg),
                max_tokens=1000,
                temperature=0.1,
            )
        except Exception as e:
            logger.warning(
                f"Model fraud analysis failed, using rules: {e}",
                extra={"entity_id": str(property_id)},
            )

    return merge_fraud_analysis(flags, model_output)
