"""AI Search — natural-language property search: model filters, rule-scored matches.

Invariants:
    - The model extracts filters; a failed extraction is an upstream error (503)
    - Only published listings are searched: up to 10 fetched, top 5 returned by match score
    - The explanation comes from the model; any failure falls back to a fixed sentence
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.config import get_settings
from urbanestate.core.domain_types import ListingStatus
from urbanestate.core.errors import AIProviderError
from urbanestate.core.search_matching import normalize_search_filters, score_match
from urbanestate.models.property import Property
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_prompts import (
    SEARCH_SYSTEM_PROMPT, build_search_explanation_prompt, build_search_prompt,
)
from urbanestate.services.ai_receptionist import property_card

logger = logging.getLogger(__name__)

FETCH_LIMIT = 10
RESULT_LIMIT = 5


async def _extract_filters(ai_client: AIClient, query: str) -> dict:
    try:
        raw = await ai_client.generate_json(
            model=get_settings().ai_model_fast,
            system=SEARCH_SYSTEM_PROMPT,
            prompt=build_search_prompt(query),
            max_tokens=500,
            temperature=0.2,
        )
    except AIProviderError:
        raise
    except Exception as e:
        raise AIProviderError(f"Search filter extraction failed: {e}", "invalid_response")
    return normalize_search_filters(raw)


async def _candidates(db: AsyncSession, filters: dict) -> list[Property]:
    query = select(Property).where(Property.status == ListingStatus.PUBLISHED.value)
    if filters["city"]:
        query = query.where(Property.city.ilike(f"%{filters['city']}%"))
    if filters["area"]:
        query = query.where(Property.area.ilike(f"%{filters['area']}%"))
    if filters["type"]:
        query = query.where(Property.type == filters["type"])
    if filters["beds"]:
        query = query.where(Property.beds >= filters["beds"])
    if filters["baths"]:
        query = query.where(Property.baths >= filters["baths"])
    if filters["min_rent"]:
        query = query.where(Property.rent >= filters["min_rent"])
    if filters["max_rent"]:
        query = query.where(Property.rent <= filters["max_rent"])
    if filters["furnished"] is not None:
        query = query.where(Property.furnished.is_(filters["furnished"]))
    result = await db.execute(
        query.order_by(Property.created_at.desc()).limit(FETCH_LIMIT),
    )
    return list(result.scalars().all())


async def _explain(
    ai_client: AIClient, query: str, matches: list[dict], filters: dict,
) -> str:
    summary = [
        {
            "title": m["property"]["title"], "rent": m["property"]["rent"],
            "currency": m["property"]["currency"], "beds": m["property"]["beds"],
            "area": m["property"]["area"], "amenities": m["property"]["amenities"],
        }
        for m in matches
    ]
    try:
        text = await ai_client.generate_text(
            model=get_settings().ai_model_instant,
            system=SEARCH_SYSTEM_PROMPT,
            prompt=build_search_explanation_prompt(query, summary, filters),
            max_tokens=300,
            temperature=0.6,
        )
    except Exception as e:
        logger.warning(f"Search explanation failed, using fixed text: {e}")
        text = ""
    return text.strip() or f"Found {len(matches)} properties matching your criteria."


async def search_properties(db: AsyncSession, ai_client: AIClient, query: str) -> dict:
    filters = await _extract_filters(ai_client, query)

    matches = []
    for prop in await _candidates(db, filters):
        card = property_card(prop)
        score, reasons = score_match(card, filters)
        matches.append({"property": card, "match_score": score, "match_reasons": reasons})
    matches.sort(key=lambda m: m["match_score"], reverse=True)
    top = matches[:RESULT_LIMIT]

    return {
        "results": top,
        "explanation": await _explain(ai_client, query, top, filters),
        "extracted_filters": filters,
        "original_query": query,
    }
