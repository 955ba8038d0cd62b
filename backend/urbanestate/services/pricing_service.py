"""Pricing Service — loads comparable rents and applies core/pricing.py.

Invariants:
    - Comparables are published listings in the same city with beds within ±1
    - Same-area comparables win when there are at least 3 of them
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanestate.core.domain_types import ListingStatus
from urbanestate.core.pricing import choose_comparables, pricing_recommendation
from urbanestate.models.property import Property


async def recommend_price(
    db: AsyncSession,
    *,
    city: str,
    area: str | None,
    beds: int,
    current_price: float,
    currency: str,
    amenities: list[str],
    furnished: bool,
    today: date | None = None,
) -> dict:
    result = await db.execute(
        select(Property.rent, Property.area).where(
            Property.city.ilike(city),
            Property.status == ListingStatus.PUBLISHED.value,
            Property.beds >= beds - 1,
            Property.beds <= beds + 1,
        ),
    )
    rows = result.all()
    city_rents = [r.rent for r in rows]
    area_rents = (
        [r.rent for r in rows if r.area and r.area.lower() == area.lower()]
        if area else []
    )
    month = (today or date.today()).month
    return pricing_recommendation(
        choose_comparables(area_rents, city_rents),
        area=area or city,
        current_price=current_price,
        currency=currency,
        amenities=amenities,
        furnished=furnished,
        month=month,
    )
