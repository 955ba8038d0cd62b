"""Rent Pricing — rule-based rent bands from comparable listings.

Invariants:
    - Bands are the 25th/50th/75th percentiles of comparable rents, then adjusted
    - Adjustment = 1 + 2% per premium amenity + 10% if furnished + monthly seasonal factor
    - No comparables → ±15% band around the current price, low confidence
    - Pure: the caller supplies comparables and the month

Design Decisions:
    - Linear-interpolated percentiles (numpy's default method)
"""

import math

PREMIUM_AMENITIES = frozenset({"Pool", "Gym", "Elevator", "CCTV", "Generator", "Garden"})
AMENITY_BONUS = 0.02
FURNISHED_BONUS = 0.10
AREA_MIN_COMPARABLES = 3

# Month (1-12) → seasonal rent adjustment
SEASONAL_FACTORS: dict[int, float] = {
    1: -0.02, 2: -0.01, 3: 0.02, 4: 0.03,
    5: 0.05, 6: 0.07, 7: 0.05, 8: 0.03,
    9: 0.02, 10: 0.01, 11: -0.01, 12: -0.03,
}


def percentile(sorted_values: list[float], p: float) -> float:
    index = (p / 100) * (len(sorted_values) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return sorted_values[lower]
    return sorted_values[lower] + (sorted_values[upper] - sorted_values[lower]) * (index - lower)


def choose_comparables(area_rents: list[float], city_rents: list[float]) -> list[float]:
    """Prefer the same-area set once it is large enough to be meaningful."""
    if len(area_rents) >= AREA_MIN_COMPARABLES:
        return area_rents
    return city_rents


def _confidence(count: int) -> str:
    if count >= 10:
        return "high"
    if count >= 5:
        return "medium"
    return "low"


def _position(current: float, band: dict) -> str:
    if current < band["low"] * 0.9:
        return "below"
    if current > band["high"] * 1.1:
        return "premium"
    if current > band["median"]:
        return "above"
    return "competitive"


def pricing_recommendation(
    comparable_rents: list[float],
    *,
    area: str,
    current_price: float,
    currency: str,
    amenities: list[str],
    furnished: bool,
    month: int,
) -> dict:
    if not comparable_rents:
        return {
            "suggested_range": {
                "low": current_price * 0.85,
                "median": current_price,
                "high": current_price * 1.15,
                "currency": currency,
            },
            "current_price": current_price,
            "price_position": "competitive",
            "comparable_count": 0,
            "seasonal_adjustment": 0,
            "confidence": "low",
            "insights": [
                "Not enough comparable properties in this area to provide accurate pricing data.",
            ],
        }

    rents = sorted(comparable_rents)
    amenity_count = sum(1 for a in amenities if a in PREMIUM_AMENITIES)
    seasonal = SEASONAL_FACTORS.get(month, 0.0)
    factor = (
        1 + amenity_count * AMENITY_BONUS
        + (FURNISHED_BONUS if furnished else 0) + seasonal
    )
    band = {
        "low": round(percentile(rents, 25) * factor),
        "median": round(percentile(rents, 50) * factor),
        "high": round(percentile(rents, 75) * factor),
        "currency": currency,
    }
    position = _position(current_price, band)

    insights: list[str] = []
    if position == "below":
        insights.append(
            f"Your price is significantly below the area average. Consider increasing "
            f"to {currency} {band['median']:,} for better returns.",
        )
    elif position == "premium":
        insights.append(
            f"Your price is above the premium range. This may limit interest. "
            f"Consider {currency} {band['high']:,} for faster occupancy.",
        )
    else:
        insights.append(f"Your price is competitive for the {area} area.")
    if furnished:
        insights.append("Furnished premium of ~10% is factored into the range.")
    if amenity_count >= 3:
        insights.append(f"{amenity_count} premium amenities justify a higher price point.")
    if abs(seasonal) > 0.02:
        insights.append(
            "Current season supports higher rents." if seasonal > 0
            else "Off-season may require price flexibility.",
        )

    return {
        "suggested_range": band,
        "current_price": current_price,
        "price_position": position,
        "comparable_count": len(rents),
        "seasonal_adjustment": round(seasonal * 100),
        "confidence": _confidence(len(rents)),
        "insights": insights,
    }
