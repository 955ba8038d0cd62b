"""Search Matching — normalizes model-extracted filters and scores listings against them.

Invariants:
    - normalize_search_filters never raises: unknown keys dropped, bad values become None
    - Numeric filters are finite and positive or absent
    - Match score starts at 50 and is capped at 100; every bonus adds a reason
    - A listing with no matching criterion still gets one generic reason

Design Decisions:
    - Model keys are camelCase (minRent, moveInDate); normalized output is snake_case
    - Listings are plain dicts so the scorer stays independent of the ORM
"""

from urbanestate.core.domain_types import PropertyType
from urbanestate.core.validation import as_finite_number

BASE_MATCH_SCORE = 50
GENERIC_REASON = "Matches your general criteria"

_PROPERTY_TYPES = {t.value for t in PropertyType}


def _positive(value: object) -> float | None:
    number = as_finite_number(value)
    return number if number is not None and number > 0 else None


def _text(value: object, max_length: int = 100) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.lower() == "null":
        return None
    return value[:max_length]


def normalize_search_filters(raw: object) -> dict:
    """Model output → {city, area, type, min_rent, max_rent, beds, baths,
    furnished, amenities, move_in_date, currency}."""
    raw = raw if isinstance(raw, dict) else {}
    prop_type = _text(raw.get("type"), 20)
    amenities = raw.get("amenities")
    furnished = raw.get("furnished")
    currency = _text(raw.get("currency"), 3)
    beds = _positive(raw.get("beds"))
    baths = _positive(raw.get("baths"))
    return {
        "city": _text(raw.get("city")),
        "area": _text(raw.get("area")),
        "type": prop_type.lower() if prop_type and prop_type.lower() in _PROPERTY_TYPES else None,
        "min_rent": _positive(raw.get("minRent")),
        "max_rent": _positive(raw.get("maxRent")),
        "beds": int(beds) if beds else None,
        "baths": int(baths) if baths else None,
        "furnished": furnished if isinstance(furnished, bool) else None,
        "amenities": (
            [a.strip() for a in amenities if isinstance(a, str) and a.strip()][:20]
            if isinstance(amenities, list) else []
        ),
        "move_in_date": _text(raw.get("moveInDate"), 10),
        "currency": currency.upper() if currency else None,
    }


def score_match(listing: dict, filters: dict) -> tuple[int, list[str]]:
    """Score one listing dict (city, area, beds, rent, currency, amenities, furnished)."""
    score = BASE_MATCH_SCORE
    reasons: list[str] = []
    city = listing.get("city") or ""
    area = listing.get("area") or ""

    if filters.get("city") and filters["city"].lower() in city.lower():
        reasons.append(f"Located in {city}")
        score += 15
    if filters.get("area") and filters["area"].lower() in area.lower():
        reasons.append(f"In {area} area")
        score += 10
    if filters.get("beds") and listing.get("beds", 0) >= filters["beds"]:
        reasons.append(f"{listing['beds']} bedroom(s) meet your requirement")
        score += 10
    if filters.get("max_rent") and listing.get("rent", 0) <= filters["max_rent"]:
        reasons.append(
            f"Within your budget at {listing.get('currency', '')} {listing['rent']:,.0f}",
        )
        score += 15
    if filters.get("amenities"):
        have = [a.lower() for a in listing.get("amenities") or []]
        matched = [
            wanted for wanted in filters["amenities"]
            if any(wanted.lower() in a for a in have)
        ]
        if matched:
            reasons.append(f"Has {', '.join(matched)}")
            score += 5 * len(matched)
    if listing.get("furnished") and filters.get("furnished"):
        reasons.append("Furnished as requested")
        score += 5

    return min(score, 100), reasons or [GENERIC_REASON]
