"""Fraud Rules — rule-based listing risk flags and model-risk merging.

Invariants:
    - Rule flags: pricing (rent < 60% of area average, high), photos (none, medium),
      description (shorter than 50 chars, low)
    - Rule score = sum of severity weights (high 30, medium 15, low 5)
    - Combined risk = min(max(rule score, model risk), 100) — model can only raise risk
    - Recommendation: >= 70 reject, >= 40 review, else approve
"""

from urbanestate.core.domain_types import FraudRecommendation
from urbanestate.core.validation import as_finite_number

SEVERITY_WEIGHTS = {"high": 30, "medium": 15, "low": 5}
UNDERPRICED_RATIO = 0.6
MIN_DESCRIPTION_LENGTH = 50

_FLAG_TYPES = {"pricing", "photos", "description", "account"}


def area_average(rents: list[float]) -> int | None:
    if not rents:
        return None
    return round(sum(rents) / len(rents))


def rule_based_fraud_flags(
    rent: float,
    currency: str,
    photo_count: int,
    description: str | None,
    area_avg_price: float | None,
) -> list[dict]:
    flags = []
    if area_avg_price and rent < area_avg_price * UNDERPRICED_RATIO:
        pct_below = round((1 - rent / area_avg_price) * 100)
        flags.append({
            "type": "pricing",
            "severity": "high",
            "description": (
                f"Rent ({currency} {rent:g}) is {pct_below}% below area average "
                f"({currency} {area_avg_price:g})"
            ),
        })
    if photo_count == 0:
        flags.append({
            "type": "photos",
            "severity": "medium",
            "description": "No photos uploaded. Listings without photos may indicate fraud.",
        })
    if description and len(description) < MIN_DESCRIPTION_LENGTH:
        flags.append({
            "type": "description",
            "severity": "low",
            "description": "Very short description may indicate low-effort or fraudulent listing.",
        })
    return flags


def rule_score(flags: list[dict]) -> int:
    return sum(SEVERITY_WEIGHTS.get(f["severity"], 0) for f in flags)


def recommendation_for(risk_score: int) -> FraudRecommendation:
    if risk_score >= 70:
        return FraudRecommendation.REJECT
    if risk_score >= 40:
        return FraudRecommendation.REVIEW
    return FraudRecommendation.APPROVE


def _normalize_model_flags(raw: object) -> list[dict]:
    if not isinstance(raw, list):
        return []
    flags = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("description"):
            continue
        f_type = item.get("type")
        severity = item.get("severity")
        flags.append({
            "type": f_type if f_type in _FLAG_TYPES else "description",
            "severity": severity if severity in SEVERITY_WEIGHTS else "low",
            "description": str(item["description"]),
        })
    return flags


def merge_fraud_analysis(rule_flags: list[dict], model_output: dict | None) -> dict:
    """Merge rule flags with model output; None means the model was unavailable."""
    model_output = model_output or {}
    model_risk = as_finite_number(
        model_output.get("riskScore", model_output.get("risk_score", 0)),
    ) or 0

    combined = int(min(max(rule_score(rule_flags), model_risk), 100))
    return {
        "risk_score": combined,
        "flags": [*rule_flags, *_normalize_model_flags(model_output.get("flags"))],
        "recommendation": recommendation_for(combined).value,
    }
