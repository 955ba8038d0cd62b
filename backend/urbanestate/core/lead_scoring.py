"""Lead Scoring Rules — keyword/threshold heuristics and model-score merging.

Invariants:
    - rule_based_lead_score is deterministic and starts from a neutral 50
    - Final scores are clamped to 0..100
    - Temperature thresholds: >= 80 hot, >= 40 warm, else cold
    - Merged reasons list is capped at 5 entries, rule reasons first

Design Decisions:
    - Substring matching on the lowercased message (not tokenized) so multi-word
      phrases like "move in" and "when can i" match naturally
    - Default follow-up text/delay derived from the final score, used whenever
      the model omits them or is unavailable
"""

from dataclasses import dataclass, field

from urbanestate.core.domain_types import LeadTemperature
from urbanestate.core.validation import as_finite_number

NEUTRAL_SCORE = 50
MAX_REASONS = 5

HOT_KEYWORDS = (
    "viewing", "visit", "move in", "deposit", "sign",
    "lease", "contract", "when can i", "available", "book",
)
WARM_KEYWORDS = ("interested", "tell me more", "photos", "details", "price", "rent")
COLD_KEYWORDS = ("just looking", "maybe", "not sure", "sometime")


@dataclass
class RuleScore:
    score: int
    reasons: list[str] = field(default_factory=list)


def rule_based_lead_score(
    message: str,
    property_id: str | None = None,
    response_time: float | None = None,
) -> RuleScore:
    """Score a lead message from keywords, responsiveness and specificity.

    response_time is in minutes; None or 0 means unknown.
    """
    score = NEUTRAL_SCORE
    reasons: list[str] = []
    lowered = message.lower()

    for kw in HOT_KEYWORDS:
        if kw in lowered:
            score += 10
            reasons.append(f'Mentions "{kw}" - high intent')
    for kw in WARM_KEYWORDS:
        if kw in lowered:
            score += 5
            reasons.append(f'Mentions "{kw}" - moderate intent')
    for kw in COLD_KEYWORDS:
        if kw in lowered:
            score -= 10
            reasons.append(f'Mentions "{kw}" - low intent')

    if response_time:
        if response_time < 60:
            score += 10
            reasons.append("Very fast response - high engagement")
        elif response_time > 1440:
            score -= 5
            reasons.append("Slow response - may indicate low urgency")

    if property_id:
        score += 5
        reasons.append("Inquiring about a specific property")

    return RuleScore(score=score, reasons=reasons)


def clamp_score(score: float) -> int:
    return int(min(max(score, 0), 100))


def temperature_for(score: int) -> LeadTemperature:
    if score >= 80:
        return LeadTemperature.HOT
    if score >= 40:
        return LeadTemperature.WARM
    return LeadTemperature.COLD


def default_follow_up(score: int) -> str:
    if score >= 80:
        return "Respond immediately. Schedule a viewing and share property documents."
    if score >= 40:
        return "Send property details and ask about their timeline and preferences."
    return "Add to nurture list. Send weekly property digest."


def default_follow_up_delay(score: int) -> int:
    """Minutes to wait before following up."""
    if score >= 80:
        return 60
    if score >= 40:
        return 1440
    return 4320


def _as_number(value: object, fallback: float) -> float:
    number = as_finite_number(value)
    return fallback if number is None else number


def classify_rule_only(rule: RuleScore) -> dict:
    """Classification used when no model output is available."""
    final = clamp_score(rule.score)
    return {
        "temperature": temperature_for(final).value,
        "score": final,
        "reasons": list(rule.reasons),
        "suggested_follow_up": default_follow_up(final),
        "follow_up_delay": default_follow_up_delay(final),
    }


def merge_lead_classification(rule: RuleScore, model_output: dict) -> dict:
    """Average the rule score with the model score (model defaults to neutral)."""
    model_score = _as_number(model_output.get("score"), NEUTRAL_SCORE)
    final = clamp_score(round((rule.score + model_score) / 2))

    model_reasons = model_output.get("reasons")
    if not isinstance(model_reasons, list):
        model_reasons = []
    reasons = [*rule.reasons, *(str(r) for r in model_reasons)][:MAX_REASONS]

    follow_up = model_output.get("suggestedFollowUp") or model_output.get("suggested_follow_up")
    delay = _as_number(
        model_output.get("followUpDelay", model_output.get("follow_up_delay")), 0,
    )
    return {
        "temperature": temperature_for(final).value,
        "score": final,
        "reasons": reasons,
        "suggested_follow_up": str(follow_up) if follow_up else default_follow_up(final),
        "follow_up_delay": int(delay) if delay > 0 else default_follow_up_delay(final),
    }
