"""Listing Summary — structured, scannable breakdown of a free-text listing description.

Invariants:
    - Always returns fields, red_flags, move_in_costs and overall_score (1..10)
    - Missing or malformed model values fall back to fixed defaults
    - Model failure is an upstream error (503); there is no rule-based summary
"""

from urbanestate.config import get_settings
from urbanestate.core.validation import as_finite_number
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_prompts import SUMMARY_SYSTEM_PROMPT, build_summary_prompt

DEFAULT_MOVE_IN_COSTS = "Not enough information to estimate"
DEFAULT_SCORE = 5
TRUTH_LABELS = ("confirmed", "unclear", "missing")


def _fields(raw: object) -> list[dict]:
    if not isinstance(raw, list):
        return []
    fields = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("label"):
            continue
        truth = item.get("truthLabel", item.get("truth_label"))
        fields.append({
            "label": str(item["label"]),
            "value": str(item.get("value") or ""),
            "truth_label": truth if truth in TRUTH_LABELS else "unclear",
            "note": str(item["note"]) if item.get("note") else None,
        })
    return fields


def normalize_summary(output: dict) -> dict:
    score = as_finite_number(output.get("overallScore"))
    red_flags = output.get("redFlags")
    return {
        "fields": _fields(output.get("fields")),
        "red_flags": [str(f) for f in red_flags] if isinstance(red_flags, list) else [],
        "move_in_costs": str(output.get("moveInCosts") or DEFAULT_MOVE_IN_COSTS),
        "overall_score": min(max(round(score), 1), 10) if score else DEFAULT_SCORE,
    }


async def summarize_listing(
    ai_client: AIClient,
    description: str,
    price: float | None = None,
    currency: str | None = None,
) -> dict:
    output = await ai_client.generate_json(
        model=get_settings().ai_model_fast,
        system=SUMMARY_SYSTEM_PROMPT,
        prompt=build_summary_prompt(description, price, currency),
        max_tokens=1200,
        temperature=0.3,
    )
    return normalize_summary(output if isinstance(output, dict) else {})
