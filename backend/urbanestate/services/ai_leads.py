"""Lead Qualification — rule-based score merged with a model classification.

Invariants:
    - Always returns a complete classification (temperature, score, reasons, follow-up)
    - Any model failure, or no configured model, yields the rule-only classification

Design Decisions:
    - Uses the instant model at low temperature: classification, not prose
"""

import logging

from urbanestate.config import get_settings
from urbanestate.core.lead_scoring import (
    classify_rule_only, merge_lead_classification, rule_based_lead_score,
)
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_prompts import LEAD_SYSTEM_PROMPT, build_lead_prompt

logger = logging.getLogger(__name__)


async def qualify_lead(
    ai_client: AIClient | None,
    message: str,
    property_id: str | None = None,
    response_time: float | None = None,
    engagement_history: object | None = None,
) -> dict:
    rule = rule_based_lead_score(message, property_id, response_time)
    if ai_client is None:
        return classify_rule_only(rule)

    try:
        model_output = await ai_client.generate_json(
            model=get_settings().ai_model_instant,
            system=LEAD_SYSTEM_PROMPT,
            prompt=build_lead_prompt(message, property_id, engagement_history),
            max_tokens=500,
            temperature=0.3,
        )
    except Exception as e:
        logger.warning(f"Lead model classification failed, using rules: {e}")
        return classify_rule_only(rule)

    return merge_lead_classification(rule, model_output)
