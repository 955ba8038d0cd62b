"""Compliance Check — regex pre-screen, optionally followed by a model review.

Invariants:
    - quick mode never calls the model
    - full mode short-circuits on any critical regex violation (no model call)
    - full mode degrades to the quick result when the model fails or is not configured
    - sanitize mode never calls the model; it adds the cleaned text and the list of changes
"""

import logging

from urbanestate.config import get_settings
from urbanestate.core.compliance import (
    has_critical, merge_compliance, quick_compliance_check, sanitize_listing_text,
)
from urbanestate.core.domain_types import ComplianceMode
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_prompts import COMPLIANCE_SYSTEM_PROMPT, build_compliance_prompt

logger = logging.getLogger(__name__)


async def check_compliance(
    ai_client: AIClient | None, text: str, mode: ComplianceMode = ComplianceMode.FULL,
) -> dict:
    quick = quick_compliance_check(text)
    if mode == ComplianceMode.SANITIZE:
        sanitized, changes = sanitize_listing_text(text)
        return {**quick, "sanitized_text": sanitized, "changes": changes}
    if mode == ComplianceMode.QUICK or has_critical(quick) or ai_client is None:
        return quick

    try:
        model_output = await ai_client.generate_json(
            model=get_settings().ai_model_fast,
            system=COMPLIANCE_SYSTEM_PROMPT,
            prompt=build_compliance_prompt(text),
            max_tokens=1000,
            temperature=0.1,
        )
    except Exception as e:
        logger.warning(f"Model compliance check failed, using regex result: {e}")
        return quick

    return merge_compliance(quick, model_output)
