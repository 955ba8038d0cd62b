"""Listing Copilot — bullet points to a compliant English listing plus translations.

Invariants:
    - The English draft is always generated first and checked with the regex pre-screen
    - A non-compliant draft raises ComplianceRejectedError (422) carrying the draft
    - Translations run one language at a time; a failed language gets a placeholder
      and the rest of the batch continues
    - A failed English draft is an upstream error (503), never a placeholder

Design Decisions:
    - Market codes expand in request order and deduplicate, so ["ar", "gcc"] is ["ar", "en"]
"""

import logging

from urbanestate.config import get_settings
from urbanestate.core.compliance import quick_compliance_check
from urbanestate.core.errors import AIProviderError, ComplianceRejectedError
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_prompts import (
    COPILOT_SYSTEM_PROMPT, TRANSLATION_SYSTEM_PROMPT,
    build_copilot_prompt, build_translation_prompt,
)

logger = logging.getLogger(__name__)

MARKET_LANGUAGES = {
    "gcc": ["en", "ar"],
    "eu": ["en", "es", "it", "fr"],
}
BASE_LANGUAGE = "en"


def expand_languages(languages: list[str]) -> list[str]:
    expanded: list[str] = []
    for code in languages:
        code = code.strip().lower()
        for lang in MARKET_LANGUAGES.get(code, [code]):
            if lang and lang not in expanded:
                expanded.append(lang)
    return expanded or [BASE_LANGUAGE]


def translation_placeholder(lang: str) -> dict:
    text = f"[Translation pending - {lang}]"
    return {"title": text, "description": text}


def _as_listing(output: dict) -> dict | None:
    title, description = output.get("title"), output.get("description")
    if not isinstance(title, str) or not isinstance(description, str):
        return None
    return {"title": title.strip(), "description": description.strip()}


async def _translate(ai_client: AIClient, model: str, base: dict, lang: str) -> dict:
    try:
        output = await ai_client.generate_json(
            model=model,
            system=TRANSLATION_SYSTEM_PROMPT,
            prompt=build_translation_prompt(base["title"], base["description"], lang),
            temperature=0.3,
        )
    except Exception as e:
        logger.warning(f"Translation to {lang} failed: {e}")
        return translation_placeholder(lang)
    return _as_listing(output) or translation_placeholder(lang)


async def generate_listing(
    ai_client: AIClient,
    bullet_points: str,
    tone: str,
    languages: list[str],
    property_data: dict | None = None,
) -> dict:
    model = get_settings().ai_model_fast
    output = await ai_client.generate_json(
        model=model,
        system=COPILOT_SYSTEM_PROMPT,
        prompt=build_copilot_prompt(bullet_points, tone, property_data),
        temperature=0.7,
    )
    base = _as_listing(output)
    if base is None:
        raise AIProviderError(
            "Copilot response missing title or description", "invalid_response",
        )

    compliance = quick_compliance_check(f"{base['title']} {base['description']}")
    if not compliance["passed"]:
        raise ComplianceRejectedError(compliance["violations"], base)

    translations = {}
    for lang in expand_languages(languages):
        if lang == BASE_LANGUAGE:
            continue
        translations[lang] = await _translate(ai_client, model, base, lang)

    return {**base, "translations": translations}
