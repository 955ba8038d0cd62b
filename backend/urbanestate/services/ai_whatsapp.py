"""WhatsApp Composer — ready-to-send tenant message templates for a listing.

Invariants:
    - Every message carries intent, label, emoji and message; gaps get defaults
    - property_context falls back to the listing title
    - Model failure is an upstream error (503)
"""

from urbanestate.config import get_settings
from urbanestate.services.ai_client import AIClient
from urbanestate.services.ai_prompts import WHATSAPP_SYSTEM_PROMPT, build_whatsapp_prompt

MESSAGE_DEFAULTS = {
    "intent": "general",
    "label": "Send Message",
    "emoji": "💬",
    "message": "",
}


def normalize_messages(output: dict, property_title: str) -> dict:
    raw = output.get("messages")
    messages = [
        {key: str(m.get(key) or default) for key, default in MESSAGE_DEFAULTS.items()}
        for m in (raw if isinstance(raw, list) else [])
        if isinstance(m, dict)
    ]
    return {
        "messages": messages,
        "property_context": str(output.get("propertyContext") or property_title),
    }


async def compose_messages(
    ai_client: AIClient,
    property_title: str,
    property_details: dict | None,
    agent_name: str,
) -> dict:
    output = await ai_client.generate_json(
        model=get_settings().ai_model_instant,
        system=WHATSAPP_SYSTEM_PROMPT,
        prompt=build_whatsapp_prompt(property_title, property_details or {}, agent_name),
        max_tokens=1000,
        temperature=0.6,
    )
    return normalize_messages(output if isinstance(output, dict) else {}, property_title)
