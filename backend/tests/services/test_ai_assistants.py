"""AI Assistant Routes — natural-language search, listing summary and WhatsApp composer.

Invariants:
    - All three answer 503 without a model
    - Search returns only published listings, scored by the match rules
    - Search explanation failures fall back to a fixed sentence; filter extraction
      failures are a 503
    - Summary and WhatsApp output is normalized to fixed defaults
"""

import math

from tests.services.helpers import public_headers
from tests.services.mock_ai import ScriptedAIClient

SEARCH_URL = "/api/v1/ai/search"
SUMMARY_URL = "/api/v1/ai/summarize"
WHATSAPP_URL = "/api/v1/ai/whatsapp"


# ─── Search ─────────────────────────────────────────────────────

async def test_search_without_model_is_503(client):
    res = await client.post(SEARCH_URL, json={"query": "2 bed in Dubai"})
    assert res.status_code == 503


async def test_search_returns_scored_published_listings(
    client, published_property, draft_property, ai_client_override,
):
    ai = ScriptedAIClient(
        {"city": "Dubai", "beds": 2, "maxRent": 9000, "amenities": ["pool"]},
        "One bright two-bed in Marina fits your budget.",
    )
    ai_client_override["client"] = ai
    res = await client.post(SEARCH_URL, json={
        "query": "2 bed in Dubai under 9000 with a pool",
    })
    assert res.status_code == 200
    body = res.json()
    assert [r["property"]["id"] for r in body["results"]] == [str(published_property.id)]
    match = body["results"][0]
    assert match["match_score"] == 95
    assert match["match_reasons"] == [
        "Located in Dubai",
        "2 bedroom(s) meet your requirement",
        "Within your budget at AED 8,000",
        "Has pool",
    ]
    assert body["explanation"] == "One bright two-bed in Marina fits your budget."
    assert body["extracted_filters"]["city"] == "Dubai"
    assert body["extracted_filters"]["max_rent"] == 9000
    assert body["original_query"] == "2 bed in Dubai under 9000 with a pool"
    assert [c["kind"] for c in ai.calls] == ["json", "text"]
    assert [c["model"] for c in ai.calls] == ["test-model-fast", "test-model-instant"]


async def test_search_filters_exclude_over_budget(client, published_property, ai_client_override):
    ai_client_override["client"] = ScriptedAIClient(
        {"city": "Dubai", "maxRent": 5000}, RuntimeError("model down"),
    )
    res = await client.post(SEARCH_URL, json={"query": "cheap place in Dubai"})
    body = res.json()
    assert body["results"] == []
    assert body["explanation"] == "Found 0 properties matching your criteria."


async def test_search_explanation_failure_uses_fixed_text(
    client, published_property, ai_client_override,
):
    ai_client_override["client"] = ScriptedAIClient({"city": "Dubai"}, RuntimeError("down"))
    res = await client.post(SEARCH_URL, json={"query": "anything in Dubai"})
    assert res.status_code == 200
    assert res.json()["explanation"] == "Found 1 properties matching your criteria."


async def test_search_extraction_failure_is_503(client, ai_client_override):
    ai_client_override["client"] = ScriptedAIClient(RuntimeError("boom"))
    res = await client.post(SEARCH_URL, json={"query": "2 bed in Dubai"})
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "AI_PROVIDER_ERROR"


async def test_search_markup_only_query_is_400(client, ai_client_override):
    ai = ScriptedAIClient()
    ai_client_override["client"] = ai
    res = await client.post(SEARCH_URL, json={"query": "<script>x</script>"})
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "query"
    assert ai.calls == []


async def test_search_uses_search_rate_preset(client, ai_client_override):
    ai_client_override["client"] = ScriptedAIClient({}, "Nothing yet.")
    res = await client.post(
        SEARCH_URL, json={"query": "somewhere quiet"}, headers=public_headers(),
    )
    assert res.status_code == 200
    assert res.headers["X-RateLimit-Remaining"] == "14"


# ─── Listing summary ────────────────────────────────────────────

async def test_summary_without_model_is_503(client):
    res = await client.post(SUMMARY_URL, json={"description": "Two-bed flat"})
    assert res.status_code == 503


async def test_summary_normalizes_model_output(client, ai_client_override):
    ai = ScriptedAIClient({
        "fields": [
            {"label": "Deposit", "value": "1 month", "truthLabel": "confirmed"},
            {"label": "Utilities", "truthLabel": "maybe"},
            {"value": "no label"},
        ],
        "redFlags": ["Payment before viewing"],
        "overallScore": 12.4,
    })
    ai_client_override["client"] = ai
    res = await client.post(SUMMARY_URL, json={
        "description": "Two-bed flat, one month deposit", "price": 8000, "currency": "aed",
    })
    assert res.status_code == 200
    assert res.json() == {
        "fields": [
            {"label": "Deposit", "value": "1 month", "truth_label": "confirmed", "note": None},
            {"label": "Utilities", "value": "", "truth_label": "unclear", "note": None},
        ],
        "red_flags": ["Payment before viewing"],
        "move_in_costs": "Not enough information to estimate",
        "overall_score": 10,
    }
    assert "LISTED PRICE: AED 8000" in ai.calls[0]["prompt"]
    assert ai.calls[0]["model"] == "test-model-fast"


async def test_summary_non_finite_score_uses_default(client, ai_client_override):
    ai_client_override["client"] = ScriptedAIClient({"overallScore": math.nan})
    res = await client.post(SUMMARY_URL, json={"description": "Studio"})
    assert res.json()["overall_score"] == 5


async def test_summary_model_failure_is_503(client, ai_client_override):
    ai_client_override["client"] = ScriptedAIClient(RuntimeError("boom"))
    res = await client.post(SUMMARY_URL, json={"description": "Studio"})
    assert res.status_code == 503


# ─── WhatsApp composer ──────────────────────────────────────────

async def test_whatsapp_without_model_is_503(client):
    res = await client.post(WHATSAPP_URL, json={
        "property_title": "Marina two-bed", "agent_name": "Sam",
    })
    assert res.status_code == 503


async def test_whatsapp_fills_message_defaults(client, ai_client_override):
    ai = ScriptedAIClient({
        "messages": [{"intent": "viewing", "message": "Can I view it on Saturday?"}, "junk"],
    })
    ai_client_override["client"] = ai
    res = await client.post(WHATSAPP_URL, json={
        "property_title": "Marina two-bed", "agent_name": "Sam",
        "property_details": {"rent": 8000, "beds": 2},
    })
    assert res.status_code == 200
    assert res.json() == {
        "messages": [{
            "intent": "viewing", "label": "Send Message", "emoji": "💬",
            "message": "Can I view it on Saturday?",
        }],
        "property_context": "Marina two-bed",
    }
    assert "AGENT: Sam" in ai.calls[0]["prompt"]
    assert ai.calls[0]["model"] == "test-model-instant"


async def test_whatsapp_markup_only_agent_name_is_400(client, ai_client_override):
    ai = ScriptedAIClient()
    ai_client_override["client"] = ai
    res = await client.post(WHATSAPP_URL, json={
        "property_title": "Marina two-bed", "agent_name": "<b></b>",
    })
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "agent_name"
    assert ai.calls == []
