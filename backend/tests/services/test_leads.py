"""Lead Routes — capture returns immediately, qualification runs in the background.

Design Decisions:
    - Background tasks run before the httpx test client returns (FastAPI behavior),
      so the stored classification can be asserted right after the response
"""

from uuid import UUID, uuid4

from urbanestate.models.lead import Lead
from tests.services.helpers import auth_headers
from tests.services.mock_ai import ScriptedAIClient

HOT_MESSAGE = "I want to book a viewing, when can I move in?"


async def test_capture_returns_neutral_lead(client, published_property, agent):
    res = await client.post("/api/v1/leads", json={
        "message": HOT_MESSAGE, "property_id": str(published_property.id),
        "contact_name": "Sam <b>Lee</b>",
    })
    assert res.status_code == 201
    body = res.json()
    assert body["temperature"] == "warm"
    assert body["score"] == 50
    assert body["agent_id"] == str(agent.id)
    assert body["contact_name"] == "Sam Lee"


async def test_rule_only_qualification_without_ai(client, published_property, fetch):
    res = await client.post("/api/v1/leads", json={
        "message": HOT_MESSAGE, "property_id": str(published_property.id),
    })
    lead = await fetch(Lead, UUID(res.json()["id"]))
    # viewing, move in, when can i, book (+40) and a specific property (+5)
    assert lead.score == 95
    assert lead.temperature == "hot"
    assert lead.follow_up_delay == 60


async def test_model_score_is_averaged(client, published_property, fetch, ai_client_override):
    ai = ScriptedAIClient({
        "score": 55, "reasons": ["Asked about timing"],
        "suggestedFollowUp": "Offer Saturday viewing", "followUpDelay": 90,
    })
    ai_client_override["client"] = ai
    res = await client.post("/api/v1/leads", json={
        "message": HOT_MESSAGE, "property_id": str(published_property.id),
    })
    lead = await fetch(Lead, UUID(res.json()["id"]))
    assert lead.score == 75
    assert lead.temperature == "warm"
    assert lead.suggested_follow_up == "Offer Saturday viewing"
    assert lead.follow_up_delay == 90
    assert len(ai.calls) == 1


async def test_model_failure_keeps_rule_score(client, published_property, fetch, ai_client_override):
    ai_client_override["client"] = ScriptedAIClient(RuntimeError("model down"))
    res = await client.post("/api/v1/leads", json={
        "message": HOT_MESSAGE, "property_id": str(published_property.id),
    })
    assert res.status_code == 201
    lead = await fetch(Lead, UUID(res.json()["id"]))
    assert lead.score == 95


async def test_agent_required(client):
    res = await client.post("/api/v1/leads", json={"message": "Hello there"})
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "agent_id"


async def test_unknown_property_is_404(client):
    res = await client.post("/api/v1/leads", json={
        "message": "Hello there", "property_id": str(uuid4()),
    })
    assert res.status_code == 404


async def test_blank_message_after_sanitizing(client, agent):
    res = await client.post("/api/v1/leads", json={
        "message": "<script>alert(1)</script>", "agent_id": str(agent.id),
    })
    assert res.status_code == 400


async def test_agents_see_own_leads(client, published_property, agent, other_agent, admin):
    await client.post("/api/v1/leads", json={
        "message": "Is it still available?", "property_id": str(published_property.id),
    })
    mine = await client.get("/api/v1/leads", headers=auth_headers(agent))
    assert len(mine.json()) == 1
    theirs = await client.get("/api/v1/leads", headers=auth_headers(other_agent))
    assert theirs.json() == []
    everyone = await client.get("/api/v1/leads", headers=auth_headers(admin))
    assert len(everyone.json()) == 1


async def test_update_status(client, published_property, agent, other_agent):
    created = await client.post("/api/v1/leads", json={
        "message": "Is it still available?", "property_id": str(published_property.id),
    })
    lead_id = created.json()["id"]
    res = await client.patch(
        f"/api/v1/leads/{lead_id}", json={"status": "contacted"},
        headers=auth_headers(other_agent),
    )
    assert res.status_code == 403
    res = await client.patch(
        f"/api/v1/leads/{lead_id}", json={"status": "contacted", "notes": "Called"},
        headers=auth_headers(agent),
    )
    assert res.json()["status"] == "contacted"
