"""Marketplace Routes — items, public purchase requests and admin decisions."""

from sqlalchemy import select

from urbanestate.models.lead import Lead
from urbanestate.models.marketplace_request import MarketplaceRequest
from tests.services.helpers import auth_headers, public_headers


def _request(**overrides) -> dict:
    body = {
        "customer_name": "Nora Buyer",
        "customer_phone": "+971 55 765 4321",
        "customer_email": "nora@example.com",
        "customer_note": "Can pick up this weekend",
    }
    body.update(overrides)
    return body


async def test_public_item_listing(client, sofa):
    res = await client.get("/api/v1/marketplace/items", params={"category": "furniture"})
    assert [i["id"] for i in res.json()] == [str(sofa.id)]
    res = await client.get("/api/v1/marketplace/items", params={"max_price": 100})
    assert res.json() == []


async def test_agent_creates_item(client, agent, customer):
    item = {
        "title": "Dining table", "category": "furniture", "price": 450,
        "condition": "like_new", "city": "Dubai",
    }
    res = await client.post("/api/v1/marketplace/items", json=item, headers=auth_headers(agent))
    assert res.status_code == 201
    assert res.json()["seller_id"] == str(agent.id)
    res = await client.post("/api/v1/marketplace/items", json=item, headers=auth_headers(customer))
    assert res.status_code == 403


async def test_purchase_request_and_duplicate(client, sofa):
    url = f"/api/v1/marketplace/items/{sofa.id}/requests"
    first = await client.post(url, json=_request(), headers=public_headers())
    assert first.status_code == 201
    assert first.json()["duplicate"] is False
    second = await client.post(url, json=_request(), headers=public_headers())
    assert second.status_code == 200
    assert second.json()["duplicate"] is True
    assert second.json()["request_id"] == first.json()["request_id"]


async def test_email_required(client, sofa):
    res = await client.post(
        f"/api/v1/marketplace/items/{sofa.id}/requests", json=_request(customer_email=" "),
    )
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "customer_email"


async def test_unavailable_item_conflicts(client, test_db, sofa):
    sofa.status = "sold"
    await test_db.commit()
    res = await client.post(f"/api/v1/marketplace/items/{sofa.id}/requests", json=_request())
    assert res.status_code == 409


async def test_approval_creates_warm_lead(client, sofa, admin, agent, test_session_factory):
    created = await client.post(
        f"/api/v1/marketplace/items/{sofa.id}/requests", json=_request(),
    )
    request_id = created.json()["request_id"]

    res = await client.post(
        f"/api/v1/admin/marketplace/requests/{request_id}/approve",
        json={"note": "Seller confirmed"}, headers=auth_headers(admin),
    )
    assert res.status_code == 200
    assert res.json()["status"] == "approved"
    assert res.json()["approved_at"] is not None

    async with test_session_factory() as db:
        leads = (await db.execute(select(Lead))).scalars().all()
    assert len(leads) == 1
    assert leads[0].agent_id == agent.id
    assert leads[0].score == 60
    assert leads[0].temperature == "warm"
    assert leads[0].source == "marketplace_approved"


async def test_rejection(client, sofa, admin, test_session_factory):
    created = await client.post(
        f"/api/v1/marketplace/items/{sofa.id}/requests", json=_request(),
    )
    request_id = created.json()["request_id"]
    res = await client.post(
        f"/api/v1/admin/marketplace/requests/{request_id}/reject",
        headers=auth_headers(admin),
    )
    assert res.json()["status"] == "rejected"
    listed = await client.get(
        "/api/v1/admin/marketplace/requests", params={"status": "rejected"},
        headers=auth_headers(admin),
    )
    assert [r["id"] for r in listed.json()] == [request_id]
    async with test_session_factory() as db:
        assert (await db.execute(select(Lead))).scalars().all() == []
        stored = await db.scalar(select(MarketplaceRequest))
    assert stored.rejected_at is not None
