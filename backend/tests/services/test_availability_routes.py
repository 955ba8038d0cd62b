"""Availability Routes — slot creation rules, bulk upsert, public listing and deletion guards."""

from datetime import date, timedelta

from urbanestate.models.booking import Booking
from tests.services.helpers import auth_headers

TOMORROW = date.today() + timedelta(days=1)


def _slot(day: date, start: str = "09:00", end: str = "09:30") -> dict:
    return {"slot_date": day.isoformat(), "start_time": start, "end_time": end}


async def test_create_slot(client, published_property, agent):
    res = await client.post(
        f"/api/v1/properties/{published_property.id}/slots",
        json=_slot(TOMORROW), headers=auth_headers(agent),
    )
    assert res.status_code == 201
    assert res.json()["is_available"] is True


async def test_duplicate_slot_is_conflict(client, published_property, agent):
    url = f"/api/v1/properties/{published_property.id}/slots"
    await client.post(url, json=_slot(TOMORROW), headers=auth_headers(agent))
    res = await client.post(url, json=_slot(TOMORROW), headers=auth_headers(agent))
    assert res.status_code == 409
    assert res.json()["error"]["message"] == "A slot already exists for this date and time"


async def test_past_and_inverted_slots_rejected(client, published_property, agent):
    url = f"/api/v1/properties/{published_property.id}/slots"
    yesterday = date.today() - timedelta(days=1)
    res = await client.post(url, json=_slot(yesterday), headers=auth_headers(agent))
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Cannot create slots in the past"
    res = await client.post(
        url, json=_slot(TOMORROW, "11:00", "10:00"), headers=auth_headers(agent),
    )
    assert res.status_code == 400


async def test_blocked_date_rejected(client, published_property, agent):
    await client.post(
        f"/api/v1/properties/{published_property.id}/blocks",
        json={"start_date": TOMORROW.isoformat(), "end_date": TOMORROW.isoformat()},
        headers=auth_headers(agent),
    )
    res = await client.post(
        f"/api/v1/properties/{published_property.id}/slots",
        json=_slot(TOMORROW), headers=auth_headers(agent),
    )
    assert res.status_code == 400
    assert "blocked" in res.json()["error"]["message"]


async def test_bulk_skips_invalid_and_existing(client, published_property, agent, open_slot):
    res = await client.post(
        f"/api/v1/properties/{published_property.id}/slots/bulk",
        json={"slots": [
            _slot(TOMORROW, "10:00", "10:30"),  # same start as open_slot
            _slot(TOMORROW, "14:00", "14:30"),
            _slot(TOMORROW, "14:00", "14:30"),
            _slot(date.today() - timedelta(days=2)),
        ]},
        headers=auth_headers(agent),
    )
    assert res.status_code == 201
    assert res.json() == {"count": 1}


async def test_bulk_with_nothing_valid_is_400(client, published_property, agent):
    res = await client.post(
        f"/api/v1/properties/{published_property.id}/slots/bulk",
        json={"slots": [_slot(date.today() - timedelta(days=2))]},
        headers=auth_headers(agent),
    )
    assert res.status_code == 400


async def test_public_list_shows_open_future_slots(client, published_property, agent, open_slot):
    res = await client.get(f"/api/v1/properties/{published_property.id}/slots")
    assert [s["id"] for s in res.json()] == [str(open_slot.id)]

    await client.patch(
        f"/api/v1/slots/{open_slot.id}", json={"is_available": False},
        headers=auth_headers(agent),
    )
    res = await client.get(f"/api/v1/properties/{published_property.id}/slots")
    assert res.json() == []

    res = await client.get(
        f"/api/v1/properties/{published_property.id}/slots/all",
        headers=auth_headers(agent),
    )
    assert len(res.json()) == 1


async def test_public_slots_of_draft_are_404(client, draft_property):
    res = await client.get(f"/api/v1/properties/{draft_property.id}/slots")
    assert res.status_code == 404


async def test_slot_with_active_booking_cannot_be_deleted(
    client, test_db, published_property, agent, open_slot,
):
    test_db.add(Booking(
        property_id=published_property.id, slot_id=open_slot.id,
        customer_name="Jane Doe", customer_phone="+971501234567",
        idempotency_key="bk_manual_000000000001", status="confirmed",
    ))
    await test_db.commit()
    res = await client.delete(f"/api/v1/slots/{open_slot.id}", headers=auth_headers(agent))
    assert res.status_code == 409


async def test_delete_free_slot(client, agent, open_slot, other_agent):
    res = await client.delete(
        f"/api/v1/slots/{open_slot.id}", headers=auth_headers(other_agent),
    )
    assert res.status_code == 403
    res = await client.delete(f"/api/v1/slots/{open_slot.id}", headers=auth_headers(agent))
    assert res.status_code == 204
