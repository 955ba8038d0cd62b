"""Admin Routes — role changes, booking overrides, listing removal and the audit log."""

from urbanestate.models.profile import Profile
from tests.services.helpers import auth_headers


async def test_change_role(client, admin, customer, fetch):
    res = await client.patch(
        f"/api/v1/admin/users/{customer.id}/role",
        json={"role": "agent"}, headers=auth_headers(admin),
    )
    assert res.status_code == 200
    assert res.json()["role"] == "agent"
    assert (await fetch(Profile, customer.id)).role == "agent"


async def test_admin_cannot_demote_self(client, admin):
    res = await client.patch(
        f"/api/v1/admin/users/{admin.id}/role",
        json={"role": "customer"}, headers=auth_headers(admin),
    )
    assert res.status_code == 400


async def test_role_change_is_audited(client, admin, customer):
    await client.patch(
        f"/api/v1/admin/users/{customer.id}/role",
        json={"role": "agent"}, headers=auth_headers(admin),
    )
    res = await client.get(
        "/api/v1/admin/audit-logs", params={"action": "role_changed"},
        headers=auth_headers(admin),
    )
    entries = res.json()
    assert len(entries) == 1
    assert entries[0]["metadata"] == {"previous_role": "customer", "new_role": "agent"}
    assert entries[0]["actor_id"] == str(admin.id)


async def test_admin_removes_listing(client, admin, published_property):
    res = await client.delete(
        f"/api/v1/admin/properties/{published_property.id}", headers=auth_headers(admin),
    )
    assert res.status_code == 204
    logs = await client.get("/api/v1/admin/audit-logs", headers=auth_headers(admin))
    assert "admin_property_deleted" in [e["action"] for e in logs.json()]


async def test_admin_booking_override(client, admin, published_property, open_slot):
    created = await client.post("/api/v1/bookings", json={
        "property_id": str(published_property.id), "slot_id": str(open_slot.id),
        "customer_name": "Jane Doe", "customer_phone": "+971501234567",
    })
    booking_id = created.json()["booking_id"]
    res = await client.patch(
        f"/api/v1/admin/bookings/{booking_id}/status",
        json={"status": "confirmed"}, headers=auth_headers(admin),
    )
    assert res.status_code == 200
    assert res.json()["status"] == "confirmed"
