import pytest
from sqlalchemy import select

from app.models.listing import Listing
from app.models.notification import Notification
from tests.fixtures_seed import create_listing_via_api


async def _report_count(db_session, listing_id: str) -> int:
    return (await db_session.execute(select(Listing.report_count).where(Listing.id == listing_id))).scalar_one()


@pytest.mark.asyncio
async def test_report_increments_counter_and_notifies_owner(client, db_session, seed_landlord, seed_tenant):
    listing = await create_listing_via_api(client, seed_landlord)

    r = await client.post(
        f"/v1/apartments/{listing['id']}/reports",
        json={"reason": "Photos do not match the property"},
        headers=seed_tenant["headers"],
    )
    assert r.status_code == 201
    assert r.json()["status"] == "pending"
    assert await _report_count(db_session, listing["id"]) == 1

    notes = (
        await db_session.execute(select(Notification).where(Notification.user_id == seed_landlord["user_id"]))
    ).scalars().all()
    assert len(notes) == 1
    assert notes[0].role == "landlord"
    assert notes[0].meta["listing_id"] == listing["id"]


@pytest.mark.asyncio
async def test_duplicate_report_is_conflict(client, db_session, seed_landlord, seed_tenant):
    listing = await create_listing_via_api(client, seed_landlord)
    url = f"/v1/apartments/{listing['id']}/reports"

    await client.post(url, json={"reason": "Scam"}, headers=seed_tenant["headers"])
    r = await client.post(url, json={"reason": "Scam again"}, headers=seed_tenant["headers"])
    assert r.status_code == 409
    assert r.json()["code"] == "already_reported"
    assert await _report_count(db_session, listing["id"]) == 1


@pytest.mark.asyncio
async def test_report_requires_tenant_and_existing_listing(client, seed_landlord, seed_tenant):
    listing = await create_listing_via_api(client, seed_landlord)

    r = await client.post(
        f"/v1/apartments/{listing['id']}/reports", json={"reason": "x"}, headers=seed_landlord["headers"]
    )
    assert r.status_code == 403

    r = await client.post("/v1/apartments/apt_missing/reports", json={"reason": "x"}, headers=seed_tenant["headers"])
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_review_then_resolve_decrements_once(
    client, db_session, seed_landlord, seed_tenant, seed_other_tenant, seed_admin
):
    listing = await create_listing_via_api(client, seed_landlord)
    url = f"/v1/apartments/{listing['id']}/reports"
    report_id = (await client.post(url, json={"reason": "Fake"}, headers=seed_tenant["headers"])).json()["id"]
    await client.post(url, json={"reason": "Wrong price"}, headers=seed_other_tenant["headers"])
    assert await _report_count(db_session, listing["id"]) == 2

    pending = (
        await client.get("/v1/admin/reports", params={"status": "pending"}, headers=seed_admin["headers"])
    ).json()
    assert pending["total"] == 2

    r = await client.post(f"/v1/admin/reports/{report_id}/review", headers=seed_admin["headers"])
    assert r.status_code == 200
    assert r.json()["status"] == "reviewed"
    r = await client.post(f"/v1/admin/reports/{report_id}/review", headers=seed_admin["headers"])
    assert r.status_code == 409

    r = await client.post(f"/v1/admin/reports/{report_id}/resolve", headers=seed_admin["headers"])
    assert r.status_code == 200
    assert r.json()["status"] == "resolved"
    assert r.json()["resolved_at"] is not None
    assert await _report_count(db_session, listing["id"]) == 1

    r = await client.post(f"/v1/admin/reports/{report_id}/resolve", headers=seed_admin["headers"])
    assert r.status_code == 409
    assert r.json()["code"] == "already_in_state"
    assert await _report_count(db_session, listing["id"]) == 1

    reporter_notes = (
        await db_session.execute(select(Notification).where(Notification.user_id == seed_tenant["user_id"]))
    ).scalars().all()
    assert [n.meta["report_id"] for n in reporter_notes] == [report_id]


@pytest.mark.asyncio
async def test_admin_endpoints_require_admin(client, seed_tenant):
    assert (await client.get("/v1/admin/reports", headers=seed_tenant["headers"])).status_code == 403
    assert (await client.get("/v1/admin/stats", headers=seed_tenant["headers"])).status_code == 403
    assert (await client.delete("/v1/admin/apartments/apt_x", headers=seed_tenant["headers"])).status_code == 403
