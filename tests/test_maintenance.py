from datetime import timedelta

import pytest
from sqlalchemy import select

from app.core.ids import utcnow
from app.models.listing import Listing
from app.models.notification import Notification
from app.models.user_listing import UserListingEntry
from tests.fixtures_seed import create_listing_via_api, listing_body

INTERNAL = {"X-Internal-Admin-Key": "test-internal-key"}


@pytest.mark.asyncio
async def test_internal_routes_require_admin_key(client):
    r = await client.post("/v1/internal/api-keys", json={"user_id": "usr_1", "role": "tenant"})
    assert r.status_code == 403

    r = await client.post(
        "/v1/internal/api-keys",
        json={"user_id": "usr_1", "role": "tenant"},
        headers={"X-Internal-Admin-Key": "wrong"},
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_issue_and_revoke_api_key(client):
    r = await client.post("/v1/internal/api-keys", json={"user_id": "usr_42", "role": "agent"}, headers=INTERNAL)
    assert r.status_code == 201
    issued = r.json()
    assert issued["plain_key"].startswith("ahk_")

    me = await client.get("/v1/me", headers={"X-API-Key": issued["plain_key"]})
    assert me.json()["user_id"] == "usr_42"
    assert me.json()["role"] == "agent"

    r = await client.post(f"/v1/internal/api-keys/{issued['api_key_id']}/revoke", headers=INTERNAL)
    assert r.json() == {"status": "revoked"}
    r = await client.post(f"/v1/internal/api-keys/{issued['api_key_id']}/revoke", headers=INTERNAL)
    assert r.status_code == 409

    me = await client.get("/v1/me", headers={"X-API-Key": issued["plain_key"]})
    assert me.status_code == 401


@pytest.mark.asyncio
async def test_issue_rejects_unknown_role(client):
    r = await client.post("/v1/internal/api-keys", json={"user_id": "usr_1", "role": "owner"}, headers=INTERNAL)
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_reconcile_backfills_missing_entries(client, db_session, seed_landlord):
    await create_listing_via_api(client, seed_landlord)

    # a listing written without its index entry
    orphan = Listing(owner_id=seed_landlord["user_id"], owner_role="landlord", **listing_body(title="Orphan"))
    db_session.add(orphan)
    await db_session.commit()

    r = await client.post("/v1/internal/maintenance/reconcile-index", headers=INTERNAL)
    assert r.json() == {"inserted": 1, "pruned": 0}

    entries = (
        await db_session.execute(select(UserListingEntry).where(UserListingEntry.listing_id == orphan.id))
    ).scalars().all()
    assert len(entries) == 1

    r = await client.post("/v1/internal/maintenance/reconcile-index", headers=INTERNAL)
    assert r.json() == {"inserted": 0, "pruned": 0}


@pytest.mark.asyncio
async def test_reconcile_prunes_stale_entries_on_request(client, seed_landlord, seed_admin):
    listing = await create_listing_via_api(client, seed_landlord)
    await client.delete(f"/v1/admin/apartments/{listing['id']}", headers=seed_admin["headers"])

    r = await client.post("/v1/internal/maintenance/reconcile-index", headers=INTERNAL)
    assert r.json() == {"inserted": 0, "pruned": 0}

    r = await client.post(
        "/v1/internal/maintenance/reconcile-index", params={"prune_stale": True}, headers=INTERNAL
    )
    assert r.json() == {"inserted": 0, "pruned": 1}


@pytest.mark.asyncio
async def test_purge_expired_notifications(client, db_session):
    db_session.add_all([
        Notification(user_id="usr_1", role="tenant", message="gone", meta={}, expires_at=utcnow() - timedelta(days=1)),
        Notification(user_id="usr_1", role="tenant", message="kept", meta={}, expires_at=utcnow() + timedelta(days=1)),
    ])
    await db_session.commit()

    r = await client.post("/v1/internal/maintenance/purge-notifications", headers=INTERNAL)
    assert r.json() == {"purged": 1}

    left = (await db_session.execute(select(Notification.message))).scalars().all()
    assert left == ["kept"]
