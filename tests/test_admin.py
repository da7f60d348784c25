import pytest

from app.services.auth import Actor
from tests.fixtures_seed import create_listing_via_api


@pytest.mark.asyncio
async def test_delete_writes_audit_entry(client, seed_landlord, seed_admin, seed_superadmin):
    listing = await create_listing_via_api(client, seed_landlord)

    r = await client.delete(
        f"/v1/admin/apartments/{listing['id']}",
        headers={**seed_admin["headers"], "X-Forwarded-For": "192.0.2.10"},
    )
    assert r.status_code == 200
    assert (await client.get(f"/v1/apartments/{listing['id']}")).status_code == 404

    r = await client.delete(f"/v1/admin/apartments/{listing['id']}", headers=seed_admin["headers"])
    assert r.status_code == 404

    logs = (await client.get("/v1/admin/audit-logs", headers=seed_superadmin["headers"])).json()
    assert logs["total"] == 1
    entry = logs["results"][0]
    assert entry["action"] == "listing.deleted"
    assert entry["target_id"] == listing["id"]
    assert entry["actor_id"] == seed_admin["user_id"]
    assert entry["ip_address"] == "192.0.2.10"
    assert entry["detail"]["owner_id"] == seed_landlord["user_id"]


@pytest.mark.asyncio
async def test_audit_logs_are_superadmin_only(client, seed_admin):
    r = await client.get("/v1/admin/audit-logs", headers=seed_admin["headers"])
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_verify_flag(client, seed_landlord, seed_admin):
    listing = await create_listing_via_api(client, seed_landlord)
    url = f"/v1/admin/apartments/{listing['id']}/verify"

    r = await client.post(url, headers=seed_admin["headers"])
    assert r.status_code == 200
    assert r.json()["verified"] is True

    r = await client.post(url, json={"verified": False}, headers=seed_admin["headers"])
    assert r.json()["verified"] is False


@pytest.mark.asyncio
async def test_stats(client, seed_landlord, seed_tenant, seed_admin):
    created = [await create_listing_via_api(client, seed_landlord, title=f"L{i}") for i in range(7)]
    await client.post(f"/v1/apartments/{created[0]['id']}/deactivate", headers=seed_landlord["headers"])
    await client.post(
        f"/v1/apartments/{created[1]['id']}/reports", json={"reason": "Spam"}, headers=seed_tenant["headers"]
    )

    stats = (await client.get("/v1/admin/stats", headers=seed_admin["headers"])).json()
    assert stats["available_listings"] == 6
    assert stats["deactivated_listings"] == 1
    assert stats["pending_reports"] == 1
    assert [x["id"] for x in stats["recent_listings"]] == [c["id"] for c in reversed(created)][:5]


@pytest.mark.asyncio
async def test_admin_routes_admit_both_admin_roles_only(client, seed_tenant, seed_landlord, seed_admin, seed_superadmin):
    for seed in (seed_tenant, seed_landlord):
        r = await client.get("/v1/admin/stats", headers=seed["headers"])
        assert r.status_code == 403
        assert r.json()["code"] == "forbidden"
    for seed in (seed_admin, seed_superadmin):
        assert (await client.get("/v1/admin/stats", headers=seed["headers"])).status_code == 200


@pytest.mark.parametrize(
    "role, expected",
    [("admin", True), ("superadmin", True), ("tenant", False), ("landlord", False), ("agent", False)],
)
def test_actor_is_admin(role, expected):
    assert Actor(api_key_id="key_1", user_id="u1", role=role).is_admin is expected
