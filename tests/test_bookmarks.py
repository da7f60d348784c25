import pytest

from tests.fixtures_seed import create_listing_via_api


@pytest.mark.asyncio
async def test_bookmark_add_and_duplicate(client, seed_landlord, seed_tenant):
    listing = await create_listing_via_api(client, seed_landlord)

    r = await client.post("/v1/bookmarks", json={"listing_id": listing["id"]}, headers=seed_tenant["headers"])
    assert r.status_code == 201
    assert r.json()["listing"]["id"] == listing["id"]

    r = await client.post("/v1/bookmarks", json={"listing_id": listing["id"]}, headers=seed_tenant["headers"])
    assert r.status_code == 409
    assert r.json()["code"] == "already_bookmarked"

    page = (await client.get("/v1/bookmarks", headers=seed_tenant["headers"])).json()
    assert page["total"] == 1


@pytest.mark.asyncio
async def test_bookmark_missing_listing_is_404(client, seed_tenant):
    r = await client.post("/v1/bookmarks", json={"listing_id": "apt_missing"}, headers=seed_tenant["headers"])
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_bookmarks_are_tenant_only(client, seed_landlord):
    listing = await create_listing_via_api(client, seed_landlord)
    r = await client.post("/v1/bookmarks", json={"listing_id": listing["id"]}, headers=seed_landlord["headers"])
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_bookmarks_are_per_tenant(client, seed_landlord, seed_tenant, seed_other_tenant):
    listing = await create_listing_via_api(client, seed_landlord)
    await client.post("/v1/bookmarks", json={"listing_id": listing["id"]}, headers=seed_tenant["headers"])

    r = await client.post("/v1/bookmarks", json={"listing_id": listing["id"]}, headers=seed_other_tenant["headers"])
    assert r.status_code == 201

    assert (await client.get("/v1/bookmarks", headers=seed_tenant["headers"])).json()["total"] == 1


@pytest.mark.asyncio
async def test_list_is_most_recent_first(client, seed_landlord, seed_tenant):
    first = await create_listing_via_api(client, seed_landlord, title="First")
    second = await create_listing_via_api(client, seed_landlord, title="Second")

    await client.post("/v1/bookmarks", json={"listing_id": second["id"]}, headers=seed_tenant["headers"])
    await client.post("/v1/bookmarks", json={"listing_id": first["id"]}, headers=seed_tenant["headers"])

    page = (await client.get("/v1/bookmarks", headers=seed_tenant["headers"])).json()
    assert [b["listing_id"] for b in page["results"]] == [first["id"], second["id"]]


@pytest.mark.asyncio
async def test_remove_and_clear(client, seed_landlord, seed_tenant):
    a = await create_listing_via_api(client, seed_landlord)
    b = await create_listing_via_api(client, seed_landlord)
    for listing in (a, b):
        await client.post("/v1/bookmarks", json={"listing_id": listing["id"]}, headers=seed_tenant["headers"])

    r = await client.delete(f"/v1/bookmarks/{a['id']}", headers=seed_tenant["headers"])
    assert r.json() == {"status": "removed"}
    r = await client.delete(f"/v1/bookmarks/{a['id']}", headers=seed_tenant["headers"])
    assert r.status_code == 200
    assert r.json() == {"status": "not_bookmarked"}

    r = await client.delete("/v1/bookmarks", headers=seed_tenant["headers"])
    assert r.json() == {"status": "cleared"}
    assert (await client.get("/v1/bookmarks", headers=seed_tenant["headers"])).json()["total"] == 0


@pytest.mark.asyncio
async def test_search_drops_deleted_listings(client, seed_landlord, seed_tenant, seed_admin):
    keep = await create_listing_via_api(client, seed_landlord, title="Keep me", location="Yaba")
    gone = await create_listing_via_api(client, seed_landlord, title="Delete me", location="Yaba")
    for listing in (keep, gone):
        await client.post("/v1/bookmarks", json={"listing_id": listing["id"]}, headers=seed_tenant["headers"])

    r = await client.delete(f"/v1/admin/apartments/{gone['id']}", headers=seed_admin["headers"])
    assert r.status_code == 200

    found = (
        await client.get("/v1/bookmarks/search", params={"location": "yaba"}, headers=seed_tenant["headers"])
    ).json()
    assert [b["listing_id"] for b in found["results"]] == [keep["id"]]

    # the stored list still carries the stale reference, without a listing
    stored = (await client.get("/v1/bookmarks", headers=seed_tenant["headers"])).json()
    assert stored["total"] == 2
    stale = [b for b in stored["results"] if b["listing_id"] == gone["id"]][0]
    assert stale["listing"] is None
