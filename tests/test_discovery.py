import pytest

from tests.fixtures_seed import create_listing_via_api


async def _seed_catalog(client, owner):
    rows = [
        dict(title="Cozy studio", apartment_type="studio", bedrooms=0, price=400000, location="Yaba"),
        dict(title="Family duplex", apartment_type="duplex", bedrooms=4, price=6000000, location="Ikoyi"),
        dict(title="Modern flat", apartment_type="flat", bedrooms=2, price=1500000, location="Lekki Phase 1"),
        dict(title="Bright flat", apartment_type="flat", bedrooms=2, price=1200000, location="Lekki Phase 1"),
        dict(title="Mini flat", apartment_type="mini-flat", bedrooms=1, price=800000, location="Surulere"),
    ]
    created = []
    for row in rows:
        created.append(await create_listing_via_api(client, owner, description=None, **row))
    return created


@pytest.mark.asyncio
async def test_search_price_range_is_inclusive_and_sorted_ascending(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    r = await client.get("/v1/apartments/search", params={"min_price": 800000, "max_price": 1500000})
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 3
    assert [x["price"] for x in body["results"]] == [800000, 1200000, 1500000]


@pytest.mark.asyncio
async def test_search_max_price_only_sorts_descending(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    body = (await client.get("/v1/apartments/search", params={"max_price": 1200000})).json()
    assert [x["price"] for x in body["results"]] == [1200000, 800000, 400000]


@pytest.mark.asyncio
async def test_search_min_greater_than_max_is_rejected(client):
    r = await client.get("/v1/apartments/search", params={"min_price": 10, "max_price": 5})
    assert r.status_code == 400
    assert r.json()["code"] == "validation_error"


@pytest.mark.asyncio
async def test_empty_search_is_ok_with_zero_pages(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    r = await client.get("/v1/apartments/search", params={"location": "Abuja"})
    assert r.status_code == 200
    assert r.json() == {
        "results": [],
        "total": 0,
        "page": 1,
        "totalPages": 0,
        "hasNextPage": False,
        "hasPrevPage": False,
    }


@pytest.mark.asyncio
async def test_keyword_extracts_bedrooms_and_matches_remaining_text(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    body = (await client.get("/v1/apartments/search", params={"keyword": "2 bedroom lekki"})).json()
    assert body["total"] == 2
    assert {x["title"] for x in body["results"]} == {"Modern flat", "Bright flat"}
    # keyword searches are newest first
    assert [x["title"] for x in body["results"]] == ["Bright flat", "Modern flat"]


@pytest.mark.asyncio
async def test_explicit_bedrooms_wins_over_keyword(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    body = (await client.get("/v1/apartments/search", params={"q": "2 bedroom", "bedrooms": 4})).json()
    assert [x["title"] for x in body["results"]] == ["Family duplex"]


@pytest.mark.asyncio
async def test_keyword_type_extraction(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    body = (await client.get("/v1/apartments/search", params={"keyword": "mini flat"})).json()
    assert [x["title"] for x in body["results"]] == ["Mini flat"]

    body = (await client.get("/v1/apartments/search", params={"keyword": "studio"})).json()
    assert [x["title"] for x in body["results"]] == ["Cozy studio"]


@pytest.mark.asyncio
async def test_search_pagination_envelope(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    body = (await client.get("/v1/apartments/search", params={"limit": 2, "page": 2})).json()
    assert body["total"] == 5
    assert body["page"] == 2
    assert body["totalPages"] == 3
    assert body["hasNextPage"] is True
    assert body["hasPrevPage"] is True
    assert len(body["results"]) == 2


@pytest.mark.asyncio
async def test_search_limit_is_bounded(client):
    assert (await client.get("/v1/apartments/search", params={"limit": 51})).status_code == 422
    assert (await client.get("/v1/apartments/search", params={"page": 0})).status_code == 422


@pytest.mark.asyncio
async def test_oversized_numeric_filters_are_rejected(client):
    huge = str(10**20)
    for params in ({"bedrooms": huge}, {"page": str(10**19)}, {"min_price": "1e400"}):
        r = await client.get("/v1/apartments/search", params=params)
        assert r.status_code == 422, params
        assert r.json()["code"] == "validation_error"
    assert (await client.get("/v1/apartments", params={"page": str(10**19)})).status_code == 422


@pytest.mark.asyncio
async def test_oversized_bedroom_count_in_keyword_is_plain_text(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    r = await client.get("/v1/apartments/search", params={"keyword": "99999999999999999999 bedroom lekki"})
    assert r.status_code == 200
    # no bedroom filter was applied, the remaining words still match
    titles = {x["title"] for x in r.json()["results"]}
    assert {"Modern flat", "Bright flat"} <= titles


@pytest.mark.asyncio
async def test_search_excludes_deactivated(client, seed_landlord):
    created = await _seed_catalog(client, seed_landlord)
    studio = created[0]
    await client.post(f"/v1/apartments/{studio['id']}/deactivate", headers=seed_landlord["headers"])

    body = (await client.get("/v1/apartments/search", params={"apartment_type": "studio"})).json()
    assert body["total"] == 0


@pytest.mark.asyncio
async def test_browse_recent_has_more(client, seed_landlord):
    created = await _seed_catalog(client, seed_landlord)

    body = (await client.get("/v1/apartments", params={"limit": 2})).json()
    assert body["total"] == 5
    assert body["hasMore"] is True
    assert [x["id"] for x in body["listings"]] == [created[4]["id"], created[3]["id"]]

    last = (await client.get("/v1/apartments", params={"limit": 2, "page": 3})).json()
    assert len(last["listings"]) == 1
    assert last["hasMore"] is False


@pytest.mark.asyncio
async def test_browse_recent_uses_last_activity(client, seed_landlord):
    created = await _seed_catalog(client, seed_landlord)
    oldest = created[0]

    await client.patch(f"/v1/apartments/{oldest['id']}", json={"price": 450000}, headers=seed_landlord["headers"])

    body = (await client.get("/v1/apartments", params={"limit": 1})).json()
    assert body["listings"][0]["id"] == oldest["id"]


@pytest.mark.asyncio
async def test_browse_popular_groups_by_location_frequency(client, seed_landlord):
    await _seed_catalog(client, seed_landlord)

    body = (await client.get("/v1/apartments", params={"sort": "popular"})).json()
    locations = [x["location"] for x in body["listings"]]
    assert locations[:2] == ["Lekki Phase 1", "Lekki Phase 1"]
    assert sorted(locations[2:]) == locations[2:]


@pytest.mark.asyncio
async def test_browse_random_returns_available_sample(client, seed_landlord):
    created = await _seed_catalog(client, seed_landlord)

    body = (await client.get("/v1/apartments", params={"sort": "random"})).json()
    assert body["total"] == 5
    assert {x["id"] for x in body["listings"]} == {c["id"] for c in created}
