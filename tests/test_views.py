from datetime import timedelta

import pytest
from sqlalchemy import select

from app.core.ids import utcnow
from app.models.listing import Listing
from app.models.view_log import ViewLog
from app.services.views import record_view
from tests.fixtures_seed import create_listing_via_api


@pytest.mark.asyncio
async def test_anonymous_views_dedup_by_address(client, seed_landlord):
    listing = await create_listing_via_api(client, seed_landlord)
    url = f"/v1/apartments/{listing['id']}/views"

    r1 = await client.post(url, headers={"X-Forwarded-For": "203.0.113.7"})
    assert r1.json() == {"recorded": True, "views": 1}

    r2 = await client.post(url, headers={"X-Forwarded-For": "203.0.113.7"})
    assert r2.json() == {"recorded": False, "views": 1}

    r3 = await client.post(url, headers={"X-Forwarded-For": "198.51.100.2, 10.0.0.1"})
    assert r3.json() == {"recorded": True, "views": 2}


@pytest.mark.asyncio
async def test_identified_viewer_matches_by_identity_across_addresses(client, seed_landlord, seed_tenant):
    listing = await create_listing_via_api(client, seed_landlord)
    url = f"/v1/apartments/{listing['id']}/views"

    r1 = await client.post(url, headers={**seed_tenant["headers"], "X-Forwarded-For": "203.0.113.7"})
    assert r1.json()["recorded"] is True

    r2 = await client.post(url, headers={**seed_tenant["headers"], "X-Forwarded-For": "198.51.100.9"})
    assert r2.json() == {"recorded": False, "views": 1}


@pytest.mark.asyncio
async def test_view_on_missing_listing_is_404(client):
    r = await client.post("/v1/apartments/apt_missing/views")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_view_counts_again_after_window(client, db_session, seed_landlord):
    listing = await create_listing_via_api(client, seed_landlord)
    earlier = utcnow() - timedelta(hours=25)

    first = await record_view(
        db_session, listing_id=listing["id"], viewer_id=None, viewer_address="203.0.113.7", now=earlier
    )
    await db_session.commit()
    assert first.recorded is True

    second = await record_view(db_session, listing_id=listing["id"], viewer_id=None, viewer_address="203.0.113.7")
    await db_session.commit()
    assert second.recorded is True
    assert second.views == 2

    logs = (await db_session.execute(select(ViewLog).where(ViewLog.listing_id == listing["id"]))).scalars().all()
    assert len(logs) == 2


@pytest.mark.asyncio
async def test_counting_a_view_keeps_updated_at(client, db_session, seed_landlord):
    listing = await create_listing_via_api(client, seed_landlord)
    before = (
        await db_session.execute(select(Listing.updated_at).where(Listing.id == listing["id"]))
    ).scalar_one()

    r = await client.post(f"/v1/apartments/{listing['id']}/views")
    assert r.json()["recorded"] is True

    after = (
        await db_session.execute(select(Listing.updated_at).where(Listing.id == listing["id"]))
    ).scalar_one()
    assert after == before
