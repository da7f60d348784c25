import pytest
import httpx
from app.main import app

@pytest.mark.asyncio
async def test_health():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/v1/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_me_requires_api_key(client):
    r = await client.get("/v1/me")
    assert r.status_code == 401

    r = await client.get("/v1/me", headers={"X-API-Key": "ahk_nope_nope"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_actor(client, seed_tenant):
    r = await client.get("/v1/me", headers=seed_tenant["headers"])
    assert r.status_code == 200
    assert r.json() == {
        "api_key_id": seed_tenant["api_key_id"],
        "user_id": seed_tenant["user_id"],
        "role": "tenant",
    }
