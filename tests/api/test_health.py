"""Tests for health endpoints and error rendering."""

import pytest


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "Ok! Server is running"}


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "Ok! Server is running"}


@pytest.mark.asyncio
async def test_unknown_route_is_404(client):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_malformed_json_is_400(client):
    response = await client.post(
        "/api/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"
