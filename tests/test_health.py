"""Health, root and response header tests (no DB required)."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_returns_200(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 with status ok and the app version."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"]


@pytest.mark.asyncio
async def test_root_links_to_docs(client: AsyncClient) -> None:
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["health"] == "/api/v1/health"


@pytest.mark.asyncio
async def test_security_headers_present(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "no-store" in response.headers["Cache-Control"]


@pytest.mark.asyncio
async def test_request_id_echoed_or_generated(client: AsyncClient) -> None:
    """A well-formed X-Request-ID is echoed; a malformed one is replaced."""
    echoed = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123_abc"})
    assert echoed.headers["X-Request-ID"] == "req-123_abc"
    replaced = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id with spaces!"})
    assert replaced.headers["X-Request-ID"] != "bad id with spaces!"
    assert replaced.headers["X-Request-ID"]
