"""Tests for application-level middleware and configuration in viewerwatch.main."""

import pytest
from httpx import AsyncClient


# ---------------------------------------------------------------------------
# Security headers
# ---------------------------------------------------------------------------


class TestSecurityHeaders:
    @pytest.mark.asyncio
    async def test_headers_on_success(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.headers.get("x-content-type-options") == "nosniff"
        assert resp.headers.get("x-frame-options") == "DENY"
        assert resp.headers.get("cache-control") == "no-store"

    @pytest.mark.asyncio
    async def test_headers_on_error(self, client: AsyncClient):
        resp = await client.get("/v1/groups/missing")
        assert resp.status_code == 404
        assert resp.headers.get("x-content-type-options") == "nosniff"


# ---------------------------------------------------------------------------
# CORS headers
# ---------------------------------------------------------------------------


class TestCORSHeaders:
    @pytest.mark.asyncio
    async def test_preflight(self, client: AsyncClient):
        resp = await client.options(
            "/v1/samples",
            headers={
                "Origin": "https://dashboard.example.com",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert resp.status_code in (200, 204)
        assert "access-control-allow-origin" in resp.headers


# ---------------------------------------------------------------------------
# OpenAPI docs (development mode)
# ---------------------------------------------------------------------------


class TestOpenAPIDocs:
    @pytest.mark.asyncio
    async def test_openapi_schema_contains_paths(self, client: AsyncClient):
        resp = await client.get("/openapi.json")
        assert resp.status_code == 200
        paths = resp.json()["paths"]
        for path in (
            "/v1/groups",
            "/v1/samples",
            "/v1/stats",
            "/v1/groups/{group_id}/chart",
            "/v1/history",
            "/v1/export",
            "/v1/producers/{platform}/run",
        ):
            assert path in paths
