"""Tests for security middleware — headers, request IDs."""

import pytest


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


@pytest.mark.asyncio
async def test_no_cache_headers_outside_auth(client):
    r = await client.get("/health")
    assert "Cache-Control" not in r.headers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/health")
    r2 = await client.get("/health")
    assert "X-Request-ID" in r1.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    r = await client.get("/health", headers={"X-Request-ID": "test-trace-12345"})
    assert r.headers["X-Request-ID"] == "test-trace-12345"


@pytest.mark.asyncio
async def test_headers_present_on_401(client):
    r = await client.get("/auth/me")
    assert r.status_code == 401
    assert r.headers["X-Frame-Options"] == "DENY"
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    r = await client.get("/health")
    assert "Strict-Transport-Security" not in r.headers
