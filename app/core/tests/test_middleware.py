"""Tests for request middleware."""

import pytest


@pytest.mark.asyncio
async def test_request_id_middleware_generates_id(client):
    """Middleware should generate request ID if not provided."""
    response = await client.get("/health")

    request_id = response.headers.get("X-Request-ID")
    assert request_id is not None
    assert len(request_id) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_middleware_preserves_provided_id(client):
    """Middleware should preserve client-provided request ID."""
    response = await client.get("/health", headers={"X-Request-ID": "my-custom-request-id"})

    assert response.headers["X-Request-ID"] == "my-custom-request-id"


@pytest.mark.asyncio
async def test_request_id_on_error_responses(client):
    """Rejected requests should still carry the correlation ID."""
    response = await client.get("/api/sales/analytics", headers={"X-Request-ID": "req-401"})

    assert response.status_code == 401
    assert response.headers["X-Request-ID"] == "req-401"
    assert response.json()["request_id"] == "req-401"
