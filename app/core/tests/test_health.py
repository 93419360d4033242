"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.database import get_db
from app.main import app


@pytest.mark.asyncio
async def test_health_check_returns_ok(client):
    """Health endpoint should return status ok without touching the database."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["app"] == "SalesPulse"
    assert "database" not in data or data["database"] is None


@pytest.mark.asyncio
async def test_readiness_reports_connected(client):
    """Readiness should report connected when the query succeeds."""
    session = AsyncMock()

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        response = await client.get("/health/ready")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["database"] == "connected"
    session.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_readiness_reports_disconnected(client):
    """Readiness should report unhealthy when the database is unreachable."""
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        response = await client.get("/health/ready")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == "disconnected"
