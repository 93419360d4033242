"""Route tests for the sales analytics endpoint."""

from datetime import UTC, datetime, timedelta

import pytest

from app.core.exceptions import DatabaseError
from app.features.sales_analytics.store import get_transaction_store
from app.main import app

URL = "/api/sales/analytics"


class FailingStore:
    async def fetch_between(self, start, end):
        raise DatabaseError(message="Failed to load transactions")


@pytest.fixture
def today_start() -> datetime:
    return datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)


class TestAuthentication:
    """Tests for the caller identity requirement."""

    async def test_missing_header_is_unauthorized(self, api_client) -> None:
        response = await api_client.get(URL)

        assert response.status_code == 401
        assert response.headers["content-type"] == "application/problem+json"
        body = response.json()
        assert body["status"] == 401
        assert body["error"] == "Unauthorized"

    async def test_blank_header_is_unauthorized(self, api_client) -> None:
        response = await api_client.get(URL, headers={"X-User-Id": "  "})

        assert response.status_code == 401

    async def test_unauthorized_request_does_not_query_store(
        self, api_client, memory_store
    ) -> None:
        await api_client.get(URL, params={"timeframe": "Week"})

        assert memory_store.queries == []


class TestAnalyticsResponse:
    """Tests for the response shape and values."""

    async def test_camel_case_shape(
        self, api_client, auth_headers, memory_store, make_transaction, line_item, today_start
    ) -> None:
        memory_store.add(
            make_transaction(
                today_start + timedelta(minutes=1),
                "100.50",
                [line_item("sku-1", "100.50", quantity=3, category="Coffee")],
            )
        )

        response = await api_client.get(URL, params={"timeframe": "Today"}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {
            "metrics",
            "salesTrend",
            "topProducts",
            "revenueByCategory",
            "period",
        }
        metrics = data["metrics"]
        assert metrics["totalRevenue"] == 100.5
        assert metrics["totalOrders"] == 1
        assert metrics["avgOrderValue"] == 100.5
        assert set(metrics["previousPeriodComparison"]) == {
            "revenue",
            "sales",
            "avgOrder",
            "orders",
        }
        assert len(data["salesTrend"]) == 24
        assert data["salesTrend"][0] == {"name": "0:00", "value": 100.5}
        assert data["topProducts"] == [
            {"id": "sku-1", "name": "Product sku-1", "revenue": 100.5, "quantity": 3}
        ]
        assert data["revenueByCategory"] == [
            {"category": "Coffee", "revenue": 100.5, "percentage": 100.0}
        ]
        assert data["period"]["granularity"] == "hour"

    async def test_empty_store_returns_zeros(self, api_client, auth_headers) -> None:
        response = await api_client.get(URL, params={"timeframe": "Year"}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["metrics"]["totalRevenue"] == 0
        assert data["metrics"]["avgOrderValue"] == 0
        assert [p["value"] for p in data["salesTrend"]] == [0, 0, 0]
        assert data["topProducts"] == []

    async def test_unknown_timeframe_behaves_like_today(self, api_client, auth_headers) -> None:
        response = await api_client.get(
            URL, params={"timeframe": "Fortnight"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert len(response.json()["salesTrend"]) == 24

    async def test_custom_range(self, api_client, auth_headers) -> None:
        response = await api_client.get(
            URL,
            params={"start": "2026-03-01T00:00:00Z", "end": "2026-03-10T23:59:59Z"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["salesTrend"]) == 10
        assert data["salesTrend"][0]["name"] == "Mar 01"
        assert data["period"]["granularity"] == "day"


class TestErrors:
    """Tests for error responses."""

    async def test_inverted_range_is_bad_request(self, api_client, auth_headers) -> None:
        response = await api_client.get(
            URL,
            params={"start": "2026-03-10T00:00:00Z", "end": "2026-03-01T00:00:00Z"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "BAD_REQUEST"
        assert "must not be after" in body["error"]

    async def test_malformed_date_is_validation_error(self, api_client, auth_headers) -> None:
        response = await api_client.get(
            URL,
            params={"start": "yesterday", "end": "2026-03-01T00:00:00Z"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Invalid request parameters"
        assert body["errors"][0]["field"] == "start"

    async def test_store_failure_is_internal_error(self, api_client, auth_headers) -> None:
        app.dependency_overrides[get_transaction_store] = lambda: FailingStore()

        response = await api_client.get(URL, params={"timeframe": "Week"}, headers=auth_headers)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        assert "start" not in body
