"""Test fixtures for sales analytics module."""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.features.sales_analytics.schemas import LineItem, TransactionRecord
from app.features.sales_analytics.store import InMemoryTransactionStore, get_transaction_store
from app.main import app

# Wednesday; weeks start on Sunday 2026-03-08
NOW = datetime(2026, 3, 11, 14, 30, tzinfo=UTC)

AUTH_HEADERS = {"X-User-Id": "user_test"}


def item(
    product_id: str,
    total: str | int,
    quantity: int = 1,
    category: str | None = None,
    name: str | None = None,
) -> dict[str, Any]:
    """Line item payload in the stored camelCase shape."""
    return {
        "productId": product_id,
        "productName": name or f"Product {product_id}",
        "category": category,
        "quantity": quantity,
        "price": str(Decimal(str(total)) / quantity),
        "total": str(total),
    }


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant for window resolution."""
    return NOW


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers identifying an authenticated caller."""
    return dict(AUTH_HEADERS)


@pytest.fixture
def line_item() -> Callable[..., dict[str, Any]]:
    """Factory for stored line item payloads."""
    return item


@pytest.fixture
def make_transaction() -> Callable[..., TransactionRecord]:
    """Factory for transaction records."""
    counter = {"n": 0}

    def _make(
        created_at: datetime,
        total: str | int,
        items: list[dict[str, Any]] | None = None,
    ) -> TransactionRecord:
        counter["n"] += 1
        return TransactionRecord(
            id=f"txn-{counter['n']}",
            customer_name="Walk-in",
            total_amount=Decimal(str(total)),
            created_at=created_at,
            items=[LineItem.model_validate(i) for i in (items or [])],
        )

    return _make


@pytest.fixture
def memory_store() -> InMemoryTransactionStore:
    """Empty in-memory transaction store."""
    return InMemoryTransactionStore()


@pytest.fixture
async def api_client(
    memory_store: InMemoryTransactionStore,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the transaction store replaced by ``memory_store``."""
    app.dependency_overrides[get_transaction_store] = lambda: memory_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
