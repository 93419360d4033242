"""Tests for transaction store adapters.

The SQL store tests marked ``integration`` require PostgreSQL to be running.
"""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import DatabaseError
from app.features.sales_analytics.models import SalesTransaction
from app.features.sales_analytics.store import InMemoryTransactionStore, SqlTransactionStore


def at(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


class TestInMemoryStore:
    """Tests for the list-backed store."""

    async def test_range_is_inclusive_and_sorted(self, make_transaction) -> None:
        late = make_transaction(at(2026, 3, 2), 20)
        early = make_transaction(at(2026, 3, 1), 10)
        outside = make_transaction(at(2026, 3, 3), 30)
        store = InMemoryTransactionStore([late, early, outside])

        result = await store.fetch_between(at(2026, 3, 1), at(2026, 3, 2))

        assert [t.id for t in result] == [early.id, late.id]
        assert store.queries == [(at(2026, 3, 1), at(2026, 3, 2))]


class TestSqlStoreErrors:
    """Tests for database failure handling."""

    async def test_query_failure_raises_database_error(self) -> None:
        session = MagicMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
        session_cm = MagicMock()
        session_cm.__aenter__ = AsyncMock(return_value=session)
        session_cm.__aexit__ = AsyncMock(return_value=False)
        store = SqlTransactionStore(MagicMock(return_value=session_cm))

        with pytest.raises(DatabaseError) as exc_info:
            await store.fetch_between(at(2026, 3, 1), at(2026, 3, 2))

        assert exc_info.value.status_code == 500
        assert exc_info.value.details["start"] == "2026-03-01T00:00:00+00:00"


@pytest.mark.integration
class TestSqlStoreIntegration:
    """Integration tests for SqlTransactionStore against PostgreSQL."""

    async def test_fetch_between(self, db_session_maker, line_item) -> None:
        async with db_session_maker() as session:
            session.add_all(
                [
                    SalesTransaction(
                        id="t-in",
                        total_amount=Decimal("12.50"),
                        created_at=at(2026, 3, 1, 9),
                        items=[line_item("A", "12.50", category="Coffee")],
                    ),
                    SalesTransaction(
                        id="t-edge",
                        total_amount=Decimal("5.00"),
                        created_at=at(2026, 3, 2),
                        items=[],
                    ),
                    SalesTransaction(
                        id="t-out",
                        total_amount=Decimal("99.00"),
                        created_at=at(2026, 3, 5),
                        items=[],
                    ),
                ]
            )
            await session.commit()

        store = SqlTransactionStore(db_session_maker)
        result = await store.fetch_between(at(2026, 3, 1), at(2026, 3, 2))

        assert [t.id for t in result] == ["t-in", "t-edge"]
        assert result[0].total_amount == Decimal("12.50")
        assert result[0].items[0].product_id == "A"
        assert result[0].items[0].category == "Coffee"
