"""Transaction store adapters.

The service only needs one query: all transactions created within an
inclusive time range, oldest first. ``SqlTransactionStore`` answers it from
PostgreSQL; ``InMemoryTransactionStore`` answers it from a list and backs
tests and demos.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import get_session_maker
from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.features.sales_analytics.models import SalesTransaction
from app.features.sales_analytics.schemas import TransactionRecord

logger = get_logger(__name__)


class TransactionStore(Protocol):
    """Read access to the transaction log."""

    async def fetch_between(self, start: datetime, end: datetime) -> list[TransactionRecord]:
        """Return transactions with ``start <= created_at <= end``, oldest first."""
        ...


class SqlTransactionStore:
    """Transaction store backed by the ``sales_transaction`` table.

    Each call opens its own session, so two ranges can be fetched
    concurrently.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    async def fetch_between(self, start: datetime, end: datetime) -> list[TransactionRecord]:
        stmt = (
            select(SalesTransaction)
            .where(
                (SalesTransaction.created_at >= start) & (SalesTransaction.created_at <= end)
            )
            .order_by(SalesTransaction.created_at, SalesTransaction.id)
        )

        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "sales_analytics.fetch_failed",
                start=start.isoformat(),
                end=end.isoformat(),
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise DatabaseError(
                message="Failed to load transactions",
                details={"start": start.isoformat(), "end": end.isoformat()},
            ) from e

        logger.debug(
            "sales_analytics.transactions_fetched",
            start=start.isoformat(),
            end=end.isoformat(),
            count=len(rows),
        )
        return [TransactionRecord.model_validate(row) for row in rows]


class InMemoryTransactionStore:
    """Transaction store over an in-memory list."""

    def __init__(self, transactions: Iterable[TransactionRecord] = ()) -> None:
        self.transactions = list(transactions)
        self.queries: list[tuple[datetime, datetime]] = []

    def add(self, transaction: TransactionRecord) -> None:
        self.transactions.append(transaction)

    async def fetch_between(self, start: datetime, end: datetime) -> list[TransactionRecord]:
        self.queries.append((start, end))
        matched = [t for t in self.transactions if start <= t.created_at <= end]
        return sorted(matched, key=lambda t: t.created_at)


def get_transaction_store() -> TransactionStore:
    """FastAPI dependency providing the database-backed store."""
    return SqlTransactionStore(get_session_maker())
