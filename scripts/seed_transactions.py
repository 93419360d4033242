#!/usr/bin/env python
"""Seed the transaction log with synthetic sales.

Generates transactions spread over the trailing N days with random baskets
drawn from a small product catalog, so every dashboard timeframe has data.

Usage:
    # 2 years of data, 40 sales per day
    uv run python scripts/seed_transactions.py --days 730 --per-day 40 --confirm

    # Remove everything
    uv run python scripts/seed_transactions.py --delete --confirm
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.features.sales_analytics.models import SalesTransaction

# (product_id, name, category or None, unit price)
CATALOG: list[tuple[str, str, str | None, Decimal]] = [
    ("p-espresso", "Espresso", "Coffee", Decimal("3.50")),
    ("p-latte", "Caffe Latte", "Coffee", Decimal("4.80")),
    ("p-coldbrew", "Cold Brew", "Coffee", Decimal("5.20")),
    ("p-greentea", "Green Tea", "Tea", Decimal("3.20")),
    ("p-chai", "Chai Latte", "Tea", Decimal("4.60")),
    ("p-croissant", "Butter Croissant", "Bakery", Decimal("3.90")),
    ("p-muffin", "Blueberry Muffin", "Bakery", Decimal("3.60")),
    ("p-bagel", "Sesame Bagel", "Bakery", Decimal("2.90")),
    ("p-beans", "House Beans 250g", "Retail", Decimal("14.00")),
    ("p-mug", "Logo Mug", None, Decimal("12.50")),
]

CUSTOMERS = ["Walk-in", "Ada", "Grace", "Linus", "Margaret", "Dennis", "Barbara"]
PAYMENT_METHODS = ["card", "cash", "mobile"]


def build_transaction(rng: random.Random, created_at: datetime) -> SalesTransaction:
    """Create one transaction with a random basket of 1-4 lines."""
    items: list[dict[str, Any]] = []
    total = Decimal("0")
    for product_id, name, category, price in rng.sample(CATALOG, k=rng.randint(1, 4)):
        quantity = rng.randint(1, 3)
        line_total = price * quantity
        total += line_total
        item: dict[str, Any] = {
            "productId": product_id,
            "productName": name,
            "quantity": quantity,
            "price": float(price),
            "total": float(line_total),
        }
        if category is not None:
            item["category"] = category
        items.append(item)

    return SalesTransaction(
        customer_name=rng.choice(CUSTOMERS),
        total_amount=total,
        payment_method=rng.choice(PAYMENT_METHODS),
        items=items,
        created_at=created_at,
    )


async def seed(session: AsyncSession, days: int, per_day: int, seed_value: int) -> int:
    """Insert ``per_day`` transactions (+/- 50%) for each of the last ``days`` days."""
    settings = get_settings()
    rng = random.Random(seed_value)
    today = datetime.now(settings.tzinfo).replace(hour=0, minute=0, second=0, microsecond=0)

    created = 0
    for offset in range(days, -1, -1):
        day = today - timedelta(days=offset)
        count = max(1, int(per_day * rng.uniform(0.5, 1.5)))
        batch = [
            build_transaction(rng, day + timedelta(seconds=rng.randint(7 * 3600, 21 * 3600)))
            for _ in range(count)
        ]
        session.add_all(batch)
        created += len(batch)
        await session.flush()
    await session.commit()
    return created


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    engine = create_async_engine(settings.database_url)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with session_maker() as session:
            if args.delete:
                result = await session.execute(delete(SalesTransaction))
                await session.commit()
                print(f"Deleted {result.rowcount} transactions")
                return 0

            created = await seed(session, args.days, args.per_day, args.seed)
            total = await session.scalar(select(func.count()).select_from(SalesTransaction))
            print(f"Inserted {created} transactions ({total} in table)")
            return 0
    finally:
        await engine.dispose()


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="SalesPulse transaction seeder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--days",
        type=int,
        default=365,
        help="Number of trailing days to fill (default: 365)",
    )
    parser.add_argument(
        "--per-day",
        type=int,
        default=30,
        help="Average transactions per day (default: 30)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--delete",
        action="store_true",
        help="Delete all transactions instead of inserting",
    )
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Confirm writing to the database",
    )
    return parser


def main() -> None:
    args = create_parser().parse_args()
    if not args.confirm:
        print("Refusing to write without --confirm")
        sys.exit(1)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
