#!/usr/bin/env python
"""Check database connectivity and the transaction table.

Usage:
    uv run python scripts/check_db.py
"""

import asyncio
import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import get_settings


async def check_database() -> int:
    """Verify the database answers and sales_transaction is queryable."""
    settings = get_settings()

    print("SalesPulse - Database Check")
    print("=" * 30)
    print(f"Database: {settings.database_url.rsplit('@', 1)[-1]}")  # hide credentials
    print()

    engine = create_async_engine(settings.database_url)

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            print("[OK] Basic connectivity")

            try:
                count = (
                    await conn.execute(text("SELECT count(*) FROM sales_transaction"))
                ).scalar()
            except SQLAlchemyError:
                print("[WARN] sales_transaction table missing")
                print("       Run: alembic upgrade head")
                return 1
            print(f"[OK] sales_transaction rows: {count}")

        print()
        print("Database check completed successfully!")
        return 0

    except (SQLAlchemyError, OSError) as e:
        print(f"[FAIL] Connection failed: {e}")
        print()
        print("Troubleshooting:")
        print("  1. Ensure PostgreSQL is running")
        print("  2. Check DATABASE_URL in .env file")
        return 1

    finally:
        await engine.dispose()


def main() -> None:
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()
