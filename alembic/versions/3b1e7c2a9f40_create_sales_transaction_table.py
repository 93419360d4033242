"""create_sales_transaction_table

Revision ID: 3b1e7c2a9f40
Revises:
Create Date: 2026-10-12 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3b1e7c2a9f40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Apply migration - create sales_transaction table."""
    op.create_table(
        "sales_transaction",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("customer_name", sa.String(length=200), nullable=True),
        sa.Column("total_amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("payment_method", sa.String(length=30), nullable=True),
        sa.Column("sales_request_id", sa.String(length=36), nullable=True),
        # Embedded line items
        sa.Column(
            "items",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="[]",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("total_amount >= 0", name="ck_sales_transaction_amount_positive"),
    )

    op.create_index(
        "ix_sales_transaction_created_at",
        "sales_transaction",
        ["created_at"],
    )
    op.create_index(
        op.f("ix_sales_transaction_sales_request_id"),
        "sales_transaction",
        ["sales_request_id"],
    )


def downgrade() -> None:
    """Revert migration - drop sales_transaction table."""
    op.drop_index(op.f("ix_sales_transaction_sales_request_id"), table_name="sales_transaction")
    op.drop_index("ix_sales_transaction_created_at", table_name="sales_transaction")
    op.drop_table("sales_transaction")
