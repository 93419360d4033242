"""ORM model for the transaction log read by sales analytics.

One row per completed sale. Line items are embedded as a JSONB array with
camelCase keys::

    [{"productId": "p-1", "productName": "Espresso", "category": "Coffee",
      "quantity": 2, "price": 3.5, "total": 7.0}, ...]

``total_amount`` is the value of the originating sales order at creation
time and is never recomputed from the items.
"""

import datetime
import uuid
from decimal import Decimal
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, Index, Numeric, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class SalesTransaction(Base):
    """Completed sale with its embedded line items.

    Attributes:
        id: Transaction identifier.
        customer_name: Customer label shown on receipts.
        total_amount: Order value at creation time.
        payment_method: Payment method label (e.g., "card", "cash").
        sales_request_id: Originating sales order, if any.
        items: Embedded line items (see module docstring).
        created_at: When the sale happened.
    """

    __tablename__ = "sales_transaction"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    customer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    payment_method: Mapped[str | None] = mapped_column(String(30), nullable=True)
    sales_request_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, default=list)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        # Every analytics query is a created_at range scan
        Index("ix_sales_transaction_created_at", "created_at"),
        CheckConstraint("total_amount >= 0", name="ck_sales_transaction_amount_positive"),
    )
