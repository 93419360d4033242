"""Pydantic schemas for sales analytics.

Inbound records (transactions and their embedded line items) are validated
from the transaction store. Outbound models serialize with camelCase keys
and monetary values as JSON numbers, matching what dashboard clients read.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimal internally, JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Percent = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

UNCATEGORIZED = "Uncategorized"


# =============================================================================
# Enums
# =============================================================================


class Timeframe(str, Enum):
    """Named reporting timeframe.

    Controls both the window length and the trend granularity.
    """

    TODAY = "Today"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"


class Granularity(str, Enum):
    """Granularity of the trend series buckets."""

    HOUR = "hour"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases while accepting snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Transaction Records
# =============================================================================


class LineItem(CamelModel):
    """One product line embedded in a transaction.

    Stored as JSON with camelCase keys (``productId``, ``productName``, ...).
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    product_id: str = Field(..., description="Product identifier.")
    product_name: str | None = Field(None, description="Product name at time of sale.")
    category: str | None = Field(None, description="Category label, if recorded.")
    quantity: int = Field(0, description="Units sold on this line.")
    price: Decimal = Field(Decimal("0"), description="Unit price at time of sale.")
    total: Decimal = Field(Decimal("0"), description="Line total (quantity * price).")

    @property
    def category_label(self) -> str:
        """Category used for aggregation; blank or missing maps to Uncategorized."""
        return self.category or UNCATEGORIZED


class TransactionRecord(BaseModel):
    """Read-only view of a stored transaction."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_name: str | None = None
    total_amount: Decimal
    created_at: datetime
    items: list[LineItem] = Field(default_factory=list)


# =============================================================================
# Response Schemas
# =============================================================================


class PeriodComparison(CamelModel):
    """Period-over-period percentage changes.

    Each value is ``(current - previous) / previous * 100`` and is 0 when the
    previous value is 0. ``sales`` and ``orders`` both report the order count
    change.
    """

    revenue: Percent = Field(..., description="Revenue change in percent.")
    sales: Percent = Field(..., description="Order count change in percent.")
    avg_order: Percent = Field(..., description="Average order value change in percent.")
    orders: Percent = Field(..., description="Order count change in percent.")


class SalesMetrics(CamelModel):
    """Headline KPIs for the current window."""

    total_revenue: Money = Field(..., description="Sum of transaction totals.")
    total_orders: int = Field(..., ge=0, description="Number of transactions.")
    avg_order_value: Money = Field(
        ...,
        description="total_revenue / total_orders, 0 when there are no orders.",
    )
    previous_period_comparison: PeriodComparison


class TrendPoint(CamelModel):
    """One point of the sales trend series."""

    name: str = Field(..., description="Bucket label, e.g. '9:00', 'Mon', 'Jan', '2025'.")
    value: Money = Field(..., description="Revenue of transactions in this bucket.")


class TopProduct(CamelModel):
    """A best-selling product by revenue."""

    id: str
    name: str
    revenue: Money
    quantity: int


class CategoryRevenue(CamelModel):
    """Revenue attributed to one product category."""

    category: str
    revenue: Money
    percentage: Percent = Field(
        ...,
        description="Share of total revenue in percent, 0 when total revenue is 0.",
    )


class ReportPeriod(CamelModel):
    """Resolved window bounds and trend granularity of a report."""

    start: datetime
    end: datetime
    previous_start: datetime
    previous_end: datetime
    granularity: Granularity


class SalesAnalyticsResponse(CamelModel):
    """Complete sales analytics report for one window."""

    metrics: SalesMetrics
    sales_trend: list[TrendPoint] = Field(
        ...,
        description="Trend buckets in chronological order.",
    )
    top_products: list[TopProduct] = Field(
        ...,
        description="Best-selling products ordered by revenue (highest first).",
    )
    revenue_by_category: list[CategoryRevenue] = Field(
        ...,
        description="Revenue per category in first-seen order.",
    )
    period: ReportPeriod
