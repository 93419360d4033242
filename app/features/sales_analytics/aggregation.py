"""KPI and line-item aggregation over in-memory transactions.

Every division goes through ``safe_ratio`` so that empty periods produce 0
instead of NaN or Infinity.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from app.features.sales_analytics.schemas import TransactionRecord

ZERO = Decimal(0)
HUNDRED = Decimal(100)
DEFAULT_TOP_PRODUCTS = 5


def safe_ratio(numerator: Decimal | int, denominator: Decimal | int) -> Decimal:
    """Return ``numerator / denominator``, or 0 when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return Decimal(numerator) / Decimal(denominator)


def percent_change(current: Decimal | int, previous: Decimal | int) -> Decimal:
    """Percentage change from ``previous`` to ``current``.

    Only a positive previous value is a meaningful base; 0 is returned
    otherwise rather than an unbounded or sign-flipped figure.
    """
    if previous <= 0:
        return ZERO
    return safe_ratio(Decimal(current) - Decimal(previous), previous) * HUNDRED


# =============================================================================
# Period KPIs
# =============================================================================


@dataclass(frozen=True)
class PeriodMetrics:
    """Headline KPIs of one period.

    Attributes:
        total_revenue: Sum of transaction totals.
        total_orders: Number of transactions.
        avg_order_value: Revenue per order (0 without orders).
    """

    total_revenue: Decimal
    total_orders: int
    avg_order_value: Decimal


@dataclass(frozen=True)
class PeriodComparison:
    """Percentage changes of the current period against the previous one."""

    revenue: Decimal
    orders: Decimal
    avg_order: Decimal


def summarize(transactions: Iterable[TransactionRecord]) -> PeriodMetrics:
    """Compute revenue, order count and average order value."""
    total_revenue = ZERO
    total_orders = 0
    for transaction in transactions:
        total_revenue += transaction.total_amount
        total_orders += 1

    return PeriodMetrics(
        total_revenue=total_revenue,
        total_orders=total_orders,
        avg_order_value=safe_ratio(total_revenue, total_orders),
    )


def compare_periods(current: PeriodMetrics, previous: PeriodMetrics) -> PeriodComparison:
    return PeriodComparison(
        revenue=percent_change(current.total_revenue, previous.total_revenue),
        orders=percent_change(current.total_orders, previous.total_orders),
        avg_order=percent_change(current.avg_order_value, previous.avg_order_value),
    )


# =============================================================================
# Line Items
# =============================================================================


@dataclass
class ProductSales:
    """Running totals for one product."""

    product_id: str
    name: str
    quantity: int = 0
    revenue: Decimal = ZERO


@dataclass(frozen=True)
class CategoryShare:
    """Revenue of one category and its share of total revenue in percent."""

    category: str
    revenue: Decimal
    percentage: Decimal


@dataclass
class LineItemTotals:
    """Per-product and per-category totals, keyed in first-seen order."""

    by_product: dict[str, ProductSales] = field(default_factory=dict)
    by_category: dict[str, Decimal] = field(default_factory=dict)


def aggregate_line_items(transactions: Iterable[TransactionRecord]) -> LineItemTotals:
    """Accumulate quantity and revenue per product and revenue per category.

    A product's name is taken from its most recent line, so renamed products
    report under their latest name.
    """
    totals = LineItemTotals()
    for transaction in transactions:
        for item in transaction.items:
            product = totals.by_product.get(item.product_id)
            if product is None:
                product = ProductSales(product_id=item.product_id, name="")
                totals.by_product[item.product_id] = product
            product.name = item.product_name or ""
            product.quantity += item.quantity
            product.revenue += item.total

            category = item.category_label
            totals.by_category[category] = totals.by_category.get(category, ZERO) + item.total
    return totals


def top_products(
    by_product: Mapping[str, ProductSales],
    limit: int = DEFAULT_TOP_PRODUCTS,
) -> list[ProductSales]:
    """Best sellers by revenue, highest first.

    The sort is stable, so products with equal revenue keep first-seen order.
    """
    ranked = sorted(by_product.values(), key=lambda product: product.revenue, reverse=True)
    return ranked[:limit]


def category_breakdown(
    by_category: Mapping[str, Decimal],
    total_revenue: Decimal,
) -> list[CategoryShare]:
    """Express each category's revenue as a share of ``total_revenue``."""
    return [
        CategoryShare(
            category=category,
            revenue=revenue,
            percentage=safe_ratio(revenue, total_revenue) * HUNDRED,
        )
        for category, revenue in by_category.items()
    ]
