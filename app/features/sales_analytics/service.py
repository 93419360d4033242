"""Service layer for sales analytics reports.

Resolves the reporting window, loads the current and previous period
transactions concurrently, and assembles KPIs, trend, top products and
category breakdown into a single response. Nothing is persisted.
"""

import asyncio
from datetime import datetime, timedelta

from app.core.config import Settings, get_settings
from app.core.exceptions import BadRequestError
from app.core.logging import get_logger
from app.features.sales_analytics.aggregation import (
    aggregate_line_items,
    category_breakdown,
    compare_periods,
    summarize,
    top_products,
)
from app.features.sales_analytics.buckets import generate_buckets
from app.features.sales_analytics.schemas import (
    CategoryRevenue,
    PeriodComparison,
    ReportPeriod,
    SalesAnalyticsResponse,
    SalesMetrics,
    Timeframe,
    TopProduct,
    TrendPoint,
)
from app.features.sales_analytics.store import TransactionStore
from app.features.sales_analytics.windows import (
    DateWindow,
    parse_timeframe,
    resolve_window,
    to_zone,
)

logger = get_logger(__name__)


class SalesAnalyticsService:
    """Compute sales analytics reports from the transaction log.

    All calendar arithmetic happens in the configured reporting timezone.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize sales analytics service.

        Args:
            settings: Application settings (defaults to the cached singleton).
        """
        self.settings = settings or get_settings()

    def resolve(
        self,
        timeframe: str | None,
        start: datetime | None,
        end: datetime | None,
        now: datetime,
    ) -> tuple[Timeframe | None, DateWindow]:
        """Decide the bucket timeframe and the window for a request.

        With both ``start`` and ``end`` the range is used as given and the
        timeframe (if recognised) only selects bucket granularity. Otherwise
        the timeframe picks the window, defaulting to ``Today``.

        Args:
            timeframe: Raw timeframe query value.
            start: Explicit range start.
            end: Explicit range end.
            now: Reference instant in the reporting timezone.

        Returns:
            Timeframe for bucketing (None means choose by range length) and
            the resolved window.

        Raises:
            BadRequestError: If the explicit range is inverted or too long.
        """
        tz = self.settings.tzinfo
        parsed = parse_timeframe(timeframe)
        if timeframe and parsed is None:
            logger.warning("sales_analytics.unknown_timeframe", timeframe=timeframe)

        if start is not None and end is not None:
            start, end = to_zone(start, tz), to_zone(end, tz)
            max_days = self.settings.analytics_max_custom_range_days
            if end - start > timedelta(days=max_days):
                raise BadRequestError(
                    message=f"Date range exceeds the maximum of {max_days} days",
                    details={"start": start.isoformat(), "end": end.isoformat()},
                )
            try:
                window = resolve_window(parsed, start, end, now=now)
            except ValueError as e:
                raise BadRequestError(message=str(e)) from e
            return parsed, window

        timeframe_used = parsed or Timeframe.TODAY
        window = resolve_window(
            timeframe_used,
            now=now,
            week_starts_on=self.settings.analytics_week_starts_on,
        )
        return timeframe_used, window

    async def compute_report(
        self,
        store: TransactionStore,
        timeframe: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        now: datetime | None = None,
    ) -> SalesAnalyticsResponse:
        """Build the sales analytics report for a timeframe or explicit range.

        Args:
            store: Transaction store to read from.
            timeframe: Raw timeframe value (``Today``, ``Week``, ``Month``, ``Year``).
            start: Explicit range start; used only together with ``end``.
            end: Explicit range end; used only together with ``start``.
            now: Reference instant (defaults to the current time).

        Returns:
            Complete report for the resolved window.
        """
        tz = self.settings.tzinfo
        now = to_zone(now, tz) if now is not None else datetime.now(tz)

        bucket_timeframe, window = self.resolve(timeframe, start, end, now)

        current, previous = await asyncio.gather(
            store.fetch_between(window.start, window.end),
            store.fetch_between(window.previous.start, window.previous.end),
        )

        current_metrics = summarize(current)
        previous_metrics = summarize(previous)
        comparison = compare_periods(current_metrics, previous_metrics)

        series = generate_buckets(bucket_timeframe, window, now=now)
        series.fill(current)

        line_items = aggregate_line_items(current)
        best_sellers = top_products(
            line_items.by_product,
            limit=self.settings.analytics_top_products_limit,
        )
        categories = category_breakdown(line_items.by_category, current_metrics.total_revenue)

        logger.info(
            "sales_analytics.report_computed",
            timeframe=bucket_timeframe.value if bucket_timeframe else None,
            start=window.start.isoformat(),
            end=window.end.isoformat(),
            granularity=series.granularity.value,
            total_orders=current_metrics.total_orders,
            previous_orders=previous_metrics.total_orders,
            total_revenue=float(current_metrics.total_revenue),
            buckets=len(series.buckets),
            products=len(line_items.by_product),
            categories=len(categories),
        )

        return SalesAnalyticsResponse(
            metrics=SalesMetrics(
                total_revenue=current_metrics.total_revenue,
                total_orders=current_metrics.total_orders,
                avg_order_value=current_metrics.avg_order_value,
                previous_period_comparison=PeriodComparison(
                    revenue=comparison.revenue,
                    sales=comparison.orders,
                    avg_order=comparison.avg_order,
                    orders=comparison.orders,
                ),
            ),
            sales_trend=[
                TrendPoint(name=bucket.label, value=bucket.value) for bucket in series.buckets
            ],
            top_products=[
                TopProduct(
                    id=product.product_id,
                    name=product.name,
                    revenue=product.revenue,
                    quantity=product.quantity,
                )
                for product in best_sellers
            ],
            revenue_by_category=[
                CategoryRevenue(
                    category=share.category,
                    revenue=share.revenue,
                    percentage=share.percentage,
                )
                for share in categories
            ],
            period=ReportPeriod(
                start=window.start,
                end=window.end,
                previous_start=window.previous.start,
                previous_end=window.previous.end,
                granularity=series.granularity,
            ),
        )
