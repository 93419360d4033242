"""API routes for sales analytics."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from app.core.auth import require_caller
from app.core.logging import get_logger
from app.features.sales_analytics.schemas import SalesAnalyticsResponse
from app.features.sales_analytics.service import SalesAnalyticsService
from app.features.sales_analytics.store import TransactionStore, get_transaction_store

logger = get_logger(__name__)

router = APIRouter(prefix="/api/sales", tags=["sales-analytics"])


@router.get(
    "/analytics",
    response_model=SalesAnalyticsResponse,
    summary="Compute sales analytics for a timeframe",
    description="""
Compute revenue KPIs, a trend series, top products and revenue by category.

**Timeframes** (`timeframe`):
- `Today`: today by hour, compared with yesterday
- `Week`: this calendar week by day, compared with last week
- `Month`: the last 12 months by month, compared with the 12 months before
- `Year`: the last 3 calendar years by year, compared with the 3 years ending last year

Missing or unknown timeframes behave like `Today`.

**Custom ranges** (`start` and `end`, ISO-8601):
- Both must be given; they override the timeframe window
- The comparison window is the same length immediately before `start`
- Without a timeframe the trend is hourly (up to 1 day), daily (up to 31 days)
  or monthly (longer)

**Authentication**: requires the caller identity header set by the gateway.
""",
)
async def get_sales_analytics(
    timeframe: str | None = Query(
        None,
        description="Named timeframe: Today, Week, Month or Year.",
    ),
    start: datetime | None = Query(
        None,
        description="Custom range start (ISO-8601, inclusive). Requires end.",
    ),
    end: datetime | None = Query(
        None,
        description="Custom range end (ISO-8601, inclusive). Requires start.",
    ),
    caller_id: str = Depends(require_caller),
    store: TransactionStore = Depends(get_transaction_store),
) -> SalesAnalyticsResponse:
    """Compute the sales analytics report.

    Args:
        timeframe: Named timeframe (optional).
        start: Custom range start (optional).
        end: Custom range end (optional).
        caller_id: Authenticated caller.
        store: Transaction store.

    Returns:
        Aggregated sales analytics.
    """
    logger.info(
        "sales_analytics.request_received",
        caller_id=caller_id,
        timeframe=timeframe,
        start=start.isoformat() if start else None,
        end=end.isoformat() if end else None,
    )

    service = SalesAnalyticsService()
    return await service.compute_report(
        store=store,
        timeframe=timeframe,
        start=start,
        end=end,
    )
