"""Sales analytics: KPIs, trend series, top products and category revenue.

Reports are recomputed from the raw transaction log on every request.
"""

from app.features.sales_analytics.routes import router
from app.features.sales_analytics.schemas import (
    Granularity,
    SalesAnalyticsResponse,
    Timeframe,
)
from app.features.sales_analytics.service import SalesAnalyticsService

__all__ = [
    "Granularity",
    "SalesAnalyticsResponse",
    "SalesAnalyticsService",
    "Timeframe",
    "router",
]
