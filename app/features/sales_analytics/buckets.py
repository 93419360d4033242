"""Trend bucket generation and filling.

Buckets are created empty for a window, then each transaction is added to
the bucket sharing its calendar key (hour, day, month or year). Keys are
computed directly from the timestamp, so filling is linear in the number of
transactions.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, MONTHLY, rrule

from app.features.sales_analytics.schemas import Granularity, Timeframe, TransactionRecord
from app.features.sales_analytics.windows import (
    DateWindow,
    start_of_day,
    start_of_month,
    to_zone,
)

HOURS_PER_DAY = 24
MONTHS_IN_SERIES = 12
MAX_YEAR_BUCKETS = 3

# Custom ranges: up to this many days are shown hourly, then daily
HOURLY_MAX_DAYS = 1
DAILY_MAX_DAYS = 31

# Labels are fixed English abbreviations, independent of process locale
WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)  # fmt: skip


@dataclass
class Bucket:
    """One point of the trend series.

    Attributes:
        label: Display name of the bucket.
        timestamp: Canonical instant (top of hour, start of day/month/year).
        value: Accumulated revenue.
    """

    label: str
    timestamp: datetime
    value: Decimal = field(default_factory=Decimal)


@dataclass
class BucketSeries:
    """Ordered buckets of one granularity for a single report.

    Attributes:
        granularity: Calendar unit each bucket covers.
        buckets: Buckets in chronological order.
        match_day: For hourly buckets, also require the same calendar day.
            Off for the ``Today`` timeframe where only the hour is compared.
    """

    granularity: Granularity
    buckets: list[Bucket]
    match_day: bool = False

    def key_for(self, moment: datetime) -> Hashable:
        """Calendar key under which ``moment`` matches a bucket."""
        if self.granularity == Granularity.HOUR:
            if self.match_day:
                return (moment.date(), moment.hour)
            return moment.hour
        if self.granularity == Granularity.DAY:
            return moment.date()
        if self.granularity == Granularity.MONTH:
            return (moment.year, moment.month)
        return moment.year

    @property
    def tz(self) -> tzinfo | None:
        return self.buckets[0].timestamp.tzinfo if self.buckets else None

    def fill(self, transactions: Iterable[TransactionRecord]) -> None:
        """Add each transaction's total to every bucket matching its timestamp.

        Transactions outside all buckets are ignored.
        """
        if not self.buckets:
            return

        tz = self.tz
        index: dict[Hashable, list[Bucket]] = {}
        for bucket in self.buckets:
            index.setdefault(self.key_for(bucket.timestamp), []).append(bucket)

        for transaction in transactions:
            moment = to_zone(transaction.created_at, tz) if tz else transaction.created_at
            for bucket in index.get(self.key_for(moment), ()):
                bucket.value += transaction.total_amount

    @property
    def total(self) -> Decimal:
        return sum((bucket.value for bucket in self.buckets), Decimal(0))


# =============================================================================
# Generators
# =============================================================================


def _hourly(day: datetime) -> list[Bucket]:
    midnight = start_of_day(day)
    return [
        Bucket(label=f"{hour}:00", timestamp=midnight.replace(hour=hour))
        for hour in range(HOURS_PER_DAY)
    ]


def _days(start: datetime, end: datetime) -> list[datetime]:
    return list(rrule(DAILY, dtstart=start_of_day(start), until=end))


def _months(start: datetime, end: datetime) -> list[datetime]:
    return list(rrule(MONTHLY, dtstart=start_of_month(start), until=end))


def window_days(window: DateWindow) -> int:
    """Length of the window in days, rounded up."""
    return math.ceil((window.end - window.start) / timedelta(days=1))


def _custom_series(window: DateWindow) -> BucketSeries:
    days = window_days(window)

    if days <= HOURLY_MAX_DAYS:
        return BucketSeries(Granularity.HOUR, _hourly(window.start), match_day=True)

    if days <= DAILY_MAX_DAYS:
        buckets = [
            Bucket(label=f"{MONTH_ABBR[d.month - 1]} {d.day:02d}", timestamp=d)
            for d in _days(window.start, window.end)
        ]
        return BucketSeries(Granularity.DAY, buckets)

    buckets = [
        Bucket(label=f"{MONTH_ABBR[m.month - 1]} {m.year}", timestamp=m)
        for m in _months(window.start, window.end)
    ]
    return BucketSeries(Granularity.MONTH, buckets)


def generate_buckets(
    timeframe: Timeframe | None,
    window: DateWindow,
    *,
    now: datetime,
) -> BucketSeries:
    """Create the empty trend buckets for a report.

    Args:
        timeframe: Named timeframe, or None for an explicit range.
        window: Resolved reporting window.
        now: Reference instant; anchors the 12-month series.

    Returns:
        Zero-valued buckets in chronological order.
    """
    if timeframe is None:
        return _custom_series(window)

    if timeframe == Timeframe.TODAY:
        return BucketSeries(Granularity.HOUR, _hourly(window.start))

    if timeframe == Timeframe.WEEK:
        buckets = [
            Bucket(label=WEEKDAY_ABBR[d.weekday()], timestamp=d)
            for d in _days(window.start, window.end)
        ]
        return BucketSeries(Granularity.DAY, buckets)

    if timeframe == Timeframe.MONTH:
        first = start_of_month(now - relativedelta(months=MONTHS_IN_SERIES - 1))
        buckets = [
            Bucket(label=MONTH_ABBR[m.month - 1], timestamp=m)
            for m in rrule(MONTHLY, dtstart=first, count=MONTHS_IN_SERIES)
        ]
        return BucketSeries(Granularity.MONTH, buckets)

    first_year = window.start.year
    years = [
        year
        for year in range(first_year, first_year + MAX_YEAR_BUCKETS)
        if year <= window.end.year
    ]
    buckets = [
        Bucket(
            label=str(year),
            timestamp=start_of_day(window.start.replace(year=year, month=1, day=1)),
        )
        for year in years
    ]
    return BucketSeries(Granularity.YEAR, buckets)
