"""Calendar window resolution for sales reports.

A report covers a current window and a comparison window immediately
before it. Named timeframes use calendar boundaries in the reporting
timezone; explicit ranges reuse their own length for the comparison.

    Today  -> today                        vs. yesterday
    Week   -> this calendar week           vs. the week before
    Month  -> last 12 months incl. current vs. the 12 months before
    Year   -> last 3 years incl. current   vs. the 3 years ending last year
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from dateutil.relativedelta import relativedelta

from app.features.sales_analytics.schemas import Timeframe

SUNDAY = 6


@dataclass(frozen=True)
class Period:
    """An inclusive ``[start, end]`` span of instants."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class DateWindow:
    """Current reporting span plus the comparison span preceding it."""

    start: datetime
    end: datetime
    previous: Period

    @property
    def current(self) -> Period:
        return Period(self.start, self.end)


# =============================================================================
# Calendar Boundaries
# =============================================================================


def to_zone(moment: datetime, tz: tzinfo) -> datetime:
    """Express ``moment`` in ``tz``; naive values are taken as already local."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def start_of_week(moment: datetime, week_starts_on: int = SUNDAY) -> datetime:
    """First instant of the week containing ``moment``.

    Args:
        moment: Any instant in the week.
        week_starts_on: Weekday index the week starts on (0=Monday, 6=Sunday).
    """
    days_back = (moment.weekday() - week_starts_on) % 7
    return start_of_day(moment - timedelta(days=days_back))


def end_of_week(moment: datetime, week_starts_on: int = SUNDAY) -> datetime:
    return end_of_day(start_of_week(moment, week_starts_on) + timedelta(days=6))


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment.replace(day=1))


def end_of_month(moment: datetime) -> datetime:
    # day=31 clamps to the last day of the month
    return end_of_day(moment + relativedelta(day=31))


def start_of_year(moment: datetime) -> datetime:
    return start_of_day(moment.replace(month=1, day=1))


def end_of_year(moment: datetime) -> datetime:
    return end_of_day(moment.replace(month=12, day=31))


# =============================================================================
# Resolution
# =============================================================================


def parse_timeframe(raw: str | None) -> Timeframe | None:
    """Map a query-string value to a Timeframe.

    Matching is exact first, then case-insensitive. Unknown or empty values
    return None so callers can apply their own default.
    """
    if not raw:
        return None
    try:
        return Timeframe(raw)
    except ValueError:
        pass
    lowered = raw.strip().lower()
    for timeframe in Timeframe:
        if timeframe.value.lower() == lowered:
            return timeframe
    return None


def custom_window(start: datetime, end: datetime) -> DateWindow:
    """Window for an explicit range, compared against the same length before it.

    Raises:
        ValueError: If ``start`` is after ``end``.
    """
    if start > end:
        raise ValueError(
            f"start ({start.isoformat()}) must not be after end ({end.isoformat()})"
        )
    return DateWindow(
        start=start,
        end=end,
        previous=Period(start=start - (end - start), end=start),
    )


def resolve_window(
    timeframe: Timeframe | None,
    start: datetime | None = None,
    end: datetime | None = None,
    *,
    now: datetime,
    week_starts_on: int = SUNDAY,
) -> DateWindow:
    """Resolve the current and comparison windows for a report.

    An explicit ``start``/``end`` pair wins over ``timeframe``. Without one,
    the timeframe is resolved relative to ``now``; a missing timeframe
    behaves like ``Today``.

    Args:
        timeframe: Named timeframe, or None.
        start: Explicit range start (must come with ``end``).
        end: Explicit range end (must come with ``start``).
        now: Reference instant, already in the reporting timezone.
        week_starts_on: Weekday index weeks start on (0=Monday, 6=Sunday).

    Returns:
        Resolved window with its comparison period.

    Raises:
        ValueError: If an explicit range has ``start`` after ``end``.
    """
    if start is not None and end is not None:
        return custom_window(start, end)

    if timeframe == Timeframe.WEEK:
        week_ago = now - timedelta(days=7)
        return DateWindow(
            start=start_of_week(now, week_starts_on),
            end=end_of_week(now, week_starts_on),
            previous=Period(
                start=start_of_week(week_ago, week_starts_on),
                end=end_of_week(week_ago, week_starts_on),
            ),
        )

    if timeframe == Timeframe.MONTH:
        return DateWindow(
            start=start_of_month(now - relativedelta(months=11)),
            end=end_of_month(now),
            previous=Period(
                start=start_of_month(now - relativedelta(months=23)),
                end=end_of_month(now - relativedelta(months=12)),
            ),
        )

    if timeframe == Timeframe.YEAR:
        return DateWindow(
            start=start_of_year(now - relativedelta(years=2)),
            end=end_of_year(now),
            previous=Period(
                start=start_of_year(now - relativedelta(years=3)),
                end=end_of_year(now - relativedelta(years=1)),
            ),
        )

    yesterday = now - timedelta(days=1)
    return DateWindow(
        start=start_of_day(now),
        end=end_of_day(now),
        previous=Period(start=start_of_day(yesterday), end=end_of_day(yesterday)),
    )
