"""Trend bucketing for income/expense charts.

A date range is split into day, week or month buckets depending on its span.
The full bucket sequence is generated up front and seeded with zeros, then
aggregated sums are laid over it, so periods without transactions still show
up as zero.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Dict, Hashable, Iterable, List, Tuple
from dateutil.relativedelta import relativedelta

DAILY_MAX_DAYS = 31
WEEKLY_MAX_DAYS = 92


@dataclass(frozen=True)
class Granularity:
    """How a date range is bucketed.

    Attributes:
        name: "day", "week" or "month".
        interval: Label returned to clients ("日", "周", "月").
        sql_key: SQL expression over transaction_date that yields one value
            per bucket.
        key_from_sql: Converts a sql_key value into a bucket key.
        label: Formats a bucket key for display.
    """

    name: str
    interval: str
    sql_key: str
    key_from_sql: Callable[[str], Hashable]
    label: Callable[[Hashable], str]


def _week_key(day: date) -> Tuple[int, int]:
    iso = day.isocalendar()
    return (iso[0], iso[1])


def _month_key(value: str) -> Tuple[int, int]:
    year, month = value.split("-")
    return (int(year), int(month))


DAY = Granularity(
    name="day",
    interval="日",
    sql_key="transaction_date",
    key_from_sql=date.fromisoformat,
    label=lambda key: key.strftime("%m-%d"),
)

# SQLite has no ISO week function; group by the Monday of each row's week
# and turn that Monday into an (iso_year, iso_week) key.
WEEK = Granularity(
    name="week",
    interval="周",
    sql_key=(
        "date(transaction_date, '-' || "
        "((CAST(strftime('%w', transaction_date) AS INTEGER) + 6) % 7) || ' days')"
    ),
    key_from_sql=lambda value: _week_key(date.fromisoformat(value)),
    label=lambda key: f"第{key[1]:02d}周",
)

MONTH = Granularity(
    name="month",
    interval="月",
    sql_key="strftime('%Y-%m', transaction_date)",
    key_from_sql=_month_key,
    label=lambda key: f"{key[0]:04d}-{key[1]:02d}",
)


def span_days(start_date: date, end_date: date) -> int:
    """Number of calendar days in [start_date, end_date], both inclusive."""
    return (end_date - start_date).days + 1


def choose_granularity(start_date: date, end_date: date) -> Granularity:
    """Pick daily, weekly or monthly buckets from the span of the range.

    Up to 31 days is daily, up to 92 days is weekly, anything longer is
    monthly.
    """
    days = span_days(start_date, end_date)
    if days <= DAILY_MAX_DAYS:
        return DAY
    if days <= WEEKLY_MAX_DAYS:
        return WEEK
    return MONTH


def bucket_keys(
    start_date: date, end_date: date, granularity: Granularity
) -> List[Hashable]:
    """Generate every bucket key covering [start_date, end_date], in order.

    Args:
        start_date: First day of the range.
        end_date: Last day of the range (inclusive).
        granularity: Bucket size.

    Returns:
        Ordered list of keys: dates for DAY, (iso_year, iso_week) for WEEK,
        (year, month) for MONTH.
    """
    # Never step past end_date: it may be date.max
    if granularity is DAY:
        return [
            start_date + timedelta(days=offset)
            for offset in range(span_days(start_date, end_date))
        ]

    if granularity is WEEK:
        # Anchor on the Monday of start_date's week
        monday = start_date - timedelta(days=start_date.weekday())
        weeks = (end_date - monday).days // 7 + 1
        return [_week_key(monday + timedelta(weeks=i)) for i in range(weeks)]

    first = start_date.replace(day=1)
    months = (
        (end_date.year - first.year) * 12 + end_date.month - first.month + 1
    )
    keys: List[Hashable] = []
    for i in range(months):
        current = first + relativedelta(months=i)
        keys.append((current.year, current.month))
    return keys


def overlay(
    keys: List[Hashable], rows: Iterable[Tuple[Hashable, Decimal]]
) -> List[Decimal]:
    """Lay aggregated sums over a zero-seeded bucket sequence.

    Rows whose key is not one of ``keys`` are dropped.

    Args:
        keys: Ordered bucket keys from bucket_keys().
        rows: (key, total) pairs from the database.

    Returns:
        One total per key, in key order.
    """
    totals: Dict[Hashable, Decimal] = {key: Decimal("0.00") for key in keys}
    for key, total in rows:
        if key in totals:
            totals[key] = total
    return [totals[key] for key in keys]


def format_labels(keys: List[Hashable], granularity: Granularity) -> List[str]:
    return [granularity.label(key) for key in keys]
