"""Statistics service: totals, per-category breakdowns and trends."""

import sqlite3
from datetime import date
from decimal import Decimal
from typing import List, Tuple, Union
from errors import AggregationError
from models.statistics import CategoryBreakdown, CategoryTotal, Totals, TrendSeries
from models.transaction import TRANSACTION_TYPES
from tools import trends
from logger import get_logger

logger = get_logger()

CENTS = Decimal("0.01")

DateLike = Union[str, date]


def to_cents(value) -> Decimal:
    """Convert a SQL SUM() result to a Decimal rounded to cents."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENTS)


def parse_date_range(start_date: DateLike, end_date: DateLike) -> Tuple[date, date]:
    """Parse and check an inclusive date range.

    Args:
        start_date: date or ISO string (YYYY-MM-DD).
        end_date: date or ISO string (YYYY-MM-DD).

    Returns:
        (start, end) as date objects.

    Raises:
        AggregationError: If either date is malformed or end precedes start.
    """
    try:
        start = (
            start_date
            if isinstance(start_date, date)
            else date.fromisoformat(start_date)
        )
        end = end_date if isinstance(end_date, date) else date.fromisoformat(end_date)
    except (TypeError, ValueError) as e:
        raise AggregationError(f"日期格式不正确: {e}") from e

    if end < start:
        raise AggregationError("结束日期不能早于开始日期")

    return start, end


class StatisticsService:
    """Aggregates a user's transactions over an inclusive date range."""

    def __init__(self, db_manager):
        """Initialize the statistics service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def totals(self, user_id: int, start_date: DateLike, end_date: DateLike) -> Totals:
        """Sum income and expense over the range.

        Both keys are always present (zero when there are no rows), and
        balance is exactly income - expense.

        Raises:
            AggregationError: On a bad range or database failure.
        """
        start, end = parse_date_range(start_date, end_date)

        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    """
                    SELECT type, SUM(amount) AS total
                    FROM transactions
                    WHERE user_id = ? AND transaction_date BETWEEN ? AND ?
                    GROUP BY type
                    """,
                    (user_id, start.isoformat(), end.isoformat()),
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Totals query failed for user {user_id}: {e}")
            raise AggregationError(f"获取统计数据失败: {e}") from e

        totals = Totals()
        for type_, total in rows:
            if type_ in TRANSACTION_TYPES:
                setattr(totals, type_, to_cents(total))

        return totals

    def category_breakdown(
        self, user_id: int, start_date: DateLike, end_date: DateLike
    ) -> CategoryBreakdown:
        """Sum income and expense per category, largest totals first.

        Raises:
            AggregationError: On a bad range or database failure.
        """
        start, end = parse_date_range(start_date, end_date)
        breakdown = CategoryBreakdown()

        try:
            with self.db_manager.connect() as conn:
                for type_ in TRANSACTION_TYPES:
                    cursor = conn.execute(
                        """
                        SELECT c.id, c.name, c.icon, SUM(t.amount) AS total
                        FROM transactions t
                        JOIN categories c ON t.category_id = c.id
                        WHERE t.user_id = ?
                          AND t.type = ?
                          AND t.transaction_date BETWEEN ? AND ?
                        GROUP BY c.id, c.name, c.icon
                        ORDER BY total DESC, c.id
                        """,
                        (user_id, type_, start.isoformat(), end.isoformat()),
                    )
                    setattr(
                        breakdown,
                        type_,
                        [
                            CategoryTotal(
                                category_id=row[0],
                                category_name=row[1],
                                icon=row[2],
                                total=to_cents(row[3]),
                            )
                            for row in cursor.fetchall()
                        ],
                    )
        except sqlite3.Error as e:
            logger.error(f"Category stats query failed for user {user_id}: {e}")
            raise AggregationError(f"获取类别统计数据失败: {e}") from e

        return breakdown

    def trend(
        self, user_id: int, start_date: DateLike, end_date: DateLike
    ) -> TrendSeries:
        """Build a gap-filled income/expense series for a chart.

        The bucket size is chosen from the span of the range (see
        tools.trends.choose_granularity). Every bucket in the range appears in
        the output, in calendar order, with zero where there is no data.

        Args:
            user_id: Owning user.
            start_date: First day (date or YYYY-MM-DD).
            end_date: Last day, inclusive (date or YYYY-MM-DD).

        Returns:
            TrendSeries with equal-length dates/income/expense lists.

        Raises:
            AggregationError: On a bad range or database failure.
        """
        start, end = parse_date_range(start_date, end_date)
        granularity = trends.choose_granularity(start, end)
        keys = trends.bucket_keys(start, end, granularity)

        logger.debug(
            f"Trend for user {user_id} {start}..{end}: "
            f"{len(keys)} {granularity.name} buckets"
        )

        series = {}
        try:
            with self.db_manager.connect() as conn:
                for type_ in TRANSACTION_TYPES:
                    series[type_] = trends.overlay(
                        keys,
                        self._grouped_sums(conn, user_id, type_, start, end, granularity),
                    )
        except sqlite3.Error as e:
            logger.error(f"Trend query failed for user {user_id}: {e}")
            raise AggregationError(f"获取趋势统计数据失败: {e}") from e

        return TrendSeries(
            dates=trends.format_labels(keys, granularity),
            income=series["income"],
            expense=series["expense"],
            interval=granularity.interval,
        )

    def _grouped_sums(
        self,
        conn,
        user_id: int,
        type_: str,
        start: date,
        end: date,
        granularity: trends.Granularity,
    ) -> List[Tuple[object, Decimal]]:
        cursor = conn.execute(
            f"""
            SELECT {granularity.sql_key} AS bucket, SUM(amount) AS total
            FROM transactions
            WHERE user_id = ?
              AND type = ?
              AND transaction_date BETWEEN ? AND ?
            GROUP BY bucket
            ORDER BY bucket
            """,
            (user_id, type_, start.isoformat(), end.isoformat()),
        )
        return [
            (granularity.key_from_sql(bucket), to_cents(total))
            for bucket, total in cursor.fetchall()
        ]
