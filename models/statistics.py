"""Result types produced by the statistics service."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class Totals:
    """Income and expense sums over a date range."""

    income: Decimal = Decimal("0.00")
    expense: Decimal = Decimal("0.00")

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense

    def to_dict(self) -> dict:
        return {
            "income": float(self.income),
            "expense": float(self.expense),
            "balance": float(self.balance),
        }


@dataclass
class CategoryTotal:
    """Sum of one category's transactions."""

    category_id: int
    category_name: str
    icon: Optional[str]
    total: Decimal

    def to_dict(self) -> dict:
        return {
            "id": self.category_id,
            "category_name": self.category_name,
            "icon": self.icon,
            "total": float(self.total),
        }


@dataclass
class CategoryBreakdown:
    income: List[CategoryTotal] = field(default_factory=list)
    expense: List[CategoryTotal] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "income": [c.to_dict() for c in self.income],
            "expense": [c.to_dict() for c in self.expense],
        }


@dataclass
class TrendSeries:
    """Parallel label/income/expense lists for a trend chart.

    Attributes:
        dates: Display labels, one per bucket.
        income: Income sum per bucket.
        expense: Expense sum per bucket.
        interval: Granularity label: "日", "周" or "月".
    """

    dates: List[str]
    income: List[Decimal]
    expense: List[Decimal]
    interval: str

    def to_dict(self) -> dict:
        return {
            "dates": list(self.dates),
            "income": [float(v) for v in self.income],
            "expense": [float(v) for v in self.expense],
            "interval": self.interval,
        }
