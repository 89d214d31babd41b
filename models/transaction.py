from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

TRANSACTION_TYPES = ("income", "expense")


@dataclass
class Transaction:
    id: Optional[int]  # None until inserted
    user_id: int
    category_id: int
    amount: Decimal  # always positive
    type: str  # 'income' or 'expense'
    transaction_date: date
    description: Optional[str] = None
    category_name: Optional[str] = None  # joined from categories on read
    category_icon: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert transaction to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "amount": float(self.amount),
            "type": self.type,
            "description": self.description,
            "transaction_date": self.transaction_date.isoformat(),
            "category_name": self.category_name,
            "category_icon": self.category_icon,
        }


@dataclass
class TransactionFilters:
    """Optional narrowing applied when listing or exporting transactions.

    Date bounds are inclusive and may be given independently.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[str] = None
    category_id: Optional[int] = None
