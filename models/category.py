"""Category model for transaction categorization."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    """Represents a seeded transaction category.

    Attributes:
        id: Unique identifier.
        name: Display name.
        type: 'income' or 'expense'.
        icon: Icon name used by the frontend, e.g. "utensils".
    """

    id: int
    name: str
    type: str
    icon: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "icon": self.icon,
        }
