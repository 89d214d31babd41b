"""Category service for database operations.

Categories are seed data; this service only reads them.
"""

import sqlite3
from typing import List, Optional
from errors import PersistenceError
from models.category import Category
from models.transaction import TRANSACTION_TYPES
from logger import get_logger

logger = get_logger()

_CATEGORY_SELECT_FIELDS = "id, name, type, icon"


class CategoryService:
    """Service for reading categories."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self, type: Optional[str] = None) -> List[Category]:
        """Get all categories, optionally only those of one type.

        Args:
            type: 'income' or 'expense'. Any other value is ignored.

        Returns:
            List of Category objects, ordered by type then name.

        Raises:
            PersistenceError: If the query fails.
        """
        query = f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories"
        params = []

        if type in TRANSACTION_TYPES:
            query += " WHERE type = ?"
            params.append(type)

        query += " ORDER BY type, name"

        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(query, params)
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Failed to list categories: {e}")
            raise PersistenceError(f"获取类别列表失败: {e}") from e

        return [self._row_to_category(row) for row in rows]

    def _row_to_category(self, row: tuple) -> Category:
        return Category(id=row[0], name=row[1], type=row[2], icon=row[3])
