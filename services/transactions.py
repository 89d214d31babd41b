"""Transaction service for database operations.

Every query is scoped to the owning user. Updates and deletes filter on both
the transaction id and the user id, so a caller can never touch another
user's record and cannot tell whether such a record exists.
"""

import sqlite3
from typing import List, Optional
from datetime import date
from decimal import Decimal
from errors import NotFoundOrForbidden, PersistenceError
from models.transaction import Transaction, TransactionFilters
from logger import get_logger

logger = get_logger()

# SQL Query Constants
_TRANSACTION_SELECT_FIELDS = """t.id, t.user_id, t.category_id, t.amount, t.type,
       t.description, t.transaction_date, c.name, c.icon"""

_TRANSACTION_INSERT_FIELDS = (
    "user_id, category_id, amount, type, description, transaction_date"
)

# Automatically generate placeholders from field count
_TRANSACTION_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * len(_TRANSACTION_INSERT_FIELDS.split(',')))})"
)


class TransactionService:
    """Service for managing a user's transactions."""

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(
        self,
        user_id: int,
        category_id: int,
        amount: Decimal,
        type: str,
        transaction_date: date,
        description: Optional[str] = None,
    ) -> Transaction:
        """Create a transaction owned by user_id.

        Args:
            user_id: Owning user.
            category_id: Existing category ID.
            amount: Positive amount.
            type: 'income' or 'expense'.
            transaction_date: Calendar date of the transaction.
            description: Optional free text.

        Returns:
            The created Transaction with its id populated.

        Raises:
            PersistenceError: If the insert fails (e.g., unknown category).
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    f"""
                    INSERT INTO transactions ({_TRANSACTION_INSERT_FIELDS})
                    VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                    """,
                    (
                        user_id,
                        category_id,
                        float(amount),
                        type,
                        description,
                        transaction_date.isoformat(),
                    ),
                )
                conn.commit()
                transaction_id = cursor.lastrowid
        except sqlite3.Error as e:
            logger.error(f"Failed to create transaction for user {user_id}: {e}")
            raise PersistenceError(f"添加交易记录失败: {e}") from e

        logger.info(f"Created transaction {transaction_id} for user {user_id}")

        return Transaction(
            id=transaction_id,
            user_id=user_id,
            category_id=category_id,
            amount=amount,
            type=type,
            transaction_date=transaction_date,
            description=description,
        )

    def update(
        self,
        transaction_id: int,
        user_id: int,
        category_id: int,
        amount: Decimal,
        type: str,
        transaction_date: date,
        description: Optional[str] = None,
    ) -> None:
        """Replace the editable fields of a transaction owned by user_id.

        Raises:
            NotFoundOrForbidden: If no transaction matches (id, user_id).
            PersistenceError: If the update fails.
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    """
                    UPDATE transactions
                    SET category_id = ?, amount = ?, type = ?, description = ?,
                        transaction_date = ?
                    WHERE id = ? AND user_id = ?
                    """,
                    (
                        category_id,
                        float(amount),
                        type,
                        description,
                        transaction_date.isoformat(),
                        transaction_id,
                        user_id,
                    ),
                )
                conn.commit()
                updated = cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to update transaction {transaction_id}: {e}")
            raise PersistenceError(f"更新交易记录失败: {e}") from e

        if updated == 0:
            raise NotFoundOrForbidden("未找到记录或无权限修改")

        logger.info(f"Updated transaction {transaction_id} for user {user_id}")

    def delete(self, transaction_id: int, user_id: int) -> None:
        """Delete a transaction owned by user_id.

        Raises:
            NotFoundOrForbidden: If no transaction matches (id, user_id).
            PersistenceError: If the delete fails.
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    "DELETE FROM transactions WHERE id = ? AND user_id = ?",
                    (transaction_id, user_id),
                )
                conn.commit()
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to delete transaction {transaction_id}: {e}")
            raise PersistenceError(f"删除交易记录失败: {e}") from e

        if deleted == 0:
            raise NotFoundOrForbidden("未找到记录或无权限删除")

        logger.info(f"Deleted transaction {transaction_id} for user {user_id}")

    def find(self, transaction_id: int, user_id: int) -> Optional[Transaction]:
        """Get a single transaction owned by user_id.

        Returns:
            Transaction object if found and owned, None otherwise.

        Raises:
            PersistenceError: If the query fails.
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    f"""
                    SELECT {_TRANSACTION_SELECT_FIELDS}
                    FROM transactions t
                    JOIN categories c ON t.category_id = c.id
                    WHERE t.id = ? AND t.user_id = ?
                    """,
                    (transaction_id, user_id),
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to fetch transaction {transaction_id}: {e}")
            raise PersistenceError(f"获取交易记录失败: {e}") from e

        if row:
            return self._row_to_transaction(row)
        return None

    def find_by_user(
        self, user_id: int, filters: Optional[TransactionFilters] = None
    ) -> List[Transaction]:
        """Get a user's transactions, optionally filtered.

        Args:
            user_id: Owning user.
            filters: Optional date bounds, type and category.

        Returns:
            List of Transaction objects with category name/icon, newest first
            (same-day rows by id, newest first).

        Raises:
            PersistenceError: If the query fails.
        """
        filters = filters or TransactionFilters()

        query = f"""
            SELECT {_TRANSACTION_SELECT_FIELDS}
            FROM transactions t
            JOIN categories c ON t.category_id = c.id
            WHERE t.user_id = ?
        """
        params = [user_id]

        if filters.start_date is not None:
            query += " AND t.transaction_date >= ?"
            params.append(filters.start_date.isoformat())

        if filters.end_date is not None:
            query += " AND t.transaction_date <= ?"
            params.append(filters.end_date.isoformat())

        if filters.type is not None:
            query += " AND t.type = ?"
            params.append(filters.type)

        if filters.category_id is not None:
            query += " AND t.category_id = ?"
            params.append(filters.category_id)

        query += " ORDER BY t.transaction_date DESC, t.id DESC"

        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(query, params)
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Failed to list transactions for user {user_id}: {e}")
            raise PersistenceError(f"获取交易记录失败: {e}") from e

        logger.debug(f"Found {len(rows)} transactions for user {user_id}")
        return [self._row_to_transaction(row) for row in rows]

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            user_id=row[1],
            category_id=row[2],
            amount=Decimal(str(row[3])),
            type=row[4],
            description=row[5],
            transaction_date=date.fromisoformat(row[6]),
            category_name=row[7],
            category_icon=row[8],
        )
