"""CSV export of a user's transactions."""

import csv
import io
from typing import Iterable, Optional
from models.transaction import Transaction, TransactionFilters
from logger import get_logger

logger = get_logger()

# Spreadsheet apps need the BOM to detect UTF-8
CSV_BOM = "\ufeff"
CSV_HEADER = ["日期", "类型", "类别", "金额", "描述"]
TYPE_LABELS = {"income": "收入", "expense": "支出"}


def write_transactions_csv(transactions: Iterable[Transaction], output) -> int:
    """Write transactions as CSV rows (header included, no BOM).

    Args:
        transactions: Transactions with category_name populated.
        output: Text stream to write to.

    Returns:
        Number of data rows written.
    """
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)

    count = 0
    for transaction in transactions:
        writer.writerow(
            [
                transaction.transaction_date.isoformat(),
                TYPE_LABELS.get(transaction.type, transaction.type),
                transaction.category_name,
                f"{transaction.amount:.2f}",
                transaction.description or "",
            ]
        )
        count += 1

    return count


class ExportService:
    """Renders filtered transaction lists as CSV."""

    def __init__(self, transactions):
        """Initialize the export service.

        Args:
            transactions: TransactionService used to fetch rows, so exports
                and listings always apply identical filters.
        """
        self.transactions = transactions

    def export_csv(
        self, user_id: int, filters: Optional[TransactionFilters] = None
    ) -> str:
        """Export a user's filtered transactions.

        Returns:
            CSV text starting with a UTF-8 BOM.
        """
        records = self.transactions.find_by_user(user_id, filters)

        output = io.StringIO()
        output.write(CSV_BOM)
        count = write_transactions_csv(records, output)

        logger.info(f"Exported {count} transactions for user {user_id}")
        return output.getvalue()

    @staticmethod
    def filename(filters: TransactionFilters) -> str:
        return f"transactions_{filters.start_date}_to_{filters.end_date}.csv"
