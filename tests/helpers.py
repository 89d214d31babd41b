"""Helper utilities for tests."""

from datetime import date
from decimal import Decimal
from pathlib import Path
import sqlite3

# Seeded category IDs (see db/migrations/002_seed_categories.sql)
SALARY = 1
BONUS = 2
FOOD = 6
TRANSPORT = 7
SHOPPING = 8


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        with open(migration_file, "r", encoding="utf-8") as f:
            conn.executescript(f.read())

    conn.commit()


def add_transaction(
    services,
    user_id: int,
    day: date,
    amount: str,
    type: str = "expense",
    category_id: int = FOOD,
    description: str = None,
):
    """Create a transaction with terse arguments."""
    return services.transactions.create(
        user_id=user_id,
        category_id=category_id,
        amount=Decimal(amount),
        type=type,
        transaction_date=day,
        description=description,
    )


class UnavailableDatabaseManager:
    """Database manager whose connections always fail, like a missing file."""

    def connect(self):
        raise sqlite3.OperationalError("unable to open database file")
