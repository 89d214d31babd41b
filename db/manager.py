"""SQLite connection handling for the Accountbook database."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

from config import Config, get_migrations_dir


class DatabaseManager:
    """Opens connections to the database file named by the config.

    Every connection has foreign key enforcement switched on, so a
    transaction can only reference an existing user and category.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Yield a connection that is closed on exit.

        The data directory is created on first use.
        """
        db_path = self.get_db_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def exists(self) -> bool:
        """Whether the database file has been created yet."""
        return self.get_db_path().exists()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()
