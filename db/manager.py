"""SQLite access for the question bank store."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List

from config import Config, get_migrations_dir
from db.schema import apply_pending, pending_migrations


class DatabaseManager:
    """Opens connections to the bank database named by the config."""

    def __init__(self, config: Config):
        self.config = config

    def _open(self) -> sqlite3.Connection:
        self.config.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.config.db_path)
        # Deleting a bank cascades to its categories and questions.
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def connect(self):
        """Yield a connection that is closed on exit."""
        conn = self._open()
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()

    def pending(self) -> List[str]:
        with self.connect() as conn:
            return pending_migrations(conn, self.get_migrations_dir())

    def ensure_schema(self) -> List[str]:
        """Bring the schema up to date, returning the migrations that ran."""
        with self.connect() as conn:
            return apply_pending(conn, self.get_migrations_dir())
