"""Fixtures shared by the whole suite: an in-memory bank database and services."""

import sqlite3
from contextlib import nullcontext
from pathlib import Path

import pytest

from config import Config, get_migrations_dir
from db.schema import apply_pending
from services.base import Services


class InMemoryDatabaseManager:
    """Stands in for DatabaseManager, reusing one open connection.

    connect() must not close the connection; the test_db fixture does that.
    """

    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return nullcontext(self.conn)

    def get_db_path(self):
        return Path(":memory:")

    def get_migrations_dir(self):
        return get_migrations_dir()


@pytest.fixture
def test_db():
    """In-memory SQLite connection with foreign keys on, closed after the test."""
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    root = tmp_path / "giftbank"
    return Config(
        base_dir=root,
        db_data_dir=root / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=root / "logs",
        export_dir=root / "exports",
    )


@pytest.fixture
def db_manager(test_db):
    """Manager over the in-memory database, no tables yet."""
    return InMemoryDatabaseManager(test_db)


@pytest.fixture
def db_manager_with_schema(db_manager):
    apply_pending(db_manager.conn, db_manager.get_migrations_dir())
    return db_manager


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Services wired to the migrated in-memory database."""
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def bank(services):
    """An active bank named 'Physics'."""
    return services.banks.create("Physics")
