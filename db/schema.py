"""Ordered SQL migrations tracked in the schema_migrations table."""

import sqlite3
from pathlib import Path
from typing import List, Set

from logger import get_logger

logger = get_logger()


def init_schema_migrations_table(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def applied_migrations(conn: sqlite3.Connection) -> Set[str]:
    cursor = conn.execute("SELECT migration_file FROM schema_migrations")
    return {row[0] for row in cursor.fetchall()}


def available_migrations(migrations_dir: Path) -> List[str]:
    """Migration file names, in the order they must be applied."""
    if not migrations_dir.exists():
        return []
    return sorted(path.name for path in migrations_dir.glob("*.sql"))


def pending_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> List[str]:
    init_schema_migrations_table(conn)
    applied = applied_migrations(conn)
    return [name for name in available_migrations(migrations_dir) if name not in applied]


def apply_migration(conn: sqlite3.Connection, migrations_dir: Path, migration_file: str) -> None:
    """Run one migration script and record it.

    Raises:
        sqlite3.Error: If the script fails. The transaction is rolled back.
    """
    sql = (migrations_dir / migration_file).read_text()
    try:
        conn.executescript(sql)
        conn.execute(
            "INSERT INTO schema_migrations (migration_file) VALUES (?)",
            (migration_file,),
        )
        conn.commit()
        logger.info(f"Applied migration: {migration_file}")
    except sqlite3.Error as e:
        conn.rollback()
        logger.error(f"Error applying migration {migration_file}: {e}")
        raise


def apply_pending(conn: sqlite3.Connection, migrations_dir: Path) -> List[str]:
    """Apply every migration not yet recorded. Returns the applied names."""
    pending = pending_migrations(conn, migrations_dir)
    for migration_file in pending:
        apply_migration(conn, migrations_dir, migration_file)
    return pending
