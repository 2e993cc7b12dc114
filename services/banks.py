"""Bank registry service for database operations."""

from datetime import datetime
from typing import List, Optional
from models.bank import Bank

_BANK_SELECT_FIELDS = "id, name, is_active, created_at"


class BankService:
    """Service for managing the registry of question banks."""

    def __init__(self, db_manager):
        """Initialize the bank service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Bank]:
        """Get all banks, ordered by id."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(f"SELECT {_BANK_SELECT_FIELDS} FROM banks ORDER BY id")
            return [self._row_to_bank(row) for row in cursor.fetchall()]

    def find(self, bank_id: int) -> Optional[Bank]:
        """Get a single bank by ID.

        Returns:
            Bank object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_BANK_SELECT_FIELDS} FROM banks WHERE id = ?", (bank_id,)
            )
            row = cursor.fetchone()
            return self._row_to_bank(row) if row else None

    def find_by_name(self, name: str) -> Optional[Bank]:
        """Get a single bank by exact (case-sensitive) name."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_BANK_SELECT_FIELDS} FROM banks WHERE name = ?", (name,)
            )
            row = cursor.fetchone()
            return self._row_to_bank(row) if row else None

    def find_active(self) -> Optional[Bank]:
        """Get the active bank, or None if no bank has been activated."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_BANK_SELECT_FIELDS} FROM banks WHERE is_active = 1 LIMIT 1"
            )
            row = cursor.fetchone()
            return self._row_to_bank(row) if row else None

    def create(self, name: str) -> Bank:
        """Create a new bank.

        The first bank created becomes the active bank.

        Args:
            name: Bank name (must be unique and non-empty).

        Returns:
            The created Bank object with id populated.

        Raises:
            ValueError: If the name is empty.
            sqlite3.IntegrityError: If the name is already taken.
        """
        name = name.strip()
        if not name:
            raise ValueError("Bank name cannot be empty")

        with self.db_manager.connect() as conn:
            has_active = conn.execute(
                "SELECT 1 FROM banks WHERE is_active = 1 LIMIT 1"
            ).fetchone()
            cursor = conn.execute(
                "INSERT INTO banks (name, is_active) VALUES (?, ?)",
                (name, 0 if has_active else 1),
            )
            conn.commit()
            bank_id = cursor.lastrowid

        return self.find(bank_id)

    def rename(self, bank_id: int, name: str) -> Bank:
        """Rename a bank.

        Raises:
            ValueError: If the name is empty or the bank does not exist.
        """
        name = name.strip()
        if not name:
            raise ValueError("Bank name cannot be empty")

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE banks SET name = ? WHERE id = ?", (name, bank_id)
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise ValueError(f"Bank with ID {bank_id} not found")

        return self.find(bank_id)

    def activate(self, bank_id: int) -> Bank:
        """Make a bank the active one; every other bank becomes inactive.

        Raises:
            ValueError: If the bank does not exist.
        """
        if self.find(bank_id) is None:
            raise ValueError(f"Bank with ID {bank_id} not found")

        with self.db_manager.connect() as conn:
            conn.execute("UPDATE banks SET is_active = CASE WHEN id = ? THEN 1 ELSE 0 END", (bank_id,))
            conn.commit()

        return self.find(bank_id)

    def delete(self, bank_id: int) -> bool:
        """Delete a bank and all of its stored content.

        If the active bank is deleted, the oldest remaining bank becomes
        active.

        Returns:
            True if the bank was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            conn.execute("DELETE FROM choices WHERE bank_id = ?", (bank_id,))
            conn.execute("DELETE FROM questions WHERE bank_id = ?", (bank_id,))
            conn.execute("DELETE FROM categories WHERE bank_id = ?", (bank_id,))
            cursor = conn.execute("DELETE FROM banks WHERE id = ?", (bank_id,))
            deleted = cursor.rowcount > 0

            if deleted:
                has_active = conn.execute(
                    "SELECT 1 FROM banks WHERE is_active = 1 LIMIT 1"
                ).fetchone()
                if not has_active:
                    conn.execute(
                        "UPDATE banks SET is_active = 1 WHERE id = (SELECT MIN(id) FROM banks)"
                    )
            conn.commit()
            return deleted

    def _row_to_bank(self, row: tuple) -> Bank:
        return Bank(
            id=row[0],
            name=row[1],
            is_active=bool(row[2]),
            created_at=datetime.fromisoformat(row[3]),
        )
