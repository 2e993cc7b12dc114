"""Bank content persistence.

The store that edits a bank never talks to SQLite directly. It receives a
`BankSnapshot` from a `BankRepository` and hands one back to be saved.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime
from typing import Dict, List

from config import DEFAULT_CATEGORY_NAME
from gift.paths import ROOT_ID
from models.bank import BankSnapshot
from models.category import Category
from models.question import Choice, Question, QuestionKind


def default_snapshot(category_name: str = DEFAULT_CATEGORY_NAME) -> BankSnapshot:
    """Content of a bank that has never been saved: just the top category."""
    return BankSnapshot(
        categories=[Category(id=ROOT_ID, name=category_name, parent_id=None)],
        questions=[],
    )


class BankRepository(ABC):
    """Loads and saves whole-bank snapshots."""

    @abstractmethod
    def load(self, bank_id: int) -> BankSnapshot:
        """Return the stored content of a bank.

        A bank with no stored categories yields `default_snapshot()`.
        """

    @abstractmethod
    def save(self, bank_id: int, snapshot: BankSnapshot) -> None:
        """Replace the stored content of a bank with the snapshot."""


class SQLiteBankRepository(BankRepository):
    """Stores snapshots in the categories/questions/choices tables.

    Args:
        db_manager: Database manager instance for database operations.
        default_category_name: Display name of the top category of a new bank.
    """

    def __init__(self, db_manager, default_category_name: str = DEFAULT_CATEGORY_NAME):
        self.db_manager = db_manager
        self.default_category_name = default_category_name

    def load(self, bank_id: int) -> BankSnapshot:
        with self.db_manager.connect() as conn:
            category_rows = conn.execute(
                """
                SELECT id, name, parent_id FROM categories
                WHERE bank_id = ? ORDER BY position
                """,
                (bank_id,),
            ).fetchall()

            if not category_rows:
                return default_snapshot(self.default_category_name)

            question_rows = conn.execute(
                """
                SELECT id, category_id, name, content, kind, created_at FROM questions
                WHERE bank_id = ? ORDER BY position
                """,
                (bank_id,),
            ).fetchall()

            choice_rows = conn.execute(
                """
                SELECT question_id, id, text, is_correct FROM choices
                WHERE bank_id = ? ORDER BY question_id, position
                """,
                (bank_id,),
            ).fetchall()

        choices_by_question: Dict[str, List[Choice]] = defaultdict(list)
        for question_id, choice_id, text, is_correct in choice_rows:
            choices_by_question[question_id].append(
                Choice(id=choice_id, text=text, is_correct=bool(is_correct))
            )

        categories = [
            Category(id=row[0], name=row[1], parent_id=row[2]) for row in category_rows
        ]
        questions = [
            Question(
                id=row[0],
                category_id=row[1],
                name=row[2],
                content=row[3],
                kind=QuestionKind(row[4]),
                choices=choices_by_question.get(row[0], []),
                created_at=datetime.fromisoformat(row[5]),
            )
            for row in question_rows
        ]
        return BankSnapshot(categories=categories, questions=questions)

    def save(self, bank_id: int, snapshot: BankSnapshot) -> None:
        with self.db_manager.connect() as conn:
            try:
                conn.execute("DELETE FROM choices WHERE bank_id = ?", (bank_id,))
                conn.execute("DELETE FROM questions WHERE bank_id = ?", (bank_id,))
                conn.execute("DELETE FROM categories WHERE bank_id = ?", (bank_id,))

                conn.executemany(
                    """
                    INSERT INTO categories (bank_id, id, name, parent_id, position)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    [
                        (bank_id, c.id, c.name, c.parent_id, position)
                        for position, c in enumerate(snapshot.categories)
                    ],
                )
                conn.executemany(
                    """
                    INSERT INTO questions
                        (bank_id, id, category_id, name, content, kind, created_at, position)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            bank_id,
                            q.id,
                            q.category_id,
                            q.name,
                            q.content,
                            QuestionKind(q.kind).value,
                            q.created_at.isoformat(),
                            position,
                        )
                        for position, q in enumerate(snapshot.questions)
                    ],
                )
                conn.executemany(
                    """
                    INSERT INTO choices (bank_id, question_id, id, text, is_correct, position)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (bank_id, q.id, choice.id, choice.text, int(choice.is_correct), position)
                        for q in snapshot.questions
                        for position, choice in enumerate(q.choices)
                    ],
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise
