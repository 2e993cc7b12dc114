"""Helper utilities for tests."""

from datetime import datetime
from typing import Optional

from gift.paths import ROOT_ID
from models.category import Category
from models.question import Choice, Question, QuestionKind

FIXED_TIME = datetime(2024, 3, 1, 9, 30, 0)


def make_category(category_id: str, name: str, parent_id: Optional[str] = ROOT_ID) -> Category:
    return Category(id=category_id, name=name, parent_id=parent_id)


def make_question(
    question_id: str,
    category_id: str,
    name: str = "Sum",
    content: str = "<p>2+2?</p>",
    choices=(("4", True), ("5", False)),
) -> Question:
    """Build a multiple-choice question; pass choices=None for an essay."""
    if choices is None:
        return Question(
            id=question_id,
            category_id=category_id,
            name=name,
            content=content,
            kind=QuestionKind.ESSAY,
            created_at=FIXED_TIME,
        )
    return Question(
        id=question_id,
        category_id=category_id,
        name=name,
        content=content,
        kind=QuestionKind.MULTIPLE_CHOICE,
        choices=[
            Choice(id=f"{question_id}_c{i}", text=text, is_correct=is_correct)
            for i, (text, is_correct) in enumerate(choices)
        ],
        created_at=FIXED_TIME,
    )


def root_category(name: str = "Default for course") -> Category:
    return Category(id=ROOT_ID, name=name, parent_id=None)
