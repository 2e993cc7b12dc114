"""JSON backups of a bank in the browser editor's store format.

The document looks like::

    {
      "categories": [{"id": "root", "name": "Default", "parentId": null}],
      "questions": [{"id": "q_1", "categoryId": "root", "name": "Q",
                     "content": "<p>...</p>", "type": "MULTIPLE_CHOICE",
                     "choices": [{"id": "c1", "text": "4", "isCorrect": true}],
                     "createdAt": 1700000000000}]
    }
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from models.bank import BankSnapshot
from models.category import Category
from models.question import Choice, Question, QuestionKind

_KIND_TO_TYPE = {
    QuestionKind.MULTIPLE_CHOICE: "MULTIPLE_CHOICE",
    QuestionKind.ESSAY: "ESSAY",
}
_TYPE_TO_KIND = {value: key for key, value in _KIND_TO_TYPE.items()}


class BackupFormatError(ValueError):
    """The backup document is not valid JSON or does not match the schema."""


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ChoiceDocument(_Document):
    id: str
    text: str
    is_correct: bool = Field(default=False, alias="isCorrect")


class CategoryDocument(_Document):
    id: str
    name: str
    parent_id: Optional[str] = Field(default=None, alias="parentId")


class QuestionDocument(_Document):
    id: str
    category_id: str = Field(alias="categoryId")
    name: str
    content: str = ""
    type: Literal["MULTIPLE_CHOICE", "ESSAY"]
    choices: List[ChoiceDocument] = Field(default_factory=list)
    created_at: int = Field(alias="createdAt")  # epoch milliseconds


class StoreDocument(_Document):
    categories: List[CategoryDocument] = Field(default_factory=list)
    questions: List[QuestionDocument] = Field(default_factory=list)


def dump_snapshot(snapshot: BankSnapshot) -> str:
    """Serialize a snapshot to an indented JSON backup document."""
    document = StoreDocument(
        categories=[
            CategoryDocument(id=c.id, name=c.name, parent_id=c.parent_id)
            for c in snapshot.categories
        ],
        questions=[
            QuestionDocument(
                id=q.id,
                category_id=q.category_id,
                name=q.name,
                content=q.content,
                type=_KIND_TO_TYPE[QuestionKind(q.kind)],
                choices=[
                    ChoiceDocument(id=choice.id, text=choice.text, is_correct=choice.is_correct)
                    for choice in q.choices
                ],
                created_at=int(q.created_at.timestamp() * 1000),
            )
            for q in snapshot.questions
        ],
    )
    return document.model_dump_json(by_alias=True, indent=2)


def load_snapshot(text: str) -> BankSnapshot:
    """Parse a JSON backup document.

    Raises:
        BackupFormatError: If the text is not a valid backup document.
    """
    try:
        document = StoreDocument.model_validate_json(text)
    except ValidationError as e:
        raise BackupFormatError(f"Invalid bank backup: {e}") from e

    categories = [
        Category(id=c.id, name=c.name, parent_id=c.parent_id) for c in document.categories
    ]
    questions = [
        Question(
            id=q.id,
            category_id=q.category_id,
            name=q.name,
            content=q.content,
            kind=_TYPE_TO_KIND[q.type],
            choices=[]
            if q.type == "ESSAY"
            else [
                Choice(id=choice.id, text=choice.text, is_correct=choice.is_correct)
                for choice in q.choices
            ],
            created_at=datetime.fromtimestamp(q.created_at / 1000),
        )
        for q in document.questions
    ]
    return BankSnapshot(categories=categories, questions=questions)
