from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List


class QuestionKind(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    ESSAY = "essay"


@dataclass
class Choice:
    """One answer option of a multiple-choice question."""

    id: str
    text: str  # HTML
    is_correct: bool = False


@dataclass
class Question:
    """A question stored in exactly one category.

    Multiple correct choices are allowed; only the editor restricts it to one.
    """

    id: str
    category_id: str
    name: str
    content: str  # HTML
    kind: QuestionKind
    choices: List[Choice] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_essay(self) -> bool:
        return self.kind == QuestionKind.ESSAY

    @property
    def correct_choices(self) -> List[Choice]:
        return [choice for choice in self.choices if choice.is_correct]
