"""In-memory owner of one bank's categories and questions.

Every edit replaces records instead of mutating them in place, so snapshots
handed out earlier (to the exporter, to a repository) never change under
their holder.
"""

import copy
import uuid
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from gift.paths import ROOT_ID, CategoryIndex, is_sentinel, new_category_id
from models.bank import BankSnapshot
from models.category import Category
from models.question import Choice, Question, QuestionKind


def new_question_id() -> str:
    return f"q_{uuid.uuid4().hex[:12]}"


def new_choice_id() -> str:
    return f"choice_{uuid.uuid4().hex[:12]}"


def _clean_name(name: str, what: str) -> str:
    name = name.strip()
    if not name:
        raise ValueError(f"{what} name cannot be empty")
    return name


class QuestionBankStore:
    """Mutable view over a bank snapshot.

    Args:
        snapshot: Initial content. It is copied, never modified.
    """

    def __init__(self, snapshot: BankSnapshot):
        self._categories: List[Category] = list(snapshot.categories)
        self._questions: List[Question] = list(snapshot.questions)

    @property
    def categories(self) -> List[Category]:
        return list(self._categories)

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    def snapshot(self) -> BankSnapshot:
        """Independent copy of the current content."""
        return BankSnapshot(
            categories=copy.deepcopy(self._categories),
            questions=copy.deepcopy(self._questions),
        )

    def index(self) -> CategoryIndex:
        return CategoryIndex(self._categories)

    def find_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self._categories if c.id == category_id), None)

    def find_question(self, question_id: str) -> Optional[Question]:
        return next((q for q in self._questions if q.id == question_id), None)

    def questions_in(self, category_id: str) -> List[Question]:
        """Questions of one category, in storage order."""
        return [q for q in self._questions if q.category_id == category_id]

    def _require_category(self, category_id: str) -> Category:
        category = self.find_category(category_id)
        if category is None:
            raise ValueError(f"Category with ID {category_id} not found")
        return category

    def _require_question(self, question_id: str) -> Question:
        question = self.find_question(question_id)
        if question is None:
            raise ValueError(f"Question with ID {question_id} not found")
        return question

    def _replace_category(self, updated: Category) -> Category:
        self._categories = [updated if c.id == updated.id else c for c in self._categories]
        return updated

    def _replace_question(self, updated: Question) -> Question:
        self._questions = [updated if q.id == updated.id else q for q in self._questions]
        return updated

    # Categories

    def add_category(self, name: str, parent_id: Optional[str] = ROOT_ID) -> Category:
        """Create a category under an existing parent.

        Raises:
            ValueError: If the name is empty or the parent does not exist.
        """
        name = _clean_name(name, "Category")
        if parent_id is not None:
            self._require_category(parent_id)

        category = Category(id=new_category_id(), name=name, parent_id=parent_id)
        self._categories.append(category)
        return category

    def rename_category(self, category_id: str, name: str) -> Category:
        category = self._require_category(category_id)
        return self._replace_category(replace(category, name=_clean_name(name, "Category")))

    def move_category(self, category_id: str, new_parent_id: Optional[str]) -> Category:
        """Re-parent a category.

        Raises:
            ValueError: If the category is the top category, or the move would
                make a category its own ancestor.
        """
        category = self._require_category(category_id)
        if is_sentinel(category_id):
            raise ValueError("The top category cannot be moved")

        if new_parent_id is not None:
            self._require_category(new_parent_id)
            if self.index().is_descendant(new_parent_id, category_id):
                raise ValueError(
                    f"Cannot move category {category_id} under its own descendant {new_parent_id}"
                )

        return self._replace_category(replace(category, parent_id=new_parent_id))

    def delete_category(self, category_id: str) -> List[str]:
        """Delete a category, its descendants and all of their questions.

        Returns:
            IDs of the removed categories, the category itself first.

        Raises:
            ValueError: If the category is the top category or does not exist.
        """
        self._require_category(category_id)
        if is_sentinel(category_id):
            raise ValueError("The top category cannot be deleted")

        removed = [c.id for c in self.index().descendants(category_id)]
        removed_set = set(removed)
        self._categories = [c for c in self._categories if c.id not in removed_set]
        self._questions = [q for q in self._questions if q.category_id not in removed_set]
        return removed

    # Questions

    def create_question(
        self,
        category_id: str,
        name: str,
        content: str,
        kind: QuestionKind = QuestionKind.MULTIPLE_CHOICE,
        choices: Sequence[Tuple[str, bool]] = (),
    ) -> Question:
        """Add a question.

        Args:
            category_id: Owning category.
            name: Question title.
            content: Question HTML.
            kind: Multiple-choice or essay. Essay questions ignore choices.
            choices: (text, is_correct) pairs in display order.
        """
        self._require_category(category_id)
        kind = QuestionKind(kind)
        question = Question(
            id=new_question_id(),
            category_id=category_id,
            name=_clean_name(name, "Question"),
            content=content,
            kind=kind,
            choices=[]
            if kind == QuestionKind.ESSAY
            else [
                Choice(id=new_choice_id(), text=text, is_correct=is_correct)
                for text, is_correct in choices
            ],
            created_at=datetime.now(),
        )
        self._questions.append(question)
        return question

    def update_question(self, question_id: str, **changes) -> Question:
        """Replace fields of a question (name, content, kind, choices).

        Switching a question to essay drops its choices.
        """
        question = self._require_question(question_id)
        allowed = {"name", "content", "kind", "choices"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update question fields: {', '.join(sorted(unknown))}")

        if "name" in changes:
            changes["name"] = _clean_name(changes["name"], "Question")
        if "kind" in changes:
            changes["kind"] = QuestionKind(changes["kind"])

        updated = replace(question, **changes)
        if updated.kind == QuestionKind.ESSAY:
            updated = replace(updated, choices=[])
        return self._replace_question(updated)

    def delete_question(self, question_id: str) -> bool:
        before = len(self._questions)
        self._questions = [q for q in self._questions if q.id != question_id]
        return len(self._questions) < before

    def move_question(self, question_id: str, category_id: str) -> Question:
        question = self._require_question(question_id)
        self._require_category(category_id)
        return self._replace_question(replace(question, category_id=category_id))

    def duplicate_question(self, question_id: str) -> Question:
        """Copy a question with fresh ids right after the original."""
        original = self._require_question(question_id)
        duplicate = replace(
            original,
            id=new_question_id(),
            name=f"{original.name} (copy)",
            choices=[replace(choice, id=new_choice_id()) for choice in original.choices],
            created_at=datetime.now(),
        )
        position = self._questions.index(original) + 1
        self._questions.insert(position, duplicate)
        return duplicate

    # Import

    def bulk_import(
        self, categories: Sequence[Category], questions: Sequence[Question]
    ) -> Tuple[int, int]:
        """Append parsed records.

        Categories whose id already exists are skipped; questions are always
        appended.

        Returns:
            Tuple of (categories added, questions added).
        """
        known = {c.id for c in self._categories}
        added = 0
        for category in categories:
            if category.id in known:
                continue
            self._categories.append(category)
            known.add(category.id)
            added += 1

        self._questions.extend(questions)
        return added, len(questions)
