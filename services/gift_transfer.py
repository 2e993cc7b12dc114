"""GIFT import and export for stored banks."""

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from config import Config
from db.repository import BankRepository
from gift import export, parse, validate
from gift.paths import ROOT_ID, CategoryIndex, is_sentinel, resolve_path
from gift.validator import has_errors
from logger import get_logger
from models.category import Category
from models.finding import ValidationFinding
from models.question import Question
from services.store import QuestionBankStore

logger = get_logger()

EXPORT_SUFFIX = ".gift.txt"
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')


class ImportBlockedError(Exception):
    """Raised when GIFT text has error-severity findings.

    Attributes:
        findings: Every finding of the rejected text, warnings included.
    """

    def __init__(self, findings: List[ValidationFinding]):
        self.findings = findings
        errors = [f for f in findings if f.is_error]
        super().__init__(
            f"Import blocked by {len(errors)} error(s); first at line {errors[0].line}: "
            f"{errors[0].message}"
        )


@dataclass
class ImportResult:
    """Outcome of a successful import."""

    categories_added: int
    questions_added: int
    findings: List[ValidationFinding] = field(default_factory=list)


def merge_categories(
    parsed: List[Category], questions: List[Question], existing: List[Category]
) -> Tuple[List[Category], List[Question]]:
    """Map parsed categories onto existing ones with the same path.

    Parsed categories carry fresh ids, so importing "Math" twice would
    otherwise create two sibling "Math" categories.

    Returns:
        Tuple of (categories to add, questions re-pointed at the merged ids).
    """
    parsed_index = CategoryIndex(parsed)
    # Top-level categories may be stored with no parent; paths resolve from ROOT_ID.
    known = [
        replace(c, parent_id=ROOT_ID)
        if not is_sentinel(c.id) and (c.parent_id is None or is_sentinel(c.parent_id))
        else c
        for c in existing
    ]
    created: List[Category] = []
    id_map: Dict[str, str] = {ROOT_ID: ROOT_ID}

    for category in parsed:
        if category.id in id_map:
            continue
        path = parsed_index.path_of(category.id)
        if path is None:
            continue
        target_id, new = resolve_path(path, known)
        known.extend(new)
        created.extend(new)
        id_map[category.id] = target_id

    remapped = [
        replace(q, category_id=id_map.get(q.category_id, q.category_id)) for q in questions
    ]
    return created, remapped


class GiftTransferService:
    """Moves bank content in and out of GIFT text.

    Args:
        repository: Where bank snapshots are loaded from and saved to.
        config: Application configuration (export directory and context prefix).
    """

    def __init__(self, repository: BankRepository, config: Config):
        self.repository = repository
        self.config = config

    def export_bank(self, bank_id: int, scope: Optional[str] = None) -> str:
        """Render a stored bank, or one category subtree of it, as GIFT text."""
        snapshot = self.repository.load(bank_id)
        content = export(
            snapshot.categories,
            snapshot.questions,
            scope=scope,
            context_prefix=self.config.export_context_prefix,
        )
        logger.info(
            f"Exported bank {bank_id}"
            + (f" (category {scope})" if scope else "")
            + f": {len(content)} characters"
        )
        return content

    def export_filename(self, bank_name: str) -> str:
        """File name for an exported bank, e.g. ``Biology.gift.txt``."""
        safe = _UNSAFE_FILENAME_CHARS.sub("_", bank_name.strip()) or "bank"
        return f"{safe}{EXPORT_SUFFIX}"

    def write_export(
        self, content: str, filename: str, directory: Optional[Path] = None
    ) -> Path:
        """Write exported text verbatim as UTF-8.

        Args:
            content: GIFT text from export_bank.
            filename: Target file name.
            directory: Target directory. Defaults to the configured export dir.

        Returns:
            Path of the written file.
        """
        directory = directory or self.config.export_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(content, encoding="utf-8")
        logger.info(f"Wrote export to {path}")
        return path

    def validate(self, text: str) -> List[ValidationFinding]:
        return validate(text)

    def import_text(self, bank_id: int, text: str) -> ImportResult:
        """Validate, parse and store GIFT text in a bank.

        Categories whose path already exists in the bank are reused.

        Raises:
            ImportBlockedError: If validation reports any error. Nothing is
                stored in that case.
        """
        findings = validate(text)
        if has_errors(findings):
            logger.warning(f"Import into bank {bank_id} blocked by validation errors")
            raise ImportBlockedError(findings)

        categories, questions = parse(text)
        store = QuestionBankStore(self.repository.load(bank_id))
        new_categories, questions = merge_categories(
            categories, questions, store.categories
        )
        if store.find_category(ROOT_ID) is None:
            new_categories.insert(0, categories[0])
        categories_added, questions_added = store.bulk_import(new_categories, questions)
        self.repository.save(bank_id, store.snapshot())

        logger.info(
            f"Imported {questions_added} question(s) and {categories_added} new "
            f"category(ies) into bank {bank_id} ({len(findings)} warning(s))"
        )
        return ImportResult(
            categories_added=categories_added,
            questions_added=questions_added,
            findings=findings,
        )
