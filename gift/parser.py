"""Parse GIFT text into categories and questions.

The parser never raises on malformed input. Missing titles and content get
placeholders, unsupported answer syntax is dropped, and anything that is
not a question at all is skipped with a warning. Rejecting bad input is the
validator's job.
"""

import logging
import re
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from gift.blocks import (
    TITLE_PATTERN,
    directive_value,
    is_category_directive,
    is_comment,
    split_blocks,
)
from gift.escaping import find_unescaped, rfind_unescaped, split_unescaped, unescape
from gift.paths import ROOT_CATEGORY_NAME, ROOT_ID, resolve_path
from gift.sanitizer import clean_html
from models.category import Category
from models.question import Choice, Question, QuestionKind

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Question"
DEFAULT_CONTENT = "<p>(no content)</p>"

_FORMAT_TAG_PATTERN = re.compile(r"^\s*\[[a-zA-Z]+\]")


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _extract_choices(body: str) -> List[Choice]:
    choices = []
    for marker, segment in split_unescaped(body, "=~#"):
        if marker not in ("=", "~"):
            continue
        text = clean_html(unescape(segment.strip()))
        if not text:
            continue
        choices.append(Choice(id=_new_id("choice"), text=text, is_correct=marker == "="))
    return choices


def parse_question(
    lines: List[str], category_id: str, created_at: Optional[datetime] = None
) -> Optional[Question]:
    """Build one question from the non-blank lines of a block.

    Comment lines are ignored. Returns None when the lines hold no brace
    body, i.e. nothing that can be read as a question.
    """
    body_lines = [line.strip() for line in lines if not is_comment(line)]
    source = "\n".join(body_lines).strip()
    if not source:
        return None

    title = DEFAULT_TITLE
    title_match = TITLE_PATTERN.search(source)
    if title_match:
        title = unescape(title_match.group(1)).strip() or DEFAULT_TITLE
        source = source[: title_match.start()] + source[title_match.end() :]

    open_brace = find_unescaped(source, "{")
    if open_brace == -1:
        logger.warning(f"Skipping block without answer braces: {source[:60]!r}")
        return None

    close_brace = rfind_unescaped(source, "}", open_brace + 1)
    if close_brace == -1:
        close_brace = len(source)

    prefix = _FORMAT_TAG_PATTERN.sub("", source[:open_brace], count=1)
    content = clean_html(unescape(prefix.strip())) or DEFAULT_CONTENT

    answer_body = source[open_brace + 1 : close_brace].strip()
    if answer_body:
        kind = QuestionKind.MULTIPLE_CHOICE
        choices = _extract_choices(answer_body)
    else:
        kind = QuestionKind.ESSAY
        choices = []

    return Question(
        id=_new_id("q"),
        category_id=category_id,
        name=title,
        content=content,
        kind=kind,
        choices=choices,
        created_at=created_at or datetime.now(),
    )


def parse(text: str) -> Tuple[List[Category], List[Question]]:
    """Parse GIFT text.

    Args:
        text: Raw GIFT source.

    Returns:
        Tuple of (categories, questions). The categories always start with
        the top category (id ROOT_ID) followed by every category created
        from `$CATEGORY:` paths.
    """
    categories: List[Category] = [
        Category(id=ROOT_ID, name=ROOT_CATEGORY_NAME, parent_id=None)
    ]
    questions: List[Question] = []
    current_category_id = ROOT_ID
    created_at = datetime.now()

    def flush(pending: List[str]) -> None:
        if not pending:
            return
        question = parse_question(pending, current_category_id, created_at)
        if question is not None:
            questions.append(question)

    for block in split_blocks(text):
        pending: List[str] = []
        for line in block.lines:
            if is_category_directive(line):
                flush(pending)
                pending = []
                current_category_id, created = resolve_path(
                    directive_value(line), categories
                )
                categories.extend(created)
                continue
            pending.append(line)
        flush(pending)

    logger.debug(
        f"Parsed {len(questions)} question(s) and {len(categories) - 1} category(ies)"
    )
    return categories, questions
