"""Serialize categories and questions to GIFT text.

Output layout, one blank line between blocks::

    // question: 0  name: Switch category to Math/Algebra
    $CATEGORY: Math/Algebra

    // question: q_3f  name: Sum
    ::Sum::[html]<p>2+2?</p>{
    \t=4
    \t~5
    }
"""

import logging
import re
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from gift.escaping import escape
from gift.paths import TOP_MARKER, CategoryIndex
from models.category import Category
from models.question import Question, QuestionKind

logger = logging.getLogger(__name__)

_LINE_BREAKS = re.compile(r"\s*[\r\n\v\f\x1c-\x1e\x85\u2028\u2029]+\s*")


def _single_line(text: str) -> str:
    # A blank line inside rich text would end the GIFT block early.
    return _LINE_BREAKS.sub(" ", text.strip())


def _field(text: str) -> str:
    """Escape one free-text field for a single GIFT line.

    An odd run of trailing backslashes would escape the delimiter written
    after the field, so it is padded with one more.
    """
    escaped = escape(_single_line(text))
    trailing = len(escaped) - len(escaped.rstrip("\\"))
    if trailing % 2:
        escaped += "\\"
    return escaped


def _full_path(path: str, context_prefix: str) -> str:
    prefix = context_prefix.rstrip("/")
    path = path.strip("/")
    full = "/".join(part for part in (prefix, path) if part)
    return full or TOP_MARKER


def _category_block(path: str) -> str:
    return f"// question: 0  name: Switch category to {path}\n$CATEGORY: {path}"


def _question_block(question: Question) -> str:
    name = question.name.strip()
    lines = [
        f"// question: {question.id[:4]}  name: {_single_line(name)}",
        f"::{_field(name)}::[html]{_field(question.content)}{{",
    ]
    if question.kind == QuestionKind.MULTIPLE_CHOICE:
        for choice in question.choices:
            marker = "=" if choice.is_correct else "~"
            lines.append(f"\t{marker}{_field(choice.text)}")
    lines.append("}")
    return "\n".join(lines)


def export(
    categories: Sequence[Category],
    questions: Sequence[Question],
    scope: Optional[str] = None,
    context_prefix: str = "",
) -> str:
    """Render categories and their questions as GIFT text.

    Args:
        categories: All categories of the bank, in storage order.
        questions: All questions of the bank, in storage order.
        scope: Optional category ID. When given, only that category and its
            descendants are written (pre-order).
        context_prefix: Prepended to every category path, e.g. ``top`` or
            ``$course$/top``.

    Returns:
        GIFT text without leading or trailing whitespace.
    """
    index = CategoryIndex(categories)
    targets: List[Category] = (
        index.descendants(scope) if scope is not None else list(categories)
    )

    by_category: Dict[str, List[Question]] = defaultdict(list)
    for question in questions:
        by_category[question.category_id].append(question)

    blocks: List[str] = []
    for category in targets:
        path = index.path_of(category.id)
        if path is None:
            logger.warning(f"Skipping category {category.id}: path cannot be resolved")
            continue

        blocks.append(_category_block(_full_path(path, context_prefix)))
        for question in by_category.get(category.id, []):
            blocks.append(_question_block(question))

    return "\n\n".join(blocks).strip()
