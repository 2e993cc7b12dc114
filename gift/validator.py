"""Line-accurate structural checks for GIFT text.

Runs on the same blocks as the parser but never builds records, so it is
safe on input the parser would mangle. Errors block an import; warnings are
shown to the user only.
"""

from typing import List, Sequence, Tuple

from gift.blocks import (
    TITLE_PATTERN,
    Block,
    directive_value,
    is_category_directive,
    is_comment,
    split_blocks,
)
from gift.escaping import find_unescaped, rfind_unescaped
from models.finding import Severity, ValidationFinding

EXCERPT_LENGTH = 60

_QUESTION_MARKERS = ("::", "{", "}")


def _excerpt(line: str) -> str:
    line = line.strip()
    if len(line) > EXCERPT_LENGTH:
        return line[:EXCERPT_LENGTH] + "..."
    return line


def _finding(line_number: int, severity: Severity, message: str, line: str) -> ValidationFinding:
    return ValidationFinding(
        line=line_number, severity=severity, message=message, excerpt=_excerpt(line)
    )


def _line_at(numbered: Sequence[Tuple[int, str]], offset: int) -> Tuple[int, str]:
    """Map a character offset in the joined lines back to its source line."""
    position = 0
    for number, line in numbered:
        position += len(line) + 1
        if offset < position:
            return number, line
    return numbered[-1]


def _check_question(block: Block, numbered: List[Tuple[int, str]]) -> List[ValidationFinding]:
    findings = []
    text = "\n".join(line for _, line in numbered)
    first_number, first_line = numbered[0]

    if not TITLE_PATTERN.search(text):
        findings.append(
            _finding(first_number, Severity.ERROR, "Missing question title (::Title::)", first_line)
        )

    open_brace = find_unescaped(text, "{")
    if open_brace == -1:
        findings.append(
            _finding(first_number, Severity.ERROR, "Missing opening brace '{'", first_line)
        )
        return findings

    brace_number, brace_line = _line_at(numbered, open_brace)
    close_brace = rfind_unescaped(text, "}", open_brace + 1)
    if close_brace == -1:
        findings.append(
            _finding(brace_number, Severity.ERROR, "Missing closing brace '}'", brace_line)
        )
        return findings

    inner = text[open_brace + 1 : close_brace].strip()
    if not inner:
        return findings

    has_correct = find_unescaped(inner, "=") != -1
    has_distractor = find_unescaped(inner, "~") != -1
    if has_distractor and not has_correct:
        findings.append(
            _finding(
                brace_number,
                Severity.WARNING,
                "Multiple-choice question has no correct answer (=)",
                brace_line,
            )
        )
    elif not has_correct and not has_distractor:
        findings.append(
            _finding(
                block.start_line,
                Severity.WARNING,
                "Unrecognized answer structure: expected '=' or '~' choices, or an empty essay body",
                block.lines[0],
            )
        )
    return findings


def _check_block(block: Block) -> List[ValidationFinding]:
    findings = []
    question_lines = []
    for number, line in block.numbered():
        if is_category_directive(line):
            if not directive_value(line):
                findings.append(
                    _finding(number, Severity.ERROR, "Empty $CATEGORY: value", line)
                )
        elif not is_comment(line):
            question_lines.append((number, line))

    starts_with_comment = is_comment(block.lines[0])
    has_markers = any(marker in block.text for marker in _QUESTION_MARKERS)
    if question_lines and not (starts_with_comment and not has_markers):
        findings.extend(_check_question(block, question_lines))
    return findings


def validate(text: str) -> List[ValidationFinding]:
    """Report structural errors and warnings in GIFT text.

    Args:
        text: Raw GIFT source. Empty text has no findings.

    Returns:
        Findings in source order.
    """
    findings: List[ValidationFinding] = []
    for block in split_blocks(text):
        findings.extend(_check_block(block))
    return sorted(findings, key=lambda finding: finding.line)


def has_errors(findings: Sequence[ValidationFinding]) -> bool:
    """True if any finding should block an import."""
    return any(finding.severity == Severity.ERROR for finding in findings)
