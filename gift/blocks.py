"""Blank-line segmentation of GIFT source.

The parser and the validator must agree on where one block ends and the
next begins, so both read the text through `split_blocks`.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

CATEGORY_DIRECTIVE = "$CATEGORY:"
COMMENT_PREFIX = "//"

# Escape-aware: an escaped colon inside a title never closes it.
TITLE_PATTERN = re.compile(r"::((?:\\.|[^\\])*?)::", re.DOTALL)

# Only LF, CRLF and CR end a line; form feeds and Unicode separators do not.
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


@dataclass
class Block:
    """A run of consecutive non-blank lines.

    Attributes:
        start_line: 1-based line number of the first line.
        lines: Raw lines, without line terminators.
    """

    start_line: int
    lines: List[str] = field(default_factory=list)

    def numbered(self) -> Iterator[Tuple[int, str]]:
        """Yield (line number, raw line) pairs."""
        for offset, line in enumerate(self.lines):
            yield self.start_line + offset, line

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def is_category_directive(line: str) -> bool:
    return line.strip().startswith(CATEGORY_DIRECTIVE)


def is_comment(line: str) -> bool:
    return line.strip().startswith(COMMENT_PREFIX)


def directive_value(line: str) -> str:
    """Text after the `$CATEGORY:` marker, trimmed."""
    return line.strip()[len(CATEGORY_DIRECTIVE):].strip()


def split_blocks(text: str) -> List[Block]:
    """Split text on runs of blank (whitespace-only) lines."""
    blocks: List[Block] = []
    current = None
    for number, line in enumerate(LINE_BREAK_PATTERN.split(text), start=1):
        if not line.strip():
            current = None
            continue
        if current is None:
            current = Block(start_line=number)
            blocks.append(current)
        current.lines.append(line)
    return blocks
