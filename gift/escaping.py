"""Backslash escaping for GIFT free text.

GIFT reserves six characters in titles, question text and answers:
``: ~ = # { }``. A reserved character is written with a leading backslash.
Readers accept a backslash before any character.
"""

import re
from typing import Iterator, List, Optional, Tuple

RESERVED_CHARACTERS = ":~={}#"

_RESERVED_PATTERN = re.compile(r"([:~=#{}])")
_ESCAPED_PATTERN = re.compile(r"\\(.)", re.DOTALL)


def escape(text: str) -> str:
    """Insert a backslash before every reserved character.

    Single pass over the input, so backslashes inserted for one character
    are never matched again.
    """
    return _RESERVED_PATTERN.sub(r"\\\1", text)


def unescape(text: str) -> str:
    """Drop exactly one backslash before any character.

    A lone trailing backslash is kept as is.
    """
    return _ESCAPED_PATTERN.sub(r"\1", text)


def iter_unescaped(text: str, start: int = 0) -> Iterator[Tuple[int, str]]:
    """Yield (index, char) for every character not preceded by an escape."""
    i = start
    length = len(text)
    while i < length:
        char = text[i]
        if char == "\\":
            i += 2
            continue
        yield i, char
        i += 1


def find_unescaped(text: str, chars: str, start: int = 0) -> int:
    """Index of the first unescaped character in ``chars``, or -1."""
    for i, char in iter_unescaped(text, start):
        if char in chars:
            return i
    return -1


def rfind_unescaped(text: str, chars: str, start: int = 0) -> int:
    """Index of the last unescaped character in ``chars``, or -1."""
    found = -1
    for i, char in iter_unescaped(text, start):
        if char in chars:
            found = i
    return found


def split_unescaped(text: str, markers: str) -> List[Tuple[Optional[str], str]]:
    """Split text at every unescaped marker character.

    Returns (marker, text) pairs. The first pair carries marker None and
    holds whatever precedes the first marker.

        >>> split_unescaped("=a~b", "=~")
        [(None, ''), ('=', 'a'), ('~', 'b')]
    """
    segments: List[Tuple[Optional[str], str]] = []
    marker: Optional[str] = None
    begin = 0
    for i, char in iter_unescaped(text):
        if char in markers:
            segments.append((marker, text[begin:i]))
            marker = char
            begin = i + 1
    segments.append((marker, text[begin:]))
    return segments
