"""Diagnostics produced by the GIFT validator."""

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationFinding:
    """A single problem found in GIFT source text.

    Attributes:
        line: 1-based source line number.
        severity: ERROR blocks an import, WARNING does not.
        message: Human-readable description.
        excerpt: Short snippet of the offending source line.
    """

    line: int
    severity: Severity
    message: str
    excerpt: str

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR
