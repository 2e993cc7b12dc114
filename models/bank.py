"""Bank registry entry and bank content snapshot."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from models.category import Category
from models.question import Question


@dataclass
class Bank:
    """Represents a registered question bank.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Bank name (unique). Also used for export file names.
        is_active: Whether this is the bank commands operate on by default.
        created_at: Timestamp when the bank was created.
    """

    id: int
    name: str
    is_active: bool
    created_at: datetime


@dataclass
class BankSnapshot:
    """Categories and questions of one bank, in storage order."""

    categories: List[Category] = field(default_factory=list)
    questions: List[Question] = field(default_factory=list)
