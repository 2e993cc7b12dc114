"""Category model for the question-bank tree."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    """A node in a bank's category tree.

    Attributes:
        id: Opaque unique identifier.
        name: Display label. Paths are built from trimmed names.
        parent_id: Parent category ID, or None for a root.
    """

    id: str
    name: str
    parent_id: Optional[str] = None
