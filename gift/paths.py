"""Category tree navigation and `$CATEGORY:` path resolution.

Categories arrive as a flat list of parent pointers. `CategoryIndex` builds
the id lookup and the ordered child lists once, and every walk over it
keeps a visited set so a corrupted (cyclic) tree ends the walk instead of
looping forever.
"""

import logging
import re
import uuid
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from models.category import Category

logger = logging.getLogger(__name__)

ROOT_ID = "root"
SENTINEL_IDS = frozenset({ROOT_ID, "top"})
TOP_MARKER = "top"
ROOT_CATEGORY_NAME = "Imported Questions"

# Moodle context token that may precede "top", e.g. "$course$/top/Math".
_CONTEXT_TOKEN = re.compile(r"^\$\w+\$$")


def new_category_id() -> str:
    return f"cat_{uuid.uuid4().hex[:12]}"


def is_sentinel(category_id: Optional[str]) -> bool:
    return category_id in SENTINEL_IDS


class CategoryIndex:
    """Read-only lookup over a list of categories.

    Args:
        categories: Categories in storage order. The list is not modified.
    """

    def __init__(self, categories: Iterable[Category]):
        self.by_id: Dict[str, Category] = {}
        self.children: Dict[Optional[str], List[Category]] = defaultdict(list)
        for category in categories:
            self.by_id[category.id] = category
            self.children[category.parent_id].append(category)

    def __contains__(self, category_id: str) -> bool:
        return category_id in self.by_id

    def get(self, category_id: str) -> Optional[Category]:
        return self.by_id.get(category_id)

    def children_of(self, category_id: Optional[str]) -> List[Category]:
        return list(self.children.get(category_id, []))

    def find_cycle(self, category_id: str) -> Optional[List[str]]:
        """Walk parent pointers from a category looking for a loop.

        Returns:
            The ids forming the loop, in walk order, or None if the walk
            reaches a root or an unknown parent.
        """
        seen: List[str] = []
        positions: Dict[str, int] = {}
        current = category_id
        while current is not None and current in self.by_id:
            if current in positions:
                return seen[positions[current]:]
            positions[current] = len(seen)
            seen.append(current)
            current = self.by_id[current].parent_id
        return None

    def is_acyclic(self) -> bool:
        return all(self.find_cycle(category_id) is None for category_id in self.by_id)

    def ancestors(self, category_id: str) -> Optional[List[Category]]:
        """Return the category followed by its ancestors, nearest first.

        The walk stops before a sentinel category. Returns None if the id is
        unknown or the chain loops back on itself.
        """
        chain: List[Category] = []
        visited = set()
        current = self.by_id.get(category_id)
        if current is None:
            return None

        while current is not None and not is_sentinel(current.id):
            if current.id in visited:
                logger.warning(f"Category cycle detected at {current.id}")
                return None
            visited.add(current.id)
            chain.append(current)
            if current.parent_id is None:
                break
            current = self.by_id.get(current.parent_id)
        return chain

    def path_of(self, category_id: str) -> Optional[str]:
        """Slash-joined trimmed names from the outermost ancestor down.

        Sentinel categories have the empty path. Unknown or cyclic
        categories have no path (None).
        """
        chain = self.ancestors(category_id)
        if chain is None:
            return None
        return "/".join(category.name.strip() for category in reversed(chain))

    def descendants(self, category_id: str) -> List[Category]:
        """Pre-order list: the category itself, then each child's subtree.

        Children are visited in storage order. Unknown ids give an empty list.
        """
        root = self.by_id.get(category_id)
        if root is None:
            return []

        ordered: List[Category] = []
        visited = set()
        stack = [root]
        while stack:
            category = stack.pop()
            if category.id in visited:
                continue
            visited.add(category.id)
            ordered.append(category)
            # Reversed so the first stored child is popped first.
            stack.extend(reversed(self.children.get(category.id, [])))
        return ordered

    def is_descendant(self, category_id: str, ancestor_id: str) -> bool:
        return any(c.id == category_id for c in self.descendants(ancestor_id))


def path_of(category_id: str, categories: Iterable[Category]) -> Optional[str]:
    """Resolve the `$CATEGORY:` path of a category. See CategoryIndex.path_of."""
    return CategoryIndex(categories).path_of(category_id)


def descendants_of(category_id: str, categories: Iterable[Category]) -> List[Category]:
    return CategoryIndex(categories).descendants(category_id)


def find_cycle(category_id: str, categories: Iterable[Category]) -> Optional[List[str]]:
    return CategoryIndex(categories).find_cycle(category_id)


def split_path(path: str) -> List[str]:
    """Split a `$CATEGORY:` value into trimmed, non-empty name segments.

    A leading context token (``$course$``) and a leading ``top`` are dropped.
    """
    segments = [segment.strip() for segment in path.split("/")]
    if segments and _CONTEXT_TOKEN.match(segments[0]):
        segments = segments[1:]
    if segments and segments[0] == TOP_MARKER:
        segments = segments[1:]
    return [segment for segment in segments if segment]


def resolve_path(
    path: str, existing: Iterable[Category]
) -> Tuple[str, List[Category]]:
    """Find or create the chain of categories named by a path.

    Each segment matches a category with the same trimmed name (case
    sensitive) under the current parent id. Missing segments are created
    with fresh ids. ``existing`` is not modified.

    Args:
        path: Slash-delimited path, e.g. ``top/Math/Algebra``.
        existing: Categories already known to the caller.

    Returns:
        Tuple of (id of the last segment's category, newly created
        categories in creation order). An empty path resolves to ROOT_ID.
    """
    by_parent_and_name: Dict[Tuple[Optional[str], str], str] = {}
    for category in existing:
        key = (category.parent_id, category.name.strip())
        by_parent_and_name.setdefault(key, category.id)

    created: List[Category] = []
    parent_id = ROOT_ID
    for segment in split_path(path):
        key = (parent_id, segment)
        category_id = by_parent_and_name.get(key)
        if category_id is None:
            category = Category(id=new_category_id(), name=segment, parent_id=parent_id)
            created.append(category)
            category_id = category.id
            by_parent_and_name[key] = category_id
            logger.debug(f"Created category '{segment}' under {parent_id}")
        parent_id = category_id

    return parent_id, created
