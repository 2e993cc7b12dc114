"""Seed a bank's category tree from a YAML file."""

from pathlib import Path
from typing import Any, List

import yaml

from gift.paths import resolve_path
from logger import get_logger
from models.category import Category
from services.store import QuestionBankStore

logger = get_logger()


def _collect_paths(entries: List[Any], prefix: str, paths: List[str]) -> None:
    for entry in entries or []:
        name = str(entry.get("name") or "").strip() if isinstance(entry, dict) else ""
        if not name:
            logger.warning(f"Skipping seed entry with no name under '{prefix or 'top'}'")
            continue
        path = f"{prefix}/{name}" if prefix else name
        paths.append(path)
        _collect_paths(entry.get("children", []), path, paths)


def load_seed_paths(seed_file: Path) -> List[str]:
    """Read a seed file and flatten it into category paths, parents first.

    Raises:
        FileNotFoundError: If the seed file doesn't exist.
        ValueError: If the top level of the file is not a list.
        yaml.YAMLError: If YAML is invalid.
    """
    if not seed_file.exists():
        raise FileNotFoundError(f"Seed file not found: {seed_file}")

    with open(seed_file, "r", encoding="utf-8") as f:
        entries = yaml.safe_load(f) or []

    if not isinstance(entries, list):
        raise ValueError(f"Seed file must contain a list of categories: {seed_file}")

    paths: List[str] = []
    _collect_paths(entries, "", paths)
    return paths


def seed_categories(store: QuestionBankStore, paths: List[str]) -> List[Category]:
    """Create whatever categories of the given paths the store lacks.

    Returns:
        The categories that were created.
    """
    known = store.categories
    created: List[Category] = []
    for path in paths:
        _, new = resolve_path(path, known)
        known.extend(new)
        created.extend(new)

    store.bulk_import(created, [])
    return created
