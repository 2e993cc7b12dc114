#!/usr/bin/env python3

import sys
from pathlib import Path
from cli.banks import add_bank_argument, resolve_bank
from config import get_seed_path
from gift.paths import ROOT_ID
from logger import get_logger
from services.seeding import load_seed_paths, seed_categories

logger = get_logger()


def _log_tree(store, index, category, depth, visited):
    # visited guards against corrupted parent pointers
    if category.id in visited:
        return
    visited.add(category.id)

    count = len(store.questions_in(category.id))
    logger.info(f"{'  ' * depth}{category.name}  [{category.id}] ({count} questions)")
    for child in index.children_of(category.id):
        _log_tree(store, index, child, depth + 1, visited)


def cmd_list(args, services):
    """Show the category tree of a bank."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)
    index = store.index()

    logger.info(f"\nCategories in '{bank.name}':")
    logger.info("=" * 80)
    visited = set()
    for category in index.children_of(None):
        _log_tree(store, index, category, 0, visited)

    orphans = [c for c in store.categories if c.id not in visited]
    for category in orphans:
        logger.warning(f"Unreachable category: {category.name} [{category.id}]")

    logger.info(f"\nTotal categories: {len(store.categories)}")


def cmd_create(args, services):
    """Create a category."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    try:
        category = store.add_category(args.name, args.parent or ROOT_ID)
    except ValueError as e:
        logger.error(f"Error creating category: {e}")
        sys.exit(1)

    services.save_store(bank.id, store)
    logger.info(f"✓ Category created with ID: {category.id}")
    logger.info(f"  Path: {store.index().path_of(category.id)}")


def cmd_rename(args, services):
    """Rename a category."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    try:
        category = store.rename_category(args.category_id, args.name)
    except ValueError as e:
        logger.error(f"Error renaming category: {e}")
        sys.exit(1)

    services.save_store(bank.id, store)
    logger.info(f"✓ Category {category.id} renamed to '{category.name}'")


def cmd_move(args, services):
    """Move a category under another parent."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    try:
        category = store.move_category(args.category_id, args.parent_id)
    except ValueError as e:
        logger.error(f"Error moving category: {e}")
        sys.exit(1)

    services.save_store(bank.id, store)
    logger.info(f"✓ Category '{category.name}' is now at {store.index().path_of(category.id)}")


def cmd_delete(args, services):
    """Delete a category, its subcategories and their questions."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    category = store.find_category(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    subtree = store.index().descendants(category.id)
    question_count = sum(len(store.questions_in(c.id)) for c in subtree)
    logger.info("\nCategory to delete:")
    logger.info(f"  ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    logger.info(f"  Subcategories: {len(subtree) - 1}")
    logger.info(f"  Questions: {question_count}")

    confirm = (
        input("\nAre you sure you want to delete this category? (yes/no): ")
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    try:
        removed = store.delete_category(category.id)
    except ValueError as e:
        logger.error(f"Error deleting category: {e}")
        sys.exit(1)

    services.save_store(bank.id, store)
    logger.info(f"✓ Deleted {len(removed)} category(ies) and {question_count} question(s).")


def cmd_seed(args, services):
    """Seed categories from a YAML file."""
    bank = resolve_bank(args, services)
    seed_file = Path(args.file) if args.file else get_seed_path()

    try:
        paths = load_seed_paths(seed_file)
    except Exception as e:
        logger.error(f"Error reading seed file: {e}")
        sys.exit(1)

    logger.info(f"\nSeeding categories from {seed_file}")
    logger.info("=" * 80)

    store = services.open_store(bank.id)
    created = seed_categories(store, paths)
    services.save_store(bank.id, store)

    for category in created:
        logger.info(f"✓ Created '{store.index().path_of(category.id)}' (ID: {category.id})")

    logger.info("=" * 80)
    logger.info("\nSeeding complete!")
    logger.info(f"Created: {len(created)}")
    logger.info(f"Skipped: {len(paths) - len(created)}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, move and delete the categories of a bank",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="Show the category tree")
    add_bank_argument(list_parser)
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser("create", help="Create a category")
    create_parser.add_argument("name", help="Category name")
    create_parser.add_argument(
        "--parent", help="Parent category ID (default: the top category)"
    )
    add_bank_argument(create_parser)
    create_parser.set_defaults(func=cmd_create)

    rename_parser = categories_subparsers.add_parser("rename", help="Rename a category")
    rename_parser.add_argument("category_id", help="ID of the category")
    rename_parser.add_argument("name", help="New name")
    add_bank_argument(rename_parser)
    rename_parser.set_defaults(func=cmd_rename)

    move_parser = categories_subparsers.add_parser(
        "move", help="Move a category under another parent"
    )
    move_parser.add_argument("category_id", help="ID of the category to move")
    move_parser.add_argument("parent_id", help="ID of the new parent category")
    add_bank_argument(move_parser)
    move_parser.set_defaults(func=cmd_move)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category and everything under it"
    )
    delete_parser.add_argument("category_id", help="ID of the category to delete")
    add_bank_argument(delete_parser)
    delete_parser.set_defaults(func=cmd_delete)

    seed_parser = categories_subparsers.add_parser(
        "seed", help="Seed categories from a YAML file"
    )
    seed_parser.add_argument(
        "--file", help="Seed file (default: db/seed/categories.yaml)"
    )
    add_bank_argument(seed_parser)
    seed_parser.set_defaults(func=cmd_seed)
