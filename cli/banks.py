#!/usr/bin/env python3

import sys
from pathlib import Path
from logger import get_logger
from services.backups import BackupFormatError, dump_snapshot, load_snapshot

logger = get_logger()


def resolve_bank(args, services):
    """Return the bank named by --bank, or the active bank.

    Exits with status 1 if neither exists.
    """
    bank_name = getattr(args, "bank", None)
    if bank_name:
        bank = services.banks.find_by_name(bank_name)
        if not bank:
            logger.error(f"Bank '{bank_name}' not found.")
            logger.info("Use 'python -m cli banks list' to see available banks.")
            sys.exit(1)
        return bank

    bank = services.banks.find_active()
    if not bank:
        logger.error("No active bank. Create one with 'python -m cli banks create NAME'.")
        sys.exit(1)
    return bank


def add_bank_argument(parser):
    parser.add_argument(
        "--bank",
        help="Bank name (defaults to the active bank)",
    )


def cmd_list(args, services):
    """List all banks."""
    banks = services.banks.find_all()

    if not banks:
        logger.info("No banks found.")
        return

    logger.info("\nBanks:")
    logger.info("=" * 80)
    for bank in banks:
        marker = " (active)" if bank.is_active else ""
        logger.info(f"ID: {bank.id}{marker}")
        logger.info(f"Name: {bank.name}")
        logger.info(f"Created: {bank.created_at:%Y-%m-%d %H:%M}")
        logger.info("-" * 80)

    logger.info(f"\nTotal banks: {len(banks)}")


def cmd_create(args, services):
    """Create a new bank."""
    try:
        bank = services.banks.create(args.name)
    except Exception as e:
        logger.error(f"Error creating bank: {e}")
        sys.exit(1)

    # Persist the top category so the bank shows up with content right away
    services.save_store(bank.id, services.open_store(bank.id))
    logger.info(f"✓ Bank '{bank.name}' created with ID: {bank.id}")
    if bank.is_active:
        logger.info("  This is now the active bank.")


def cmd_rename(args, services):
    """Rename a bank."""
    try:
        bank = services.banks.rename(args.bank_id, args.name)
    except Exception as e:
        logger.error(f"Error renaming bank: {e}")
        sys.exit(1)
    logger.info(f"✓ Bank {bank.id} renamed to '{bank.name}'")


def cmd_use(args, services):
    """Make a bank the active one."""
    try:
        bank = services.banks.activate(args.bank_id)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"✓ Active bank is now '{bank.name}'")


def cmd_delete(args, services):
    """Delete a bank and everything in it."""
    bank = services.banks.find(args.bank_id)
    if not bank:
        logger.error(f"Bank with ID {args.bank_id} not found.")
        sys.exit(1)

    snapshot = services.repository.load(bank.id)
    logger.info("\nBank to delete:")
    logger.info(f"  ID: {bank.id}")
    logger.info(f"  Name: {bank.name}")
    logger.info(f"  Categories: {len(snapshot.categories)}")
    logger.info(f"  Questions: {len(snapshot.questions)}")

    confirm = (
        input("\nAre you sure you want to delete this bank? (yes/no): ")
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    if services.banks.delete(bank.id):
        logger.info(f"✓ Bank '{bank.name}' deleted successfully.")
    else:
        logger.error("Failed to delete bank.")
        sys.exit(1)


def cmd_backup(args, services):
    """Write a bank to a JSON backup file."""
    bank = services.banks.find(args.bank_id)
    if not bank:
        logger.error(f"Bank with ID {args.bank_id} not found.")
        sys.exit(1)

    output = Path(args.output) if args.output else services.config.export_dir / f"{bank.name}.json"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_snapshot(services.repository.load(bank.id)), encoding="utf-8")
    logger.info(f"✓ Backed up bank '{bank.name}' to {output}")


def cmd_restore(args, services):
    """Create a new bank from a JSON backup file."""
    backup_path = Path(args.backup_file)
    if not backup_path.exists():
        logger.error(f"File not found: {args.backup_file}")
        sys.exit(1)

    try:
        snapshot = load_snapshot(backup_path.read_text(encoding="utf-8"))
    except BackupFormatError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        bank = services.banks.create(args.name)
    except Exception as e:
        logger.error(f"Error creating bank: {e}")
        sys.exit(1)

    services.repository.save(bank.id, snapshot)
    logger.info(
        f"✓ Restored {len(snapshot.categories)} categories and "
        f"{len(snapshot.questions)} questions into bank '{bank.name}' (ID: {bank.id})"
    )


def setup_parser(subparsers):
    """Setup banks subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "banks",
        help="Manage question banks",
        description="Create, list, switch, back up and delete question banks",
    )

    banks_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available bank commands",
        dest="subcommand",
        required=True,
    )

    list_parser = banks_subparsers.add_parser("list", help="List all banks")
    list_parser.set_defaults(func=cmd_list)

    create_parser = banks_subparsers.add_parser("create", help="Create a new bank")
    create_parser.add_argument("name", help="Name of the new bank")
    create_parser.set_defaults(func=cmd_create)

    rename_parser = banks_subparsers.add_parser("rename", help="Rename a bank")
    rename_parser.add_argument("bank_id", type=int, help="ID of the bank")
    rename_parser.add_argument("name", help="New name")
    rename_parser.set_defaults(func=cmd_rename)

    use_parser = banks_subparsers.add_parser("use", help="Make a bank the active one")
    use_parser.add_argument("bank_id", type=int, help="ID of the bank")
    use_parser.set_defaults(func=cmd_use)

    delete_parser = banks_subparsers.add_parser("delete", help="Delete a bank by ID")
    delete_parser.add_argument("bank_id", type=int, help="ID of the bank to delete")
    delete_parser.set_defaults(func=cmd_delete)

    backup_parser = banks_subparsers.add_parser(
        "backup", help="Write a bank to a JSON backup file"
    )
    backup_parser.add_argument("bank_id", type=int, help="ID of the bank")
    backup_parser.add_argument(
        "--output",
        help="Output JSON file path (default: <export_dir>/<bank name>.json)",
    )
    backup_parser.set_defaults(func=cmd_backup)

    restore_parser = banks_subparsers.add_parser(
        "restore", help="Create a bank from a JSON backup file"
    )
    restore_parser.add_argument("backup_file", help="Path to the JSON backup")
    restore_parser.add_argument("--name", required=True, help="Name of the new bank")
    restore_parser.set_defaults(func=cmd_restore)
