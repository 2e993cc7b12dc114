"""Schema migration commands."""

from db.schema import available_migrations
from logger import get_logger

logger = get_logger()


def cmd_status(args, db_manager):
    """List bundled migrations with an APPLIED/PENDING marker each."""
    if not db_manager.get_db_path().exists():
        logger.info(f"No database at {db_manager.get_db_path()} yet; "
                    "'migrate apply' creates it.")
        return

    available = available_migrations(db_manager.get_migrations_dir())
    if not available:
        logger.info("No migrations found.")
        return

    pending = set(db_manager.pending())
    for name in available:
        logger.info(f"{'PENDING' if name in pending else 'APPLIED'}  {name}")
    logger.info(f"{len(available) - len(pending)} applied, {len(pending)} pending")


def cmd_apply(args, db_manager):
    applied = db_manager.ensure_schema()
    if applied:
        logger.info(f"Applied {len(applied)} migration(s).")
    else:
        logger.info("Schema is up to date.")


def setup_parser(subparsers):
    parser = subparsers.add_parser(
        "migrate",
        help="Database schema",
        description="Inspect and apply the bundled SQL migrations",
    )
    migrate_subparsers = parser.add_subparsers(dest="subcommand", required=True)

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show which migrations have run"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Run pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
