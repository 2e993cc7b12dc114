#!/usr/bin/env python3

import argparse
import sys
from pathlib import Path
from cli.banks import add_bank_argument, resolve_bank
from gift.validator import has_errors
from logger import get_logger
from services.gift_transfer import ImportBlockedError

logger = get_logger()


def _read_source(path_arg):
    source_path = Path(path_arg)
    if not source_path.exists():
        logger.error(f"File not found: {path_arg}")
        sys.exit(1)
    return source_path.read_text(encoding="utf-8")


def _log_findings(findings):
    for finding in findings:
        log = logger.error if finding.is_error else logger.warning
        log(f"Line {finding.line}: {finding.message}  |  {finding.excerpt}")


def cmd_export(args, services):
    """Export a bank (or one category subtree) to a GIFT file."""
    bank = resolve_bank(args, services)

    if args.prefix is not None:
        services.config.export_context_prefix = args.prefix

    content = services.transfer.export_bank(bank.id, scope=args.category)
    if not content:
        logger.warning("Nothing to export.")

    if args.output == "-":
        print(content)
        return

    if args.output:
        output = Path(args.output)
        path = services.transfer.write_export(content, output.name, output.parent)
    else:
        path = services.transfer.write_export(
            content, services.transfer.export_filename(bank.name)
        )
    logger.info(f"✓ Exported '{bank.name}' to {path}")


def cmd_validate(args, services):
    """Check a GIFT file without importing it."""
    findings = services.transfer.validate(_read_source(args.gift_file))

    if not findings:
        logger.info("✓ No problems found.")
        return

    _log_findings(findings)
    errors = sum(1 for finding in findings if finding.is_error)
    logger.info(f"\n{errors} error(s), {len(findings) - errors} warning(s)")
    if has_errors(findings):
        sys.exit(1)


def cmd_import(args, services):
    """Import a GIFT file into a bank."""
    bank = resolve_bank(args, services)
    text = _read_source(args.gift_file)

    try:
        result = services.transfer.import_text(bank.id, text)
    except ImportBlockedError as e:
        _log_findings(e.findings)
        logger.error("Import cancelled: fix the errors above and try again.")
        sys.exit(1)

    _log_findings(result.findings)
    logger.info(f"✓ Imported {result.questions_added} question(s) into '{bank.name}'")
    logger.info(f"  New categories: {result.categories_added}")


def setup_parser(subparsers):
    """Setup gift subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "gift",
        help="Import, export and validate GIFT files",
        description="Move questions between a bank and GIFT text files",
    )

    gift_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available GIFT commands",
        dest="subcommand",
        required=True,
    )

    export_parser = gift_subparsers.add_parser(
        "export",
        help="Export a bank to GIFT",
        epilog="""
Examples:
  python -m cli gift export
  python -m cli gift export --category cat_1a2b3c4d5e6f --output algebra.gift.txt
  python -m cli gift export --prefix '$course$/top' --output -
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    export_parser.add_argument(
        "--category", help="Only export this category ID and its subcategories"
    )
    export_parser.add_argument(
        "--output",
        help="Output file path, or '-' for stdout (default: <export_dir>/<bank>.gift.txt)",
    )
    export_parser.add_argument(
        "--prefix",
        help="Context prefix for $CATEGORY paths (overrides config), e.g. 'top'",
    )
    add_bank_argument(export_parser)
    export_parser.set_defaults(func=cmd_export)

    validate_parser = gift_subparsers.add_parser(
        "validate", help="Check a GIFT file for structural problems"
    )
    validate_parser.add_argument("gift_file", help="Path to the GIFT file")
    validate_parser.set_defaults(func=cmd_validate)

    import_parser = gift_subparsers.add_parser(
        "import", help="Import a GIFT file into a bank"
    )
    import_parser.add_argument("gift_file", help="Path to the GIFT file")
    add_bank_argument(import_parser)
    import_parser.set_defaults(func=cmd_import)
