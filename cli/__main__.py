#!/usr/bin/env python3
"""
giftbank: keep Moodle-style question banks in SQLite and move them through GIFT.

    python -m cli banks create "Physics 101"
    python -m cli categories seed
    python -m cli gift validate quiz.gift.txt
    python -m cli gift import quiz.gift.txt --bank "Physics 101"
    python -m cli gift export --output -
    python -m cli migrate status
"""

import sys
import argparse

from cli import banks, categories, questions, gift, migrate
from config import load_config
from db.manager import DatabaseManager
from logger import setup_logging
from services.base import Services

COMMAND_MODULES = (banks, categories, questions, gift, migrate)


def _writes_to_stdout(args):
    """`gift export --output -` owns stdout, so console logging stays off."""
    return args.command == "gift" and getattr(args, "output", None) == "-"


def build_parser():
    parser = argparse.ArgumentParser(
        prog="giftbank",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for module in COMMAND_MODULES:
        module.setup_parser(subparsers)
    return parser


def _dispatch(args, config):
    if args.command == "migrate":
        args.func(args, DatabaseManager(config))
        return

    services = Services(config)
    services.db_manager.ensure_schema()
    args.func(args, services)


def main():
    args = build_parser().parse_args()

    try:
        config = load_config()
        setup_logging(config, console=not _writes_to_stdout(args))
        _dispatch(args, config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
