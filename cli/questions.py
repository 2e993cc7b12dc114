#!/usr/bin/env python3

import sys
from cli.banks import add_bank_argument, resolve_bank
from logger import get_logger
from models.question import QuestionKind

logger = get_logger()


def cmd_list(args, services):
    """List the questions of a bank, optionally for one category."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)
    index = store.index()

    if args.category:
        if args.category not in index:
            logger.error(f"Category with ID {args.category} not found.")
            sys.exit(1)
        questions = store.questions_in(args.category)
    else:
        questions = store.questions

    if not questions:
        logger.info("No questions found.")
        return

    logger.info(f"\nQuestions in '{bank.name}':")
    logger.info("=" * 80)
    for question in questions:
        path = index.path_of(question.category_id)
        logger.info(f"ID: {question.id}")
        logger.info(f"Name: {question.name}")
        logger.info(f"Category: {'?' if path is None else path or 'top'}")
        logger.info(f"Type: {question.kind.value} ({len(question.choices)} choices)")
        logger.info("-" * 80)

    logger.info(f"\nTotal questions: {len(questions)}")


def cmd_show(args, services):
    """Show one question with its choices."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    question = store.find_question(args.question_id)
    if not question:
        logger.error(f"Question with ID {args.question_id} not found.")
        sys.exit(1)

    logger.info(f"\n{question.name}  [{question.id}]")
    logger.info("=" * 80)
    logger.info(question.content)
    for choice in question.choices:
        marker = "=" if choice.is_correct else "~"
        logger.info(f"  {marker} {choice.text}")
    if question.kind == QuestionKind.MULTIPLE_CHOICE and not question.correct_choices:
        logger.warning("This question has no correct choice.")


def cmd_create(args, services):
    """Interactively create a new question."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    print("\nCreate New Question")
    print("=" * 80)

    category_id = input("Category ID: ").strip()
    if store.find_category(category_id) is None:
        logger.error(f"Category with ID {category_id} not found.")
        sys.exit(1)

    name = input("Question title: ").strip()
    content = input("Question text (HTML allowed): ").strip()
    kind_input = input("Type (mc/essay) [mc]: ").strip().lower() or "mc"
    if kind_input not in ("mc", "essay"):
        logger.error("Type must be 'mc' or 'essay'.")
        sys.exit(1)
    kind = QuestionKind.ESSAY if kind_input == "essay" else QuestionKind.MULTIPLE_CHOICE

    choices = []
    if kind == QuestionKind.MULTIPLE_CHOICE:
        print("Enter choices, one per line. Prefix the correct one with '='. Empty line ends.")
        while True:
            line = input("> ").strip()
            if not line:
                break
            if line.startswith("="):
                choices.append((line[1:].strip(), True))
            else:
                choices.append((line, False))

    try:
        question = store.create_question(category_id, name, content, kind, choices)
    except ValueError as e:
        logger.error(f"Error creating question: {e}")
        sys.exit(1)

    services.save_store(bank.id, store)
    logger.info(f"\n✓ Question created successfully with ID: {question.id}")
    if kind == QuestionKind.MULTIPLE_CHOICE and not question.correct_choices:
        logger.warning("No choice is marked correct.")


def cmd_delete(args, services):
    """Delete a question by ID."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    if not store.delete_question(args.question_id):
        logger.error(f"Question with ID {args.question_id} not found.")
        sys.exit(1)

    services.save_store(bank.id, store)
    logger.info(f"✓ Question {args.question_id} deleted.")


def cmd_move(args, services):
    """Move a question to another category."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    try:
        question = store.move_question(args.question_id, args.category_id)
    except ValueError as e:
        logger.error(f"Error moving question: {e}")
        sys.exit(1)

    services.save_store(bank.id, store)
    logger.info(f"✓ Question '{question.name}' moved to {args.category_id}")


def cmd_duplicate(args, services):
    """Copy a question within its category."""
    bank = resolve_bank(args, services)
    store = services.open_store(bank.id)

    try:
        duplicate = store.duplicate_question(args.question_id)
    except ValueError as e:
        logger.error(f"Error duplicating question: {e}")
        sys.exit(1)

    services.save_store(bank.id, store)
    logger.info(f"✓ Created '{duplicate.name}' (ID: {duplicate.id})")


def setup_parser(subparsers):
    """Setup questions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "questions",
        help="Manage questions",
        description="List, create, move, copy and delete questions",
    )

    questions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available question commands",
        dest="subcommand",
        required=True,
    )

    list_parser = questions_subparsers.add_parser("list", help="List questions")
    list_parser.add_argument("--category", help="Only list questions of this category ID")
    add_bank_argument(list_parser)
    list_parser.set_defaults(func=cmd_list)

    show_parser = questions_subparsers.add_parser("show", help="Show a question")
    show_parser.add_argument("question_id", help="ID of the question")
    add_bank_argument(show_parser)
    show_parser.set_defaults(func=cmd_show)

    create_parser = questions_subparsers.add_parser(
        "create", help="Create a new question interactively"
    )
    add_bank_argument(create_parser)
    create_parser.set_defaults(func=cmd_create)

    delete_parser = questions_subparsers.add_parser("delete", help="Delete a question")
    delete_parser.add_argument("question_id", help="ID of the question to delete")
    add_bank_argument(delete_parser)
    delete_parser.set_defaults(func=cmd_delete)

    move_parser = questions_subparsers.add_parser(
        "move", help="Move a question to another category"
    )
    move_parser.add_argument("question_id", help="ID of the question")
    move_parser.add_argument("category_id", help="ID of the target category")
    add_bank_argument(move_parser)
    move_parser.set_defaults(func=cmd_move)

    duplicate_parser = questions_subparsers.add_parser(
        "duplicate", help="Copy a question"
    )
    duplicate_parser.add_argument("question_id", help="ID of the question to copy")
    add_bank_argument(duplicate_parser)
    duplicate_parser.set_defaults(func=cmd_duplicate)
