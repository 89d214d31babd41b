#!/usr/bin/env python3

from models.transaction import TRANSACTION_TYPES
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List the seeded categories."""
    categories = services.categories.find_all(args.type)

    if not categories:
        logger.info("No categories found. Have migrations been applied?")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(
            f"{category.id:>4}  {category.type:<8} {category.name}"
            f"  ({category.icon or '-'})"
        )

    logger.info(f"\nTotal categories: {len(categories)}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Inspect categories",
        description="Inspect transaction categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List categories")
    list_parser.add_argument(
        "--type", choices=TRANSACTION_TYPES, help="Only list one type"
    )
    list_parser.set_defaults(func=cmd_list)
