"""Parser for search command - look up a character's raid clear history."""

import argparse

from .common_arguments import add_common_arguments, add_fflogs_arguments


def add_search_subparser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    """Add search command parser.

    Args:
        subparsers: Subparsers object from main parser

    Returns:
        The created parser
    """
    search_parser = subparsers.add_parser(
        "search",
        help="Search a character's raid clear history",
        description=(
            "Find the earliest clear of each selected tier for a character. "
            "Accepts 'Name@Server', 'Name Server' or just 'Name' (all regional "
            "servers are checked)."
        ),
    )
    search_parser.add_argument(
        "character",
        help="Character name, optionally with server (e.g. 'Name@Moogle')",
    )
    search_parser.add_argument(
        "--tier",
        "-t",
        action="append",
        metavar="ID",
        help="Tier id to search (e.g. 68-5); repeat for several (default: all)",
    )
    search_parser.add_argument(
        "--server",
        "-s",
        type=str,
        help="Server name; overrides any server in the character argument",
    )
    add_fflogs_arguments(search_parser)
    add_common_arguments(search_parser)
    return search_parser
