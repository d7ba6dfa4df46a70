"""Top-level argument parser for RaidRecord."""

import argparse

from raidrecord import __version__

from .search_parser import add_search_subparser
from .tiers_parser import add_tiers_subparser


def create_main_parser() -> argparse.ArgumentParser:
    """Create the main parser with all subcommands registered."""
    parser = argparse.ArgumentParser(
        prog="raidrecord",
        description="Look up a character's earliest Savage and Ultimate clears on FFLogs.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"raidrecord {__version__}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
    )
    add_search_subparser(subparsers)
    add_tiers_subparser(subparsers)
    return parser
