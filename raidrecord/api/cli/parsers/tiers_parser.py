"""Parser for tiers command - list searchable raid tiers."""

import argparse

from .common_arguments import add_common_arguments


def add_tiers_subparser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    tiers_parser = subparsers.add_parser(
        "tiers",
        help="List searchable raid tiers",
        description="List the Savage and Ultimate tiers known to RaidRecord.",
    )
    add_common_arguments(tiers_parser)
    return tiers_parser
