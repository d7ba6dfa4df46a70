"""Argument parser utilities for RaidRecord CLI commands."""

from .common_arguments import add_common_arguments, add_fflogs_arguments
from .main_parser import create_main_parser
from .search_parser import add_search_subparser
from .tiers_parser import add_tiers_subparser

__all__ = [
    "add_common_arguments",
    "add_fflogs_arguments",
    "add_search_subparser",
    "add_tiers_subparser",
    "create_main_parser",
]
