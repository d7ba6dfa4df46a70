"""Common CLI argument patterns shared across parsers."""

import argparse

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments common to all commands.

    Args:
        parser: Argument parser to add common arguments to
    """
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Enable file logging to specified path",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=LOG_LEVELS,
        help="Set file logging level (default: INFO)",
    )


def add_fflogs_arguments(parser: argparse.ArgumentParser) -> None:
    """Add FFLogs API credential and region arguments."""
    parser.add_argument(
        "--client-id",
        type=str,
        help="FFLogs API client id (env: RAIDRECORD_FFLOGS_CLIENT_ID)",
    )
    parser.add_argument(
        "--client-secret",
        type=str,
        help="FFLogs API client secret (env: RAIDRECORD_FFLOGS_CLIENT_SECRET)",
    )
    parser.add_argument(
        "--region",
        type=str,
        help="Server region slug (default: KR)",
    )
