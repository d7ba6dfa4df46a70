"""RaidRecord CLI entry point."""

import argparse
import asyncio
import sys

from loguru import logger
from pydantic import ValidationError

from raidrecord.core.config import Config, setup_logging

from .parsers import create_main_parser


async def async_main(args: argparse.Namespace) -> None:
    """Validate configuration and dispatch to a command."""
    try:
        config = Config.from_args(args)
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.logging)
    logger.debug(f"Running command: {args.command}")

    if args.command == "search":
        from .commands.search import search_command

        await search_command(args, config)
    elif args.command == "tiers":
        from .commands.tiers import tiers_command

        await tiers_command(args, config)


def main(argv: list[str] | None = None) -> None:
    parser = create_main_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    try:
        asyncio.run(async_main(args))
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
