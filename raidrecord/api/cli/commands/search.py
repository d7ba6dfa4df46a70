"""Search command module - look up a character's raid clear history."""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys

from loguru import logger

from raidrecord.core.config import Config
from raidrecord.core.exceptions import (
    BudgetExceededError,
    CharacterNotFoundError,
    RaidRecordError,
    SearchCancelledError,
)
from raidrecord.core.models import (
    Character,
    Server,
    TierClearRecord,
    default_tier_catalog,
    find_server,
    servers_for_region,
)
from raidrecord.providers.fflogs import FFLogsClient, FFLogsTransport
from raidrecord.services import BudgetTracker, RaidHistorySearch, sort_raid_history
from raidrecord.utils import calculate_api_usage, parse_character_input

from ..utils.rich_output import RichOutputFormatter

EXIT_CANCELLED = 130


async def search_command(args: argparse.Namespace, config: Config) -> None:
    """Execute the search command.

    Args:
        args: Parsed command-line arguments
        config: Validated configuration instance
    """
    formatter = RichOutputFormatter(verbose=getattr(args, "verbose", False))
    servers = servers_for_region(config.fflogs.region)

    parsed = parse_character_input(args.character, servers)
    if not parsed.name:
        formatter.error(f"Invalid character name: {args.character!r}")
        sys.exit(1)

    server = parsed.server
    if getattr(args, "server", None):
        server = find_server(args.server, servers)
        if server is None:
            formatter.error(f"Unknown server: {args.server}")
            sys.exit(1)

    catalog = default_tier_catalog()
    unknown_tiers = catalog.unknown_ids(config.search.selected_tiers)
    if unknown_tiers:
        formatter.error(
            f"Unknown tier id(s): {', '.join(unknown_tiers)}. "
            "Run 'raidrecord tiers' to list available tiers."
        )
        sys.exit(1)

    if not config.fflogs.is_configured():
        formatter.error(
            "FFLogs API credentials are not configured. Set "
            "RAIDRECORD_FFLOGS_CLIENT_ID and RAIDRECORD_FFLOGS_CLIENT_SECRET "
            "or pass --client-id/--client-secret."
        )
        sys.exit(1)

    async with FFLogsTransport(config.fflogs) as transport:
        client = FFLogsClient(
            transport,
            budget=BudgetTracker(config.search.points_per_tier),
            region=config.fflogs.region,
        )
        search = RaidHistorySearch(client, catalog, config.search.selected_tiers)

        try:
            character = await locate_character(client, parsed.name, server, servers)
            formatter.verbose_info(
                f"Found {character.name} @ {character.server} (id {character.id})"
            )
            formatter.info(
                f"Searching {search.get_selected_tier_count()} tier(s) for "
                f"{character.name} @ {character.server}"
            )
            records = await _run_with_interrupt(search, character, formatter)
        except SearchCancelledError:
            formatter.warning("Search cancelled")
            sys.exit(EXIT_CANCELLED)
        except BudgetExceededError as e:
            formatter.error(
                f"Not enough API points for this search ({e.required_points:g} needed). "
                f"Try again in about {e.reset_in_minutes} minute(s)."
            )
            sys.exit(1)
        except RaidRecordError as e:
            formatter.error(str(e))
            sys.exit(1)

        formatter.results_table(
            f"{character.name} @ {character.server}", sort_raid_history(records)
        )
        formatter.api_usage(calculate_api_usage(client.get_rate_limit_info()))


async def locate_character(
    client: FFLogsClient,
    name: str,
    server: Server | None,
    servers: tuple[Server, ...],
) -> Character:
    """Find a character on one server, or across all regional servers in one batch.

    Raises:
        CharacterNotFoundError: No server hosts the character
    """
    if server is not None:
        character = await client.find_character(name, server)
        if character is None:
            raise CharacterNotFoundError(name, server.name)
        return character

    matches = [match for match in await client.find_character_on_servers(name, servers) if match]
    if not matches:
        raise CharacterNotFoundError(name)
    if len(matches) > 1:
        logger.warning(
            f"{name} exists on {len(matches)} servers "
            f"({', '.join(match.server for match in matches)}); using {matches[0].server}"
        )
    return matches[0]


async def _run_with_interrupt(
    search: RaidHistorySearch, character: Character, formatter: RichOutputFormatter
) -> list[TierClearRecord]:
    """Run the search with Ctrl-C mapped to cooperative cancellation."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, search.cancel)
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        # Windows event loops do not support signal handlers
        handler_installed = False

    formatter.start_progress()
    try:
        return await search.search(character.id, on_progress=formatter.update_progress)
    finally:
        formatter.stop_progress()
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
