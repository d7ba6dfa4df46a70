"""Rich-based output formatting for RaidRecord CLI commands."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

import rich.box
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from raidrecord.core.models import JobResolver, Tier, TierClearRecord
from raidrecord.services.raid_history_search import SearchProgress
from raidrecord.utils.api_usage import ApiUsage, UsageLevel


class MessagePrefixes:
    """Message prefixes used when Rich is unavailable."""

    INFO = "[INFO]"
    SUCCESS = "[SUCCESS]"
    WARN = "[WARN]"
    ERROR = "[ERROR]"
    DEBUG = "[DEBUG]"
    PROGRESS = "[PROGRESS]"


_USAGE_STYLES = {
    UsageLevel.LOW: "green",
    UsageLevel.MEDIUM: "yellow",
    UsageLevel.HIGH: "red",
}


class RichOutputFormatter:
    """Terminal output for RaidRecord using the Rich library."""

    def __init__(self, verbose: bool = False, console: Console | None = None):
        """Initialize Rich output formatter.

        Args:
            verbose: Whether to enable verbose output
            console: Optional console (tests pass one that records output)
        """
        self.verbose = verbose
        if console is not None:
            self._terminal_compatible = True
            self.console: Console | None = console
        else:
            self._terminal_compatible = self._check_terminal_compatibility()
            self.console = Console() if self._terminal_compatible else None
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    def _check_terminal_compatibility(self) -> bool:
        """Check if terminal supports Rich formatting."""
        if os.environ.get("RAIDRECORD_NO_RICH"):
            return False
        if not sys.stdout.isatty():
            return False
        return os.environ.get("TERM", "") not in ("dumb", "unknown")

    def _print(self, markup: str, plain: str) -> None:
        """Print Rich markup, or the plain text when Rich is unavailable."""
        if self._terminal_compatible and self.console is not None:
            self.console.print(markup)
        else:
            print(plain)

    def _message(self, prefix: str, style: str, message: str) -> None:
        self._print(f"[{style}]{prefix}[/{style}] {escape(message)}", f"{prefix} {message}")

    def info(self, message: str) -> None:
        """Print an info message."""
        self._message(MessagePrefixes.INFO, "blue", message)

    def success(self, message: str) -> None:
        """Print a success message."""
        self._message(MessagePrefixes.SUCCESS, "green", message)

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self._message(MessagePrefixes.WARN, "yellow", message)

    def error(self, message: str) -> None:
        """Print an error message."""
        self._message(MessagePrefixes.ERROR, "red", message)

    def verbose_info(self, message: str) -> None:
        """Print a verbose info message if verbose mode is enabled."""
        if self.verbose:
            self._message(MessagePrefixes.DEBUG, "cyan", message)

    # Progress

    def start_progress(self, description: str = "Searching") -> None:
        """Show a progress bar for the search phases."""
        if not self._terminal_compatible or self.console is None:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TextColumn("•"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(description, total=None)

    def update_progress(self, event: SearchProgress) -> None:
        """Progress callback for RaidHistorySearch."""
        if self._progress is None or self._task_id is None:
            self._message(
                MessagePrefixes.PROGRESS,
                "cyan",
                f"{event.current}/{event.total} {event.message}",
            )
            return
        # Completed count trails the phase being started
        self._progress.update(
            self._task_id,
            description=event.message.capitalize(),
            completed=event.current - 1,
            total=event.total,
        )

    def stop_progress(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_id = None

    # Tables

    def tier_table(self, tiers: Sequence[Tier]) -> None:
        """Print the tier catalog."""
        table = Table(title="Raid Tiers", box=rich.box.ROUNDED)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Type")
        table.add_column("Expansion")
        table.add_column("Name")
        table.add_column("Release", no_wrap=True)

        for tier in tiers:
            table.add_row(
                tier.tier_id,
                tier.type.value,
                tier.expansion,
                tier.full_name,
                tier.release_date.isoformat(),
            )

        if self.console is not None:
            self.console.print(table)
        else:
            for tier in tiers:
                print(f"{tier.tier_id}\t{tier.short_name}\t{tier.release_date.isoformat()}")

    def results_table(self, character: str, records: Sequence[TierClearRecord]) -> None:
        """Print search results, one row per cleared tier."""
        if not records:
            self.info(f"No clears found for {character}")
            return

        table = Table(title=f"Raid History: {escape(character)}", box=rich.box.ROUNDED)
        table.add_column("Tier", style="cyan")
        table.add_column("Job")
        table.add_column("Cleared", no_wrap=True)
        table.add_column("Week", justify="right")
        table.add_column("All Star", justify="right")
        table.add_column("Other Jobs")
        table.add_column("Party")

        for record in records:
            table.add_row(
                record.tier.short_name,
                record.job,
                record.clear_date or "-",
                _format_week(record),
                f"{record.all_star.points:.2f}" if record.all_star else "-",
                " ".join(
                    f"{JobResolver.abbreviation(usage.job)}x{usage.count}"
                    for usage in record.additional_jobs
                )
                or "-",
                ", ".join(
                    f"{member.name} ({JobResolver.abbreviation(member.job)})"
                    for member in record.party_members
                )
                or "-",
            )

        if self.console is not None:
            self.console.print(table)
        else:
            for record in records:
                print(
                    f"{record.tier.short_name}\t{record.job}\t"
                    f"{record.clear_date or '-'}\t{_format_week(record)}"
                )

    def api_usage(self, usage: ApiUsage | None) -> None:
        """Print hourly API point usage."""
        if usage is None:
            return
        style = _USAGE_STYLES[usage.level]
        summary = f"{usage.points_spent:g}/{usage.points_limit:g} ({usage.usage_percent}%)"
        resets = f"resets in {usage.reset_minutes} min"
        self._print(
            f"API usage: [{style}]{summary}[/{style}], {resets}",
            f"API usage: {summary}, {resets}",
        )


def _format_week(record: TierClearRecord) -> str:
    if record.week is None:
        return "-"
    if record.week == 0:
        return "pre-release"
    suffix = "?" if record.week_ambiguous else ""
    return f"{record.week}{suffix}"
