"""Raid history search orchestration.

A search runs in two batched phases against the FFLogs API:

1. One aliased query for every selected tier's rankings, clears and all-stars
2. One aliased query for the party composition of each tier's earliest clear

Cancellation is cooperative. ``cancel()`` sets an asyncio.Event that is
checked between awaited calls; an in-flight request is allowed to finish (its
rate-limit snapshot is still recorded) but its result is discarded.

Week resolution treats the fight end from the party lookup as the clear (kill)
timestamp and falls back to the rank start time when the report is missing.

Preconditions:
    - One search at a time per instance. A second ``search()`` while one is
      running is a caller error.
    - After a cancellation, ``reset_cancel()`` must be called before reuse.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from raidrecord.core.exceptions import BudgetExceededError, SearchCancelledError
from raidrecord.core.models import (
    PartyLookup,
    RateLimitSnapshot,
    Tier,
    TierCatalog,
    TierClearRecord,
    TierExtraction,
)

from .week_resolver import format_clear_date, resolve_week

if TYPE_CHECKING:
    from raidrecord.providers.fflogs.client import FFLogsClient

SEARCH_PHASES = 2


class SearchState(str, Enum):
    """Lifecycle of a search."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchProgress:
    """Progress event emitted before each network phase."""

    current: int
    total: int
    message: str
    tier_count: int


ProgressCallback = Callable[[SearchProgress], None]
ApiUsageCallback = Callable[[RateLimitSnapshot | None], None]


class RaidHistorySearch:
    """Drives a character's raid history search across selected tiers."""

    def __init__(
        self,
        client: FFLogsClient,
        catalog: TierCatalog,
        selected_tier_ids: Sequence[str] | None = None,
    ):
        """Initialize search.

        Args:
            client: FFLogs client (owns the point budget)
            catalog: Tier reference data
            selected_tier_ids: Default tier selection (empty = all tiers)
        """
        self._client = client
        self._catalog = catalog
        self._selected_tier_ids: list[str] = list(selected_tier_ids or [])

        self._cancel_event = asyncio.Event()
        self._progress_callback: ProgressCallback | None = None
        self._api_usage_callback: ApiUsageCallback | None = None
        self._state = SearchState.IDLE

    # Observers

    def set_progress_callback(self, callback: ProgressCallback | None) -> None:
        """Set progress callback function."""
        self._progress_callback = callback

    def set_api_usage_callback(self, callback: ApiUsageCallback | None) -> None:
        """Set API usage callback function (called after each network call)."""
        self._api_usage_callback = callback

    # Cancellation

    def cancel(self) -> None:
        """Request cancellation of the ongoing search."""
        if not self._cancel_event.is_set():
            logger.info("Search cancellation requested")
        self._cancel_event.set()

    def reset_cancel(self) -> None:
        """Clear the cancellation request so the instance can be reused."""
        self._cancel_event.clear()
        if self._state is not SearchState.RUNNING:
            self._state = SearchState.IDLE

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def state(self) -> SearchState:
        return self._state

    # Tier selection

    def set_selected_tiers(self, tier_ids: Sequence[str] | None) -> None:
        self._selected_tier_ids = list(tier_ids or [])

    def selected_tiers(self) -> list[Tier]:
        """Tiers covered by a search without an explicit tier list."""
        return self._catalog.select(self._selected_tier_ids)

    def get_selected_tier_count(self) -> int:
        return len(self.selected_tiers())

    def required_points(self, tier_count: int | None = None) -> float:
        """Estimated points for a search over ``tier_count`` (default: selection)."""
        if tier_count is None:
            tier_count = self.get_selected_tier_count()
        return self._client.budget.estimate_cost(tier_count)

    # Search

    async def search(
        self,
        character_id: int,
        tiers: Sequence[Tier] | None = None,
        *,
        on_progress: ProgressCallback | None = None,
        on_api_usage: ApiUsageCallback | None = None,
    ) -> list[TierClearRecord]:
        """Search a character's earliest clear for each tier.

        Args:
            character_id: Remote character id
            tiers: Tiers to search (default: the current selection)
            on_progress: Progress observer for this search only
            on_api_usage: API usage observer for this search only

        Returns:
            Records for tiers with a clear, in tier input order. Tiers without
            a clear, or whose data could not be assembled, are omitted.

        Raises:
            SearchCancelledError: Cancelled before or during the search
            BudgetExceededError: The point budget cannot cover the search
            TransportError: A batch request failed
        """
        if self._cancel_event.is_set():
            raise SearchCancelledError(
                "Search was cancelled; call reset_cancel() before searching again"
            )

        tier_list = list(tiers) if tiers is not None else self.selected_tiers()
        if not tier_list:
            logger.debug("No tiers selected; nothing to search")
            return []

        progress_callback = on_progress or self._progress_callback
        usage_callback = on_api_usage or self._api_usage_callback

        self._state = SearchState.RUNNING
        try:
            records = await self._run(
                character_id, tier_list, progress_callback, usage_callback
            )
        except SearchCancelledError:
            self._state = SearchState.CANCELLED
            raise
        except Exception:
            self._state = SearchState.FAILED
            raise

        self._state = SearchState.COMPLETED
        logger.info(
            f"Search for character {character_id} complete: "
            f"{len(records)}/{len(tier_list)} tier(s) cleared"
        )
        return records

    async def _run(
        self,
        character_id: int,
        tiers: list[Tier],
        progress_callback: ProgressCallback | None,
        usage_callback: ApiUsageCallback | None,
    ) -> list[TierClearRecord]:
        budget = self._client.budget

        self._check_budget(budget.estimate_cost(len(tiers)))

        # Phase 1: rankings for all tiers
        self._emit_progress(
            progress_callback,
            SearchProgress(1, SEARCH_PHASES, "fetching raid data", len(tiers)),
        )
        extractions = await self._client.fetch_tier_data(character_id, tiers)
        self._notify_usage(usage_callback)
        self._checkpoint()

        # Phase 2: party members for each earliest clear
        lookups = [
            extraction.report_fight if extraction is not None else None
            for extraction in extractions
        ]
        pending = sum(1 for lookup in lookups if lookup is not None)
        remaining_share = (SEARCH_PHASES - 1) / SEARCH_PHASES
        self._check_budget(budget.estimate_cost(pending) * remaining_share)

        self._emit_progress(
            progress_callback,
            SearchProgress(2, SEARCH_PHASES, "fetching party members", len(tiers)),
        )
        parties = await self._client.fetch_party_members(lookups)
        if pending:
            self._notify_usage(usage_callback)
        self._checkpoint()

        records: list[TierClearRecord] = []
        for tier, extraction, party in zip(tiers, extractions, parties):
            if extraction is None or extraction.earliest_clear is None:
                continue
            try:
                records.append(self._assemble(tier, extraction, party))
            except SearchCancelledError:
                raise
            except Exception as e:
                logger.warning(f"Skipping tier {tier.tier_id} ({tier.short_name}): {e}")
        return records

    def _assemble(
        self,
        tier: Tier,
        extraction: TierExtraction,
        party: PartyLookup | None,
    ) -> TierClearRecord:
        clear = extraction.earliest_clear
        assert clear is not None

        week: int | None = None
        ambiguous = False
        clear_date: str | None = None
        if clear.start_time is not None:
            kill_time = party.fight_end if party else None
            resolution = resolve_week(
                tier,
                kill_time if kill_time is not None else clear.start_time,
                fight_start=party.fight_start if party else None,
            )
            week = resolution.week
            ambiguous = resolution.ambiguous
            clear_date = format_clear_date(clear.start_time)

        return TierClearRecord(
            tier=tier,
            job=clear.job,
            clear_timestamp=clear.start_time,
            clear_date=clear_date,
            week=week,
            week_ambiguous=ambiguous,
            all_star=extraction.all_star,
            encounter_all_stars=list(extraction.encounter_all_stars),
            job_usage=list(extraction.job_usage),
            party_members=list(party.members) if party else [],
            report_code=clear.report_code,
            fight_id=clear.fight_id,
            fight_start=party.fight_start if party else None,
            fight_end=party.fight_end if party else None,
        )

    def _check_budget(self, required_points: float) -> None:
        budget = self._client.budget
        if not budget.has_enough(required_points):
            raise BudgetExceededError(
                remaining_points=budget.remaining_points(),
                reset_in_seconds=budget.reset_eta_seconds(),
                required_points=required_points,
            )

    def _checkpoint(self) -> None:
        if self._cancel_event.is_set():
            raise SearchCancelledError()

    def _emit_progress(
        self, callback: ProgressCallback | None, event: SearchProgress
    ) -> None:
        logger.debug(f"Search progress {event.current}/{event.total}: {event.message}")
        if callback is None:
            return
        try:
            callback(event)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")

    def _notify_usage(self, callback: ApiUsageCallback | None) -> None:
        if callback is None:
            return
        try:
            callback(self._client.get_rate_limit_info())
        except Exception as e:
            logger.warning(f"API usage callback failed: {e}")


def sort_raid_history(records: Sequence[TierClearRecord]) -> list[TierClearRecord]:
    """Newest tier release first. Idempotent; returns a new list."""
    return sorted(records, key=lambda record: record.tier.release_date, reverse=True)
