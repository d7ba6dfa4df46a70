"""FFLogs API client: batch queries, rate-limit bookkeeping and reconciliation.

One client owns one BudgetTracker. Every batch call requests rate-limit data
and records the returned snapshot before anything else looks at the result.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from loguru import logger

from raidrecord.core.constants import DEFAULT_REGION
from raidrecord.core.models import (
    Character,
    JobResolver,
    PartyLookup,
    RateLimitSnapshot,
    ReportFight,
    Server,
    Tier,
    TierExtraction,
)
from raidrecord.interfaces import QueryTransport
from raidrecord.services.budget_tracker import BudgetTracker

from .query_builder import (
    BatchQuery,
    build_party_batch,
    build_server_batch,
    build_tier_batch,
)
from .reconciler import (
    reconcile_party_batch,
    reconcile_server_batch,
    reconcile_tier_batch,
)


class FFLogsClient:
    """High-level FFLogs operations built on a QueryTransport."""

    def __init__(
        self,
        transport: QueryTransport,
        job_resolver: JobResolver | None = None,
        budget: BudgetTracker | None = None,
        region: str = DEFAULT_REGION,
    ):
        """Initialize client.

        Args:
            transport: Executes GraphQL documents
            job_resolver: Spec-to-job lookup (default tables if omitted)
            budget: Point budget tracker (a fresh one if omitted)
            region: Server region slug used for character lookups
        """
        self._transport = transport
        self._job_resolver = job_resolver or JobResolver()
        self._budget = budget or BudgetTracker()
        self._region = region
        self._batches_executed = 0

    @property
    def budget(self) -> BudgetTracker:
        return self._budget

    @property
    def job_resolver(self) -> JobResolver:
        return self._job_resolver

    @property
    def region(self) -> str:
        return self._region

    def get_rate_limit_info(self) -> RateLimitSnapshot | None:
        """Last observed rate-limit snapshot."""
        return self._budget.snapshot

    async def execute_batch(self, batch: BatchQuery[Any]) -> dict[str, Any]:
        """Execute a batch query and record any returned rate-limit data."""
        logger.debug(
            f"Executing batch of {batch.size} item(s) "
            f"({len(batch.query)} chars, {len(batch.variables)} variables)"
        )
        data = await self._transport.execute_query(
            batch.query, batch.variables, include_rate_limit=True
        )
        self._batches_executed += 1
        self._budget.update_snapshot(RateLimitSnapshot.from_payload(data.get("rateLimitData")))
        return data

    async def fetch_tier_data(
        self, character_id: int, tiers: Sequence[Tier]
    ) -> list[TierExtraction | None]:
        """Rankings, clears and all-stars for every tier in one round trip.

        Returns:
            One entry per tier, None where the tier has no usable data
        """
        if not tiers:
            return []
        batch = build_tier_batch(character_id, tiers)
        data = await self.execute_batch(batch)
        return reconcile_tier_batch(data, tiers, self._job_resolver)

    async def fetch_party_members(
        self, lookups: Sequence[ReportFight | None]
    ) -> list[PartyLookup | None]:
        """Party composition for several fights in one round trip.

        ``None`` lookups pass through positionally. When no lookup is valid no
        request is made.
        """
        positions = [index for index, lookup in enumerate(lookups) if lookup is not None]
        results: list[PartyLookup | None] = [None] * len(lookups)
        if not positions:
            return results

        valid = [lookups[index] for index in positions]
        batch = build_party_batch(valid)  # type: ignore[arg-type]
        data = await self.execute_batch(batch)
        reconciled = reconcile_party_batch(data, valid, self._job_resolver)  # type: ignore[arg-type]

        for index, lookup in zip(positions, reconciled):
            results[index] = lookup
        return results

    async def find_character_on_servers(
        self, name: str, servers: Sequence[Server]
    ) -> list[Character | None]:
        """Check which servers host a character with this name (one round trip)."""
        if not servers:
            return []
        batch = build_server_batch(name, servers, self._region)
        data = await self.execute_batch(batch)
        return reconcile_server_batch(data, servers)

    async def find_character(self, name: str, server: Server) -> Character | None:
        """Look up a character on one server."""
        matches = await self.find_character_on_servers(name, [server])
        return matches[0]

    def get_usage_stats(self) -> dict[str, Any]:
        """Get usage statistics."""
        snapshot = self._budget.snapshot
        return {
            "batches_executed": self._batches_executed,
            "remaining_points": self._budget.remaining_points(),
            "points_spent_this_hour": snapshot.points_spent_this_hour if snapshot else None,
            "limit_per_hour": snapshot.limit_per_hour if snapshot else None,
        }
