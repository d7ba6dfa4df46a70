"""Hourly API point budget tracking.

The remote system is the single source of truth for spend: each response that
carries ``rateLimitData`` replaces the local snapshot wholesale. Before the
first snapshot arrives the budget is unknown and treated as sufficient.
"""

from __future__ import annotations

from loguru import logger

from raidrecord.core.constants import DEFAULT_RESET_SECONDS, POINTS_PER_TIER
from raidrecord.core.models import RateLimitSnapshot


class BudgetTracker:
    """Answers "can N more operations be afforded" from the last snapshot."""

    def __init__(self, points_per_tier: float = POINTS_PER_TIER):
        if points_per_tier <= 0:
            raise ValueError("points_per_tier must be positive")
        self._points_per_tier = points_per_tier
        self._snapshot: RateLimitSnapshot | None = None

    @property
    def snapshot(self) -> RateLimitSnapshot | None:
        return self._snapshot

    @property
    def points_per_tier(self) -> float:
        return self._points_per_tier

    def update_snapshot(self, snapshot: RateLimitSnapshot | None) -> None:
        """Replace the current snapshot (last write wins)."""
        if snapshot is None:
            return
        self._snapshot = snapshot
        logger.debug(
            f"API budget: {snapshot.points_spent_this_hour:g}/{snapshot.limit_per_hour:g} "
            f"points spent, resets in {snapshot.points_reset_in:.0f}s"
        )

    def remaining_points(self) -> float | None:
        """Points left this hour, or None when no snapshot has been observed."""
        if self._snapshot is None:
            return None
        return self._snapshot.remaining_points

    def has_enough(self, required_points: float) -> bool:
        """True if unknown, else whether the remaining points cover the request."""
        remaining = self.remaining_points()
        if remaining is None:
            return True
        return remaining >= required_points

    def reset_eta_seconds(self) -> float:
        """Seconds until the budget resets (one hour if unknown). Messaging only."""
        if self._snapshot is None:
            return DEFAULT_RESET_SECONDS
        return self._snapshot.points_reset_in

    def estimate_cost(self, tier_count: int) -> float:
        """Estimated points for ``tier_count`` tiers of not-yet-executed work."""
        return max(tier_count, 0) * self._points_per_tier
