"""Service layer for RaidRecord - budget tracking, week attribution and search orchestration."""

from .budget_tracker import BudgetTracker
from .raid_history_search import (
    RaidHistorySearch,
    SearchProgress,
    SearchState,
    sort_raid_history,
)
from .week_resolver import format_clear_date, is_ambiguous, resolve_week, week_number

__all__ = [
    "BudgetTracker",
    "RaidHistorySearch",
    "SearchProgress",
    "SearchState",
    "format_clear_date",
    "is_ambiguous",
    "resolve_week",
    "sort_raid_history",
    "week_number",
]
