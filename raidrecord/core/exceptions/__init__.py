"""Exception types for RaidRecord."""

from .search import (
    AuthenticationError,
    BudgetExceededError,
    CharacterNotFoundError,
    QueryConstructionError,
    RaidRecordError,
    ReconciliationError,
    SearchCancelledError,
    TransportError,
)

__all__ = [
    "AuthenticationError",
    "BudgetExceededError",
    "CharacterNotFoundError",
    "QueryConstructionError",
    "RaidRecordError",
    "ReconciliationError",
    "SearchCancelledError",
    "TransportError",
]
