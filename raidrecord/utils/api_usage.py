"""API usage summary for display."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from raidrecord.core.models import RateLimitSnapshot

LOW_USAGE_PERCENT = 50
MEDIUM_USAGE_PERCENT = 80


class UsageLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ApiUsage:
    """Hourly point usage derived from a rate-limit snapshot."""

    points_spent: float
    points_limit: float
    usage_percent: int
    reset_minutes: int
    level: UsageLevel


def calculate_api_usage(snapshot: RateLimitSnapshot | None) -> ApiUsage | None:
    """Summarize a snapshot, or None when no snapshot has been observed."""
    if snapshot is None:
        return None

    if snapshot.limit_per_hour > 0:
        percent = snapshot.points_spent_this_hour / snapshot.limit_per_hour * 100
    else:
        percent = 100.0

    if percent < LOW_USAGE_PERCENT:
        level = UsageLevel.LOW
    elif percent < MEDIUM_USAGE_PERCENT:
        level = UsageLevel.MEDIUM
    else:
        level = UsageLevel.HIGH

    return ApiUsage(
        points_spent=snapshot.points_spent_this_hour,
        points_limit=snapshot.limit_per_hour,
        usage_percent=round(percent),
        reset_minutes=math.ceil(snapshot.points_reset_in / 60),
        level=level,
    )
