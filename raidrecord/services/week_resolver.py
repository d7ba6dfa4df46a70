"""Week attribution for raid clears.

Weeks are counted from the tier's release at the weekly reset (Tuesday 17:00
UTC+9). All calendar math runs in that fixed timezone, never the runtime's
local timezone.

Ambiguity heuristic: a clear whose pull started inside the two hours after a
reset may belong to either week, since log timestamps cannot tell whether the
party entered before the reset. For Savage tiers, when both the fight start
and the clear timestamp fall in that window, the clear is attributed to the
previous week and flagged. Ultimate tiers use the clear timestamp alone and
are never flagged. This split is a best guess, not a proven rule.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from raidrecord.core.constants import (
    AMBIGUOUS_WINDOW_HOURS,
    MS_PER_WEEK,
    RESET_HOUR,
    RESET_UTC_OFFSET_HOURS,
    RESET_WEEKDAY,
)
from raidrecord.core.models import Tier, TierType, WeekResolution

RESET_TIMEZONE = timezone(timedelta(hours=RESET_UTC_OFFSET_HOURS))

_WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def release_reset_instant(release_date: date) -> int:
    """Epoch milliseconds of the reset on the release date."""
    reset = datetime(
        release_date.year,
        release_date.month,
        release_date.day,
        RESET_HOUR,
        tzinfo=RESET_TIMEZONE,
    )
    return int(reset.timestamp()) * 1000


def week_number(release_date: date, timestamp_ms: int) -> int:
    """1-based week since release; 0 for timestamps before the release reset."""
    diff = timestamp_ms - release_reset_instant(release_date)
    if diff < 0:
        return 0
    return diff // MS_PER_WEEK + 1


def to_reset_timezone(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=RESET_TIMEZONE)


def is_ambiguous(timestamp_ms: int | None) -> bool:
    """Whether a timestamp falls on reset day between the reset and two hours after."""
    if timestamp_ms is None:
        return False
    local = to_reset_timezone(timestamp_ms)
    return (
        local.weekday() == RESET_WEEKDAY
        and RESET_HOUR <= local.hour < RESET_HOUR + AMBIGUOUS_WINDOW_HOURS
    )


def resolve_week(
    tier: Tier,
    clear_timestamp: int,
    fight_start: int | None = None,
) -> WeekResolution:
    """Attribute a clear to a week of its tier.

    Args:
        tier: Tier the clear belongs to
        clear_timestamp: Clear time from the ranking data (epoch ms)
        fight_start: Absolute start of the fight (epoch ms), if known

    Returns:
        WeekResolution with the week, ambiguity flag and timestamp basis
    """
    if tier.type is TierType.ULTIMATE:
        return WeekResolution(
            week=week_number(tier.release_date, clear_timestamp),
            ambiguous=False,
            basis="clear",
        )

    if fight_start is None:
        basis, timestamp = "clear", clear_timestamp
    else:
        basis, timestamp = "fight_start", fight_start

    week = week_number(tier.release_date, timestamp)
    ambiguous = (
        fight_start is not None
        and is_ambiguous(fight_start)
        and is_ambiguous(clear_timestamp)
    )
    if ambiguous and week > 0:
        week = max(1, week - 1)

    return WeekResolution(week=week, ambiguous=ambiguous, basis=basis)


def format_clear_date(timestamp_ms: int) -> str:
    """Calendar date of a timestamp in the reset timezone, e.g. '2024-01-09 (Tue)'."""
    local = to_reset_timezone(timestamp_ms)
    return f"{local:%Y-%m-%d} ({_WEEKDAY_NAMES[local.weekday()]})"
