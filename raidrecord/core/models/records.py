"""Data models for search results.

These are derived, in-memory records: nothing here is persisted.

Key concepts:
- RateLimitSnapshot: server-authoritative mirror of the hourly point budget
- TierExtraction: normalized per-tier data reconciled from a batch response
- PartyLookup: party composition and absolute timing of one fight
- TierClearRecord: final per-tier result assembled by the search
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from raidrecord.core.constants import FFLOGS_REPORT_URL

from .tier import Tier


@dataclass(frozen=True)
class RateLimitSnapshot:
    """Hourly point budget as last reported by the API."""

    limit_per_hour: float
    points_spent_this_hour: float
    points_reset_in: float  # seconds

    @property
    def remaining_points(self) -> float:
        return self.limit_per_hour - self.points_spent_this_hour

    @classmethod
    def from_payload(cls, payload: Any) -> RateLimitSnapshot | None:
        """Build a snapshot from a ``rateLimitData`` object, or None if incomplete."""
        if not isinstance(payload, dict):
            return None
        try:
            return cls(
                limit_per_hour=float(payload["limitPerHour"]),
                points_spent_this_hour=float(payload["pointsSpentThisHour"]),
                points_reset_in=float(payload["pointsResetIn"]),
            )
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class Character:
    """A character as identified by the remote system."""

    id: int
    name: str
    server: str
    region: str | None = None


@dataclass(frozen=True)
class ReportFight:
    """Pointer to one fight inside a log report."""

    report_code: str
    fight_id: int

    @property
    def url(self) -> str:
        return f"{FFLOGS_REPORT_URL}/{self.report_code}#fight={self.fight_id}"


@dataclass
class ClearRecord:
    """One successful kill of a tier's final encounter."""

    start_time: int | None  # epoch milliseconds
    spec: str | int | None
    job: str
    report_code: str | None = None
    fight_id: int | None = None
    duration: int | None = None  # milliseconds

    @property
    def report_fight(self) -> ReportFight | None:
        if self.report_code and self.fight_id:
            return ReportFight(self.report_code, self.fight_id)
        return None


@dataclass
class JobUsage:
    """How often a job was used across all observed clears of a tier."""

    job: str
    spec: str | int
    count: int
    first_index: int  # smallest position in the source list


@dataclass
class AllStarEntry:
    """Zone-level all-star score for one job."""

    job: str
    spec: str | int | None
    points: float
    rank: int | None = None
    total: int | None = None
    rank_percent: float | None = None


@dataclass
class EncounterAllStar:
    """All-star score for one encounter (floor) of a tier."""

    encounter_id: int
    encounter_name: str
    job: str
    points: float
    rank: int | None = None
    total: int | None = None


@dataclass
class TierExtraction:
    """Normalized per-tier data reconciled from the tier batch."""

    tier: Tier
    earliest_clear: ClearRecord | None
    clears: list[ClearRecord] = field(default_factory=list)
    job_usage: list[JobUsage] = field(default_factory=list)
    all_star: AllStarEntry | None = None
    encounter_all_stars: list[EncounterAllStar] = field(default_factory=list)

    @property
    def report_fight(self) -> ReportFight | None:
        if self.earliest_clear is None:
            return None
        return self.earliest_clear.report_fight


@dataclass(frozen=True)
class PartyMember:
    name: str
    server: str
    job: str


@dataclass
class PartyLookup:
    """Party composition and absolute timing for one fight."""

    report_fight: ReportFight
    members: list[PartyMember] = field(default_factory=list)
    fight_start: int | None = None  # epoch milliseconds
    fight_end: int | None = None  # epoch milliseconds


@dataclass(frozen=True)
class WeekResolution:
    """Week attribution of a clear.

    ``basis`` names the timestamp the week was computed from
    ("clear" or "fight_start").
    """

    week: int
    ambiguous: bool
    basis: str


@dataclass
class TierClearRecord:
    """Final per-tier search result."""

    tier: Tier
    job: str
    clear_timestamp: int | None
    clear_date: str | None
    week: int | None
    week_ambiguous: bool
    all_star: AllStarEntry | None
    encounter_all_stars: list[EncounterAllStar] = field(default_factory=list)
    job_usage: list[JobUsage] = field(default_factory=list)
    party_members: list[PartyMember] = field(default_factory=list)
    report_code: str | None = None
    fight_id: int | None = None
    fight_start: int | None = None
    fight_end: int | None = None

    @property
    def additional_jobs(self) -> list[JobUsage]:
        """Jobs used on other clears, excluding the earliest clear's job."""
        return [usage for usage in self.job_usage if usage.job != self.job]

    @property
    def report_url(self) -> str | None:
        if self.report_code and self.fight_id:
            return ReportFight(self.report_code, self.fight_id).url
        return None
