"""Raid tier reference data.

Tiers are immutable and identified by ``(zone_id, partition)``. The catalog is
built once at startup and passed to whatever needs it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date
from enum import Enum

from raidrecord.core.constants import DIFFICULTY_SAVAGE, DIFFICULTY_ULTIMATE


class TierType(str, Enum):
    """Difficulty type of a raid tier."""

    ULTIMATE = "ULTIMATE"
    SAVAGE = "SAVAGE"

    @property
    def difficulty(self) -> int:
        """FFLogs difficulty id for this content type."""
        return DIFFICULTY_SAVAGE if self is TierType.SAVAGE else DIFFICULTY_ULTIMATE


@dataclass(frozen=True)
class Tier:
    """One raid content release."""

    type: TierType
    expansion: str
    full_name: str
    short_name: str
    release_date: date
    zone_id: int
    partition: int
    encounter_count: int
    final_encounter_id: int

    @property
    def tier_id(self) -> str:
        """Stable identifier, e.g. '68-5'."""
        return f"{self.zone_id}-{self.partition}"

    @property
    def difficulty(self) -> int:
        return self.type.difficulty


class TierCatalog:
    """Immutable, ordered collection of tiers (newest release first)."""

    def __init__(self, tiers: Iterable[Tier]):
        self._tiers: tuple[Tier, ...] = tuple(tiers)
        self._by_id: dict[str, Tier] = {}
        for tier in self._tiers:
            if tier.tier_id in self._by_id:
                raise ValueError(f"Duplicate tier id: {tier.tier_id}")
            self._by_id[tier.tier_id] = tier

    def __iter__(self) -> Iterator[Tier]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    def __contains__(self, tier_id: object) -> bool:
        return tier_id in self._by_id

    @property
    def tiers(self) -> tuple[Tier, ...]:
        return self._tiers

    def get(self, tier_id: str) -> Tier | None:
        """Look up a tier by id."""
        return self._by_id.get(tier_id)

    def select(self, tier_ids: Iterable[str] | None) -> list[Tier]:
        """Return the selected tiers in catalog order.

        An empty or missing selection means every tier. Unknown ids are ignored.
        """
        wanted = set(tier_ids or ())
        if not wanted:
            return list(self._tiers)
        return [tier for tier in self._tiers if tier.tier_id in wanted]

    def unknown_ids(self, tier_ids: Iterable[str] | None) -> list[str]:
        """Ids in ``tier_ids`` that name no tier, in input order."""
        return [tier_id for tier_id in tier_ids or () if tier_id not in self._by_id]

    def expansions(self) -> list[str]:
        """Expansion names in catalog order, without duplicates."""
        seen: list[str] = []
        for tier in self._tiers:
            if tier.expansion not in seen:
                seen.append(tier.expansion)
        return seen


def _tier(
    type: TierType,
    expansion: str,
    full_name: str,
    short_name: str,
    release_date: str,
    zone_id: int,
    partition: int,
    encounter_count: int,
    final_encounter_id: int,
) -> Tier:
    return Tier(
        type=type,
        expansion=expansion,
        full_name=full_name,
        short_name=short_name,
        release_date=date.fromisoformat(release_date),
        zone_id=zone_id,
        partition=partition,
        encounter_count=encounter_count,
        final_encounter_id=final_encounter_id,
    )


# Release dates follow the Korean service schedule.
_RAID_TIERS: tuple[Tier, ...] = (
    # Dawntrail
    _tier(TierType.SAVAGE, "Dawntrail", "AAC Cruiserweight (Savage)", "Cruiserweight", "2025-07-22", 68, 5, 4, 100),
    _tier(TierType.ULTIMATE, "Dawntrail", "Futures Rewritten (Ultimate)", "FRU", "2025-04-15", 65, 5, 1, 1079),
    _tier(TierType.SAVAGE, "Dawntrail", "AAC Light-heavyweight (Savage)", "Light-heavyweight", "2025-01-14", 62, 11, 4, 96),
    # Endwalker
    _tier(TierType.SAVAGE, "Endwalker", "Pandaemonium: Anabaseios (Savage)", "Anabaseios", "2023-11-07", 54, 5, 5, 92),
    _tier(TierType.ULTIMATE, "Endwalker", "The Omega Protocol (Ultimate)", "TOP", "2023-07-18", 53, 5, 1, 1068),
    _tier(TierType.SAVAGE, "Endwalker", "Pandaemonium: Abyssos (Savage)", "Abyssos", "2023-02-21", 49, 11, 5, 87),
    _tier(TierType.ULTIMATE, "Endwalker", "Dragonsong's Reprise (Ultimate)", "DSR", "2022-10-25", 45, 5, 1, 1065),
    _tier(TierType.SAVAGE, "Endwalker", "Pandaemonium: Asphodelos (Savage)", "Asphodelos", "2022-06-21", 44, 5, 5, 82),
    # Shadowbringers
    _tier(TierType.SAVAGE, "Shadowbringers", "Eden's Promise (Savage)", "Promise", "2021-05-18", 38, 5, 5, 77),
    _tier(TierType.SAVAGE, "Shadowbringers", "Eden's Verse (Savage)", "Verse", "2020-09-01", 33, 5, 4, 72),
    _tier(TierType.ULTIMATE, "Shadowbringers", "The Epic of Alexander (Ultimate)", "TEA", "2020-04-14", 32, 5, 1, 1050),
    _tier(TierType.SAVAGE, "Shadowbringers", "Eden's Gate (Savage)", "Gate", "2020-01-21", 29, 7, 4, 68),
)


def default_tier_catalog() -> TierCatalog:
    """Build the catalog of all supported raid tiers."""
    return TierCatalog(_RAID_TIERS)
