"""Typed shapes of FFLogs GraphQL response sub-trees.

Every remote field is optional: the API omits or nulls fields freely, and a
character with no parses for a zone still returns a (mostly empty) object.
Unknown fields are ignored. A value of the wrong type raises a pydantic
ValidationError, which the reconciler isolates per item.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _RemoteModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# characterData.character.encounterRankings


class RankReport(_RemoteModel):
    code: str | None = None
    start_time: int | None = None
    fight_id: int | None = Field(default=None, alias="fightID")


class RankEntry(_RemoteModel):
    start_time: int | None = None
    duration: int | None = None
    spec: str | int | None = None
    best_spec: str | int | None = None
    rank_percent: float | None = None
    report: RankReport | None = None


class EncounterRankings(_RemoteModel):
    total_kills: int | None = None
    ranks: list[RankEntry] | None = None
    error: str | None = None


# characterData.character.zoneRankings


class EncounterRef(_RemoteModel):
    id: int | None = None
    name: str | None = None


class AllStarsSummary(_RemoteModel):
    points: float | None = None
    possible_points: float | None = None
    rank: int | None = None
    total: int | None = None
    rank_percent: float | None = None


class AllStarRow(_RemoteModel):
    spec: str | int | None = None
    points: float | None = None
    possible_points: float | None = None
    rank: int | None = None
    region_rank: int | None = None
    server_rank: int | None = None
    rank_percent: float | None = None
    total: int | None = None


class ZoneRankingRow(_RemoteModel):
    encounter: EncounterRef | None = None
    rank_percent: float | None = None
    total_kills: int | None = None
    fastest_kill: int | None = None
    spec: str | int | None = None
    best_spec: str | int | None = None
    all_stars: AllStarsSummary | None = None
    # Present on some API versions; used as the clear reference fallback.
    start_time: int | None = None
    report: RankReport | None = None


class ZoneRankings(_RemoteModel):
    zone: int | None = None
    difficulty: int | None = None
    partition: int | None = None
    all_stars: list[AllStarRow] | None = None
    rankings: list[ZoneRankingRow] | None = None
    error: str | None = None


class CharacterTierData(_RemoteModel):
    """One aliased ``character`` sub-tree of the tier batch."""

    zone_rankings: ZoneRankings | None = None
    encounter_rankings: EncounterRankings | None = None


# reportData.report


class Fight(_RemoteModel):
    id: int
    start_time: int | None = None
    end_time: int | None = None
    friendly_players: list[int] | None = None


class Actor(_RemoteModel):
    id: int
    name: str | None = None
    server: str | None = None
    sub_type: str | int | None = None


class MasterData(_RemoteModel):
    actors: list[Actor] | None = None


class Report(_RemoteModel):
    code: str | None = None
    start_time: int | None = None
    fights: list[Fight] | None = None
    master_data: MasterData | None = None


# characterData.character (lookup by name/server)


class RegionRef(_RemoteModel):
    slug: str | None = None


class ServerRef(_RemoteModel):
    name: str | None = None
    region: RegionRef | None = None


class CharacterRef(_RemoteModel):
    id: int
    name: str
    server: ServerRef | None = None
