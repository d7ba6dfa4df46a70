"""GraphQL batch query construction for the FFLogs API.

A batch query requests the same field shape once per item under positional
aliases (``item0``, ``item1``, ...), so a single round trip returns every
item's sub-tree, each independently nullable. Variable names are suffixed
with the item index to keep them unique.

Everything here is pure string/object construction; no I/O.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, NamedTuple, TypeVar

from raidrecord.core.exceptions import QueryConstructionError
from raidrecord.core.models import ReportFight, Server, Tier

T = TypeVar("T")

ALIAS_PREFIX = "item"


class VariableSet(NamedTuple):
    """Variable definitions and values contributed by one item."""

    definitions: str
    values: dict[str, Any]


@dataclass(frozen=True)
class BatchQuery(Generic[T]):
    """A generated GraphQL document plus its variables, scoped to one call."""

    query: str
    variables: dict[str, Any]
    items: tuple[T, ...] = field(default_factory=tuple)

    @property
    def size(self) -> int:
        return len(self.items)

    @property
    def aliases(self) -> list[str]:
        return [alias_for(index) for index in range(len(self.items))]


def alias_for(index: int) -> str:
    """Alias used for the item at ``index``."""
    return f"{ALIAS_PREFIX}{index}"


def build_batch_query(
    items: Sequence[T],
    build_field: Callable[[T, int, str], str],
    build_variables: Callable[[T, int], VariableSet],
    wrapper_path: str,
    base_variables: Mapping[str, Any] | None = None,
    base_definitions: str = "",
) -> BatchQuery[T]:
    """Build one aliased query covering every item.

    Args:
        items: Ordered, non-empty list of homogeneous items
        build_field: Returns the field fragment for (item, index, alias)
        build_variables: Returns the VariableSet for (item, index)
        wrapper_path: Root selection the fields are nested under (e.g. 'characterData')
        base_variables: Variables shared by every item (e.g. characterId)
        base_definitions: Definitions for the shared variables

    Returns:
        BatchQuery with identical output for identical input

    Raises:
        QueryConstructionError: On an empty item list or malformed builder output
    """
    if not items:
        raise QueryConstructionError("Cannot build a batch query for zero items")
    if not wrapper_path or not wrapper_path.strip():
        raise QueryConstructionError("wrapper_path must be a non-empty field name")

    definitions: list[str] = [base_definitions.strip()] if base_definitions.strip() else []
    variables: dict[str, Any] = dict(base_variables or {})
    fields: list[str] = []

    for index, item in enumerate(items):
        alias = alias_for(index)

        fragment = build_field(item, index, alias)
        if not isinstance(fragment, str) or not fragment.strip():
            raise QueryConstructionError(
                f"Field builder returned an invalid fragment for {alias}: {fragment!r}"
            )
        fields.append(fragment.strip())

        variable_set = build_variables(item, index)
        if not isinstance(variable_set, tuple) or len(variable_set) != 2:
            raise QueryConstructionError(
                f"Variable builder must return (definitions, values) for {alias}"
            )
        item_definitions, item_values = variable_set
        if not isinstance(item_definitions, str) or not isinstance(item_values, Mapping):
            raise QueryConstructionError(
                f"Variable builder returned malformed output for {alias}"
            )

        for name, value in item_values.items():
            if name in variables:
                raise QueryConstructionError(
                    f"Variable '{name}' from {alias} collides with an existing variable"
                )
            variables[name] = value
        if item_definitions.strip():
            definitions.append(item_definitions.strip())

    signature = f"({', '.join(definitions)})" if definitions else ""
    body = "\n".join(_indent(fragment, 8) for fragment in fields)
    query = f"query{signature} {{\n    {wrapper_path} {{\n{body}\n    }}\n}}"

    return BatchQuery(query=query, variables=variables, items=tuple(items))


def _indent(fragment: str, spaces: int) -> str:
    pad = " " * spaces
    return "\n".join(pad + line.strip() if line.strip() else "" for line in fragment.splitlines())


# Tier data: zone rankings (all-stars, per-encounter summary) and the final
# encounter's individual clears, scoped to one character.


def tier_field(tier: Tier, index: int, alias: str) -> str:
    return (
        f"{alias}: character(id: $characterId) {{\n"
        f"zoneRankings(zoneID: $zoneId{index}, difficulty: $difficulty{index}, "
        f"partition: $partition{index})\n"
        f"encounterRankings(encounterID: $encounterId{index}, difficulty: $difficulty{index}, "
        f"partition: $partition{index})\n"
        f"}}"
    )


def tier_variables(tier: Tier, index: int) -> VariableSet:
    return VariableSet(
        definitions=(
            f"$zoneId{index}: Int!, $encounterId{index}: Int!, "
            f"$difficulty{index}: Int, $partition{index}: Int"
        ),
        values={
            f"zoneId{index}": tier.zone_id,
            f"encounterId{index}": tier.final_encounter_id,
            f"difficulty{index}": tier.difficulty,
            f"partition{index}": tier.partition,
        },
    )


def build_tier_batch(character_id: int, tiers: Sequence[Tier]) -> BatchQuery[Tier]:
    """Batch query for every tier's rankings of one character."""
    return build_batch_query(
        tiers,
        tier_field,
        tier_variables,
        wrapper_path="characterData",
        base_variables={"characterId": character_id},
        base_definitions="$characterId: Int!",
    )


# Party lookups: the fight's friendly players and timing within a report.


def report_field(report_fight: ReportFight, index: int, alias: str) -> str:
    return (
        f"{alias}: report(code: $reportCode{index}) {{\n"
        f"code\n"
        f"startTime\n"
        f"fights(fightIDs: [$fightId{index}]) {{\n"
        f"id\n"
        f"startTime\n"
        f"endTime\n"
        f"friendlyPlayers\n"
        f"}}\n"
        f"masterData {{\n"
        f'actors(type: "Player") {{\n'
        f"id\n"
        f"name\n"
        f"server\n"
        f"subType\n"
        f"}}\n"
        f"}}\n"
        f"}}"
    )


def report_variables(report_fight: ReportFight, index: int) -> VariableSet:
    return VariableSet(
        definitions=f"$reportCode{index}: String!, $fightId{index}: Int!",
        values={
            f"reportCode{index}": report_fight.report_code,
            f"fightId{index}": report_fight.fight_id,
        },
    )


def build_party_batch(report_fights: Sequence[ReportFight]) -> BatchQuery[ReportFight]:
    """Batch query for the party composition of several fights."""
    return build_batch_query(
        report_fights,
        report_field,
        report_variables,
        wrapper_path="reportData",
    )


# Server existence: does a character with this name exist on each server?


def server_field(server: Server, index: int, alias: str) -> str:
    return (
        f"{alias}: character(name: $name, serverSlug: $server{index}, serverRegion: $region) {{\n"
        f"id\n"
        f"name\n"
        f"server {{\n"
        f"name\n"
        f"region {{\n"
        f"slug\n"
        f"}}\n"
        f"}}\n"
        f"}}"
    )


def server_variables(server: Server, index: int) -> VariableSet:
    return VariableSet(
        definitions=f"$server{index}: String!",
        values={f"server{index}": server.slug},
    )


def build_server_batch(
    name: str, servers: Sequence[Server], region: str
) -> BatchQuery[Server]:
    """Batch query checking one character name on several servers."""
    return build_batch_query(
        servers,
        server_field,
        server_variables,
        wrapper_path="characterData",
        base_variables={"name": name, "region": region},
        base_definitions="$name: String!, $region: String!",
    )
