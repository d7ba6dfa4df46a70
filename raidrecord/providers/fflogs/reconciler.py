"""Reconciliation of batch responses into normalized per-item records.

Results are positional: for N requested items the output always has N
entries, ``None`` where an alias is missing or its sub-tree could not be
normalized. A failure in one item never affects the others.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from loguru import logger

from raidrecord.core.exceptions import ReconciliationError
from raidrecord.core.models import (
    AllStarEntry,
    Character,
    ClearRecord,
    EncounterAllStar,
    JobResolver,
    JobUsage,
    PartyLookup,
    PartyMember,
    ReportFight,
    Server,
    Tier,
    TierExtraction,
)

from .query_builder import alias_for
from .schemas import (
    AllStarRow,
    CharacterRef,
    CharacterTierData,
    RankEntry,
    Report,
    ZoneRankingRow,
)

T = TypeVar("T")
R = TypeVar("R")

# Actors FFLogs reports alongside real players
PSEUDO_PLAYER_NAMES = frozenset({"Multiple Players", "Limit Break"})


def reconcile_batch(
    data: Any,
    wrapper_path: str,
    items: Sequence[T],
    extract: Callable[[Any, T], R | None],
    kind: str = "item",
) -> list[R | None]:
    """Apply ``extract`` to each aliased sub-tree, isolating failures per item.

    Args:
        data: The ``data`` object returned by the transport
        wrapper_path: Root selection the aliases live under
        items: The items the batch was built from, in the same order
        extract: Normalizes one sub-tree; may raise
        kind: Label used in log messages

    Returns:
        Exactly ``len(items)`` results, None for missing or failed items
    """
    container = data.get(wrapper_path) if isinstance(data, dict) else None
    if not isinstance(container, dict):
        if items:
            logger.warning(f"Batch response has no '{wrapper_path}' object; {len(items)} {kind}(s) empty")
        return [None] * len(items)

    results: list[R | None] = []
    for index, item in enumerate(items):
        alias = alias_for(index)
        raw = container.get(alias)
        if raw is None:
            logger.debug(f"No data for {kind} {alias}")
            results.append(None)
            continue
        try:
            results.append(extract(raw, item))
        except Exception as e:
            logger.warning(f"Failed to reconcile {kind} {alias}: {e}")
            results.append(None)
    return results


def compute_job_usage(specs: Sequence[str | int | None], resolver: JobResolver) -> list[JobUsage]:
    """Count how often each spec appears.

    Ordered by count descending, then by the smallest index at which the spec
    first appeared. Entries without a spec are skipped.
    """
    counts: dict[str | int, int] = {}
    first_seen: dict[str | int, int] = {}
    for index, spec in enumerate(specs):
        if spec is None or spec == "":
            continue
        counts[spec] = counts.get(spec, 0) + 1
        first_seen.setdefault(spec, index)

    ordered = sorted(counts, key=lambda spec: (-counts[spec], first_seen[spec]))
    return [
        JobUsage(
            job=resolver.resolve(spec),
            spec=spec,
            count=counts[spec],
            first_index=first_seen[spec],
        )
        for spec in ordered
    ]


def pick_best_all_star(rows: Sequence[AllStarRow], resolver: JobResolver) -> AllStarEntry | None:
    """Highest-points all-star row; ties keep the first encountered."""
    best: AllStarRow | None = None
    for row in rows:
        if row.points is None:
            continue
        if best is None or row.points > (best.points or 0):
            best = row
    if best is None:
        return None
    return AllStarEntry(
        job=resolver.resolve(best.spec),
        spec=best.spec,
        points=float(best.points or 0),
        rank=best.rank,
        total=best.total,
        rank_percent=best.rank_percent,
    )


def _clear_from_rank(rank: RankEntry, resolver: JobResolver) -> ClearRecord:
    spec = rank.spec if rank.spec is not None else rank.best_spec
    report = rank.report
    return ClearRecord(
        start_time=rank.start_time,
        spec=spec,
        job=resolver.resolve(spec),
        report_code=report.code if report else None,
        fight_id=report.fight_id if report else None,
        duration=rank.duration,
    )


def _clear_from_summary(row: ZoneRankingRow, resolver: JobResolver) -> ClearRecord:
    spec = row.spec if row.spec is not None else row.best_spec
    report = row.report
    return ClearRecord(
        start_time=row.start_time,
        spec=spec,
        job=resolver.resolve(spec),
        report_code=report.code if report else None,
        fight_id=report.fight_id if report else None,
        duration=row.fastest_kill,
    )


def _has_clear(row: ZoneRankingRow) -> bool:
    if row.total_kills is not None:
        return row.total_kills > 0
    return row.rank_percent is not None


def _earliest(clears: Sequence[ClearRecord]) -> ClearRecord | None:
    # Stable sort; clears without a timestamp go last.
    ordered = sorted(
        clears,
        key=lambda clear: (clear.start_time is None, clear.start_time or 0),
    )
    return ordered[0] if ordered else None


def extract_tier(raw: Any, tier: Tier, resolver: JobResolver) -> TierExtraction:
    """Normalize one tier's ``character`` sub-tree.

    Raises:
        ReconciliationError: If the sub-tree is not an object
        pydantic.ValidationError: If a field has the wrong type
    """
    if not isinstance(raw, dict):
        raise ReconciliationError(
            f"Expected an object for tier {tier.tier_id}, got {type(raw).__name__}"
        )
    parsed = CharacterTierData.model_validate(raw)

    ranks = (parsed.encounter_rankings.ranks if parsed.encounter_rankings else None) or []
    clears = [_clear_from_rank(rank, resolver) for rank in ranks]

    zone = parsed.zone_rankings
    summary_rows = (zone.rankings if zone else None) or []

    earliest = _earliest(clears)
    if earliest is None:
        final_row = next(
            (
                row
                for row in summary_rows
                if row.encounter is not None
                and row.encounter.id == tier.final_encounter_id
                and _has_clear(row)
            ),
            None,
        )
        if final_row is not None:
            earliest = _clear_from_summary(final_row, resolver)
            logger.debug(
                f"Tier {tier.tier_id}: no individual clears, using ranking summary"
            )

    encounter_all_stars = [
        EncounterAllStar(
            encounter_id=row.encounter.id,
            encounter_name=row.encounter.name or "",
            job=resolver.resolve(row.spec if row.spec is not None else row.best_spec),
            points=float(row.all_stars.points or 0),
            rank=row.all_stars.rank,
            total=row.all_stars.total,
        )
        for row in summary_rows
        if row.all_stars is not None
        and row.encounter is not None
        and row.encounter.id is not None
    ]

    return TierExtraction(
        tier=tier,
        earliest_clear=earliest,
        clears=clears,
        job_usage=compute_job_usage([clear.spec for clear in clears], resolver),
        all_star=pick_best_all_star((zone.all_stars if zone else None) or [], resolver),
        encounter_all_stars=encounter_all_stars,
    )


def reconcile_tier_batch(
    data: Any, tiers: Sequence[Tier], resolver: JobResolver
) -> list[TierExtraction | None]:
    """Positional per-tier extractions for a tier batch response."""
    return reconcile_batch(
        data,
        "characterData",
        tiers,
        lambda raw, tier: extract_tier(raw, tier, resolver),
        kind="tier",
    )


def extract_party(raw: Any, report_fight: ReportFight, resolver: JobResolver) -> PartyLookup:
    """Party members and absolute timing of one fight in a report.

    A report without the requested fight yields an empty lookup.
    """
    if not isinstance(raw, dict):
        raise ReconciliationError(
            f"Expected an object for report {report_fight.report_code}, got {type(raw).__name__}"
        )
    report = Report.model_validate(raw)

    fight = next(
        (f for f in report.fights or [] if f.id == report_fight.fight_id),
        None,
    )
    if fight is None:
        logger.debug(
            f"Fight {report_fight.fight_id} not found in report {report_fight.report_code}"
        )
        return PartyLookup(report_fight=report_fight)

    fight_start = fight_end = None
    if report.start_time is not None:
        if fight.start_time is not None:
            fight_start = report.start_time + fight.start_time
        if fight.end_time is not None:
            fight_end = report.start_time + fight.end_time

    friendly_ids = set(fight.friendly_players or [])
    actors = (report.master_data.actors if report.master_data else None) or []
    members = [
        PartyMember(
            name=actor.name,
            server=actor.server,
            job=resolver.resolve(actor.sub_type),
        )
        for actor in actors
        if actor.id in friendly_ids
        and actor.server
        and actor.name
        and actor.name not in PSEUDO_PLAYER_NAMES
    ]

    return PartyLookup(
        report_fight=report_fight,
        members=members,
        fight_start=fight_start,
        fight_end=fight_end,
    )


def reconcile_party_batch(
    data: Any, report_fights: Sequence[ReportFight], resolver: JobResolver
) -> list[PartyLookup | None]:
    """Positional party lookups for a party batch response."""
    return reconcile_batch(
        data,
        "reportData",
        report_fights,
        lambda raw, report_fight: extract_party(raw, report_fight, resolver),
        kind="report",
    )


def extract_character(raw: Any, server: Server) -> Character:
    if not isinstance(raw, dict):
        raise ReconciliationError(
            f"Expected an object for server {server.name}, got {type(raw).__name__}"
        )
    ref = CharacterRef.model_validate(raw)
    server_name = ref.server.name if ref.server and ref.server.name else server.name
    region = (
        ref.server.region.slug
        if ref.server and ref.server.region and ref.server.region.slug
        else server.region
    )
    return Character(id=ref.id, name=ref.name, server=server_name, region=region)


def reconcile_server_batch(data: Any, servers: Sequence[Server]) -> list[Character | None]:
    """Positional character matches for a server-existence batch response."""
    return reconcile_batch(data, "characterData", servers, extract_character, kind="server")
