"""Builders for canned FFLogs ``data`` objects used across tests."""

from __future__ import annotations

from typing import Any


def rank(start_time: int | None, spec: Any, code: str = "rep", fight_id: int = 1) -> dict[str, Any]:
    return {
        "startTime": start_time,
        "spec": spec,
        "report": {"code": code, "fightID": fight_id},
    }


def tier_subtree(
    ranks: list[dict[str, Any]] | None = None,
    all_stars: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "zoneRankings": {"allStars": all_stars or [], "rankings": []},
        "encounterRankings": {"ranks": ranks or []},
    }


def report_subtree(
    fight_id: int,
    report_start: int,
    fight_start: int,
    fight_end: int,
    players: list[tuple[str, str, str]],
) -> dict[str, Any]:
    """Report with one fight; players are (name, server, subType)."""
    actors = [
        {"id": index + 1, "name": name, "server": server, "subType": sub_type}
        for index, (name, server, sub_type) in enumerate(players)
    ]
    return {
        "code": "rep",
        "startTime": report_start,
        "fights": [
            {
                "id": fight_id,
                "startTime": fight_start,
                "endTime": fight_end,
                "friendlyPlayers": [actor["id"] for actor in actors],
            }
        ],
        "masterData": {"actors": actors},
    }


def batch_data(wrapper: str, subtrees: dict[int, Any], rate_limit: dict[str, Any] | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {wrapper: {f"item{index}": subtree for index, subtree in subtrees.items()}}
    if rate_limit is not None:
        data["rateLimitData"] = rate_limit
    return data
