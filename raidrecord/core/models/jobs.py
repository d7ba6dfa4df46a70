"""Job reference data and spec-to-job resolution."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

UNKNOWN_JOB = "Unknown"

# Legacy numeric spec ids reported by FFLogs (actor subType in older reports)
LEGACY_SPEC_IDS: Mapping[int, str] = MappingProxyType(
    {
        # Tanks
        19: "Paladin",
        21: "Warrior",
        32: "DarkKnight",
        37: "Gunbreaker",
        # Healers
        24: "WhiteMage",
        28: "Scholar",
        33: "Astrologian",
        40: "Sage",
        # Melee DPS
        20: "Monk",
        22: "Dragoon",
        30: "Ninja",
        34: "Samurai",
        39: "Reaper",
        41: "Viper",
        # Physical ranged DPS
        23: "Bard",
        31: "Machinist",
        38: "Dancer",
        # Magical ranged DPS
        25: "BlackMage",
        27: "Summoner",
        35: "RedMage",
        42: "Pictomancer",
        # Limited job
        36: "BlueMage",
    }
)

# Canonical job order: tanks, healers, melee, physical ranged, casters
JOB_ORDER: tuple[str, ...] = (
    "Paladin",
    "Warrior",
    "DarkKnight",
    "Gunbreaker",
    "WhiteMage",
    "Scholar",
    "Astrologian",
    "Sage",
    "Monk",
    "Dragoon",
    "Ninja",
    "Samurai",
    "Reaper",
    "Viper",
    "Bard",
    "Machinist",
    "Dancer",
    "BlackMage",
    "Summoner",
    "RedMage",
    "Pictomancer",
    "BlueMage",
)

JOB_ABBREVIATIONS: Mapping[str, str] = MappingProxyType(
    {
        "Paladin": "PLD",
        "Warrior": "WAR",
        "DarkKnight": "DRK",
        "Gunbreaker": "GNB",
        "WhiteMage": "WHM",
        "Scholar": "SCH",
        "Astrologian": "AST",
        "Sage": "SGE",
        "Monk": "MNK",
        "Dragoon": "DRG",
        "Ninja": "NIN",
        "Samurai": "SAM",
        "Reaper": "RPR",
        "Viper": "VPR",
        "Bard": "BRD",
        "Machinist": "MCH",
        "Dancer": "DNC",
        "BlackMage": "BLM",
        "Summoner": "SMN",
        "RedMage": "RDM",
        "Pictomancer": "PCT",
        "BlueMage": "BLU",
    }
)


class JobResolver:
    """Pure lookup from an FFLogs spec identifier to a canonical job name.

    Accepts a legacy numeric id (int or digit string) or a spec name such as
    "DarkKnight" / "Dark Knight". Anything unrecognized maps to "Unknown".
    """

    def __init__(
        self,
        legacy_ids: Mapping[int, str] = LEGACY_SPEC_IDS,
        job_names: tuple[str, ...] = JOB_ORDER,
    ):
        self._legacy_ids = dict(legacy_ids)
        self._by_folded_name = {name.lower(): name for name in job_names}
        self._order = {name: index for index, name in enumerate(job_names)}

    def resolve(self, spec: Any) -> str:
        """Map a spec identifier to a canonical job name."""
        if spec is None or isinstance(spec, bool):
            return UNKNOWN_JOB

        if isinstance(spec, int):
            return self._legacy_ids.get(spec, UNKNOWN_JOB)

        if isinstance(spec, str):
            compact = "".join(spec.split())
            if compact.isdigit():
                return self._legacy_ids.get(int(compact), UNKNOWN_JOB)
            return self._by_folded_name.get(compact.lower(), UNKNOWN_JOB)

        return UNKNOWN_JOB

    def sort_key(self, job: str) -> int:
        """Position of a job in the canonical order (unknown jobs sort last)."""
        return self._order.get(job, 999)

    @staticmethod
    def abbreviation(job: str) -> str:
        return JOB_ABBREVIATIONS.get(job, "?")
