"""Reference data and result models for RaidRecord."""

from .jobs import UNKNOWN_JOB, JobResolver
from .records import (
    AllStarEntry,
    Character,
    ClearRecord,
    EncounterAllStar,
    JobUsage,
    PartyLookup,
    PartyMember,
    RateLimitSnapshot,
    ReportFight,
    TierClearRecord,
    TierExtraction,
    WeekResolution,
)
from .servers import KR_SERVERS, Server, find_server, servers_for_region
from .tier import Tier, TierCatalog, TierType, default_tier_catalog

__all__ = [
    "AllStarEntry",
    "Character",
    "ClearRecord",
    "EncounterAllStar",
    "JobResolver",
    "JobUsage",
    "KR_SERVERS",
    "PartyLookup",
    "PartyMember",
    "RateLimitSnapshot",
    "ReportFight",
    "Server",
    "Tier",
    "TierCatalog",
    "TierClearRecord",
    "TierExtraction",
    "TierType",
    "UNKNOWN_JOB",
    "WeekResolution",
    "default_tier_catalog",
    "find_server",
    "servers_for_region",
]
