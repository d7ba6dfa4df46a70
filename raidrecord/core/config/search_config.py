"""Search configuration for RaidRecord.

Controls the point estimates used for budget checks and which tiers a search
covers by default.
"""

from pydantic import BaseModel, Field, field_validator

from raidrecord.core.constants import POINTS_PER_TIER


class SearchConfig(BaseModel):
    """Configuration for raid history searches."""

    points_per_tier: float = Field(
        default=POINTS_PER_TIER,
        gt=0,
        description="Estimated API points consumed by one tier's combined queries",
    )

    selected_tiers: list[str] = Field(
        default_factory=list,
        description="Tier ids ('zoneId-partition') to search; empty means all tiers",
    )

    @field_validator("selected_tiers")
    @classmethod
    def validate_selected_tiers(cls, v: list[str]) -> list[str]:
        """Tier ids look like '68-5'; keep order, drop duplicates."""
        seen: set[str] = set()
        result: list[str] = []
        for tier_id in v:
            tier_id = tier_id.strip()
            zone, sep, partition = tier_id.partition("-")
            if not sep or not zone.isdigit() or not partition.isdigit():
                raise ValueError(
                    f"Invalid tier id '{tier_id}'. Expected 'zoneId-partition' (e.g. '68-5')"
                )
            if tier_id not in seen:
                seen.add(tier_id)
                result.append(tier_id)
        return result
