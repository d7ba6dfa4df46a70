"""Top-level configuration for RaidRecord.

Configuration Sources (in order of precedence):
1. CLI arguments
2. Environment variables (RAIDRECORD_FFLOGS_*)
3. Default values
"""

import argparse
from typing import Any

from pydantic import BaseModel, Field

from .fflogs_config import FFLogsConfig
from .logging_config import LoggingConfig
from .search_config import SearchConfig


class Config(BaseModel):
    """Aggregated RaidRecord configuration."""

    fflogs: FFLogsConfig = Field(default_factory=FFLogsConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Config":
        """Build configuration from the environment plus CLI overrides."""
        fflogs_overrides: dict[str, Any] = {}
        if getattr(args, "client_id", None):
            fflogs_overrides["client_id"] = args.client_id
        if getattr(args, "client_secret", None):
            fflogs_overrides["client_secret"] = args.client_secret
        if getattr(args, "region", None):
            fflogs_overrides["region"] = args.region

        search_overrides: dict[str, Any] = {}
        if getattr(args, "tier", None):
            search_overrides["selected_tiers"] = list(args.tier)

        logging_overrides = LoggingConfig.extract_cli_overrides(args) or {}

        return cls(
            fflogs=FFLogsConfig(**fflogs_overrides),
            search=SearchConfig(**search_overrides),
            logging=LoggingConfig(**logging_overrides),
        )
