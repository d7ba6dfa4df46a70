"""Tiers command module - list the tier catalog."""

import argparse

from raidrecord.core.config import Config
from raidrecord.core.models import default_tier_catalog

from ..utils.rich_output import RichOutputFormatter


async def tiers_command(args: argparse.Namespace, config: Config) -> None:
    formatter = RichOutputFormatter(verbose=getattr(args, "verbose", False))
    formatter.tier_table(default_tier_catalog().tiers)
