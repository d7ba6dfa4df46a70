"""User-facing entry points for RaidRecord."""
