"""API providers for RaidRecord."""
