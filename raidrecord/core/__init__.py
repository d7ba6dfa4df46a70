"""Core building blocks for RaidRecord: configuration, exceptions and models."""
