"""RaidRecord - FFLogs raid clear history search."""

__version__ = "1.0.0"
