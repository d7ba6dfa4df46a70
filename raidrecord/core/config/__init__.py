"""Configuration models for RaidRecord."""

from .config import Config
from .fflogs_config import FFLogsConfig
from .logging_config import FileLoggingConfig, LoggingConfig, setup_logging
from .search_config import SearchConfig

__all__ = [
    "Config",
    "FFLogsConfig",
    "FileLoggingConfig",
    "LoggingConfig",
    "SearchConfig",
    "setup_logging",
]
