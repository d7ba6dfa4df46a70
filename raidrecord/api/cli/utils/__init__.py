"""CLI helpers."""

from .rich_output import RichOutputFormatter

__all__ = ["RichOutputFormatter"]
