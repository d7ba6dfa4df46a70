"""Utility helpers for RaidRecord."""

from .api_usage import ApiUsage, UsageLevel, calculate_api_usage
from .character_parser import ParsedCharacter, parse_character_input

__all__ = [
    "ApiUsage",
    "ParsedCharacter",
    "UsageLevel",
    "calculate_api_usage",
    "parse_character_input",
]
