"""Tests for API usage summaries."""

import pytest

from raidrecord.core.models import RateLimitSnapshot
from raidrecord.utils.api_usage import UsageLevel, calculate_api_usage


def test_no_snapshot():
    assert calculate_api_usage(None) is None


@pytest.mark.parametrize(
    "spent, level",
    [(0, UsageLevel.LOW), (1799, UsageLevel.LOW), (1800, UsageLevel.MEDIUM), (2880, UsageLevel.HIGH)],
)
def test_levels(spent, level):
    usage = calculate_api_usage(RateLimitSnapshot(3600, spent, 60))

    assert usage.level is level


def test_summary_fields():
    usage = calculate_api_usage(RateLimitSnapshot(3600, 900, 125))

    assert usage.points_spent == 900
    assert usage.points_limit == 3600
    assert usage.usage_percent == 25
    assert usage.reset_minutes == 3
