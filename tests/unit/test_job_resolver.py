"""Tests for spec-to-job resolution."""

import pytest

from raidrecord.core.models import UNKNOWN_JOB, JobResolver


@pytest.fixture
def resolver():
    return JobResolver()


@pytest.mark.parametrize(
    "spec, expected",
    [
        (19, "Paladin"),
        ("32", "DarkKnight"),
        (" 24 ", "WhiteMage"),
        ("DarkKnight", "DarkKnight"),
        ("Dark Knight", "DarkKnight"),
        ("redmage", "RedMage"),
        ("Pictomancer", "Pictomancer"),
    ],
)
def test_known_specs(resolver, spec, expected):
    assert resolver.resolve(spec) == expected


@pytest.mark.parametrize("spec", [None, True, 999, "", "Carpenter", 1.5, ["Bard"]])
def test_unknown_specs(resolver, spec):
    assert resolver.resolve(spec) == UNKNOWN_JOB


def test_sort_key_follows_role_order(resolver):
    jobs = ["BlackMage", "Paladin", "Unknown", "Sage", "Dragoon"]

    assert sorted(jobs, key=resolver.sort_key) == [
        "Paladin",
        "Sage",
        "Dragoon",
        "BlackMage",
        "Unknown",
    ]


def test_abbreviation():
    assert JobResolver.abbreviation("Gunbreaker") == "GNB"
    assert JobResolver.abbreviation(UNKNOWN_JOB) == "?"


def test_custom_tables():
    resolver = JobResolver(legacy_ids={1: "Gladiator"}, job_names=("Gladiator",))

    assert resolver.resolve(1) == "Gladiator"
    assert resolver.resolve("gladiator") == "Gladiator"
    assert resolver.resolve("Paladin") == UNKNOWN_JOB
