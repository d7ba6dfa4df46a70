"""Tests for character input parsing."""

import pytest

from raidrecord.core.models import find_server
from raidrecord.utils.character_parser import parse_character_input

MOOGLE = find_server("Moogle")
CHOCOBO = find_server("Chocobo")


@pytest.mark.parametrize(
    "text, name, server",
    [
        ("tester@Moogle", "Tester", MOOGLE),
        ("TESTER@moogle", "Tester", MOOGLE),
        ("tester ＠ Chocobo", "Tester", CHOCOBO),
        ("테스터@모그리", "테스터", MOOGLE),
        ("테스터 초코보", "테스터", CHOCOBO),
        ("o'brien chocobo", "O'brien", CHOCOBO),
        ("  tester  ", "Tester", None),
        ("테스터", "테스터", None),
    ],
)
def test_valid_input(text, name, server):
    parsed = parse_character_input(text)

    assert parsed.name == name
    assert parsed.server == server


@pytest.mark.parametrize(
    "text",
    [None, "", "   ", "bad-name@Moogle", "name123", "tester@Nowhere"],
)
def test_invalid_input(text):
    parsed = parse_character_input(text)

    assert parsed.name == ""
    assert parsed.server is None


def test_restricted_server_list():
    parsed = parse_character_input("tester moogle", servers=[CHOCOBO])

    assert parsed.name == ""
    assert parsed.server is None
