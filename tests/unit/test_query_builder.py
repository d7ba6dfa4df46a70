"""Tests for aliased GraphQL batch query construction."""

import pytest

from raidrecord.core.exceptions import QueryConstructionError
from raidrecord.core.models import KR_SERVERS, ReportFight, default_tier_catalog
from raidrecord.providers.fflogs.query_builder import (
    VariableSet,
    alias_for,
    build_batch_query,
    build_party_batch,
    build_server_batch,
    build_tier_batch,
)


def _field(item, index, alias):
    return f"{alias}: thing(id: $id{index}) {{ value }}"


def _variables(item, index):
    return VariableSet(f"$id{index}: Int!", {f"id{index}": item})


class TestBuildBatchQuery:
    def test_one_alias_per_item(self):
        batch = build_batch_query([10, 20, 30], _field, _variables, "root")

        assert batch.size == 3
        assert batch.aliases == ["item0", "item1", "item2"]
        for alias in batch.aliases:
            assert batch.query.count(f"{alias}:") == 1
        assert "item3:" not in batch.query

    def test_variables_are_suffixed_with_index(self):
        batch = build_batch_query([10, 20], _field, _variables, "root")

        assert batch.variables == {"id0": 10, "id1": 20}
        assert "query($id0: Int!, $id1: Int!)" in batch.query

    def test_identical_input_gives_identical_output(self):
        first = build_batch_query([1, 2], _field, _variables, "root", {"base": 5}, "$base: Int!")
        second = build_batch_query([1, 2], _field, _variables, "root", {"base": 5}, "$base: Int!")

        assert first.query == second.query
        assert first.variables == second.variables

    def test_fields_nested_under_wrapper(self):
        batch = build_batch_query([1], _field, _variables, "characterData")

        assert batch.query.startswith("query(")
        assert "    characterData {\n        item0: thing" in batch.query
        assert batch.query.rstrip().endswith("}")

    def test_base_variables_come_first(self):
        batch = build_batch_query([7], _field, _variables, "root", {"characterId": 99}, "$characterId: Int!")

        assert batch.variables == {"characterId": 99, "id0": 7}
        assert batch.query.startswith("query($characterId: Int!, $id0: Int!)")

    def test_empty_items_rejected(self):
        with pytest.raises(QueryConstructionError):
            build_batch_query([], _field, _variables, "root")

    def test_blank_wrapper_rejected(self):
        with pytest.raises(QueryConstructionError):
            build_batch_query([1], _field, _variables, "  ")

    def test_empty_fragment_rejected(self):
        with pytest.raises(QueryConstructionError):
            build_batch_query([1], lambda item, index, alias: "", _variables, "root")

    def test_malformed_variable_set_rejected(self):
        with pytest.raises(QueryConstructionError):
            build_batch_query([1], _field, lambda item, index: {"id": item}, "root")

    def test_colliding_variable_names_rejected(self):
        def unsuffixed(item, index):
            return VariableSet("$id: Int!", {"id": item})

        with pytest.raises(QueryConstructionError, match="collides"):
            build_batch_query([1, 2], _field, unsuffixed, "root")

    def test_collision_with_base_variable_rejected(self):
        with pytest.raises(QueryConstructionError):
            build_batch_query([1], _field, _variables, "root", {"id0": 3}, "$id0: Int!")


def test_alias_for():
    assert alias_for(0) == "item0"
    assert alias_for(12) == "item12"


class TestDomainBatches:
    def test_tier_batch_variables(self):
        catalog = default_tier_catalog()
        savage = catalog.get("68-5")
        ultimate = catalog.get("65-5")

        batch = build_tier_batch(12345, [savage, ultimate])

        assert batch.variables == {
            "characterId": 12345,
            "zoneId0": 68,
            "encounterId0": 100,
            "difficulty0": 101,
            "partition0": 5,
            "zoneId1": 65,
            "encounterId1": 1079,
            "difficulty1": 100,
            "partition1": 5,
        }
        assert "item0: character(id: $characterId)" in batch.query
        assert "encounterRankings(encounterID: $encounterId1" in batch.query
        assert batch.items == (savage, ultimate)

    def test_party_batch(self):
        batch = build_party_batch([ReportFight("abc", 3), ReportFight("xyz", 11)])

        assert batch.variables == {
            "reportCode0": "abc",
            "fightId0": 3,
            "reportCode1": "xyz",
            "fightId1": 11,
        }
        assert "reportData {" in batch.query
        assert "fights(fightIDs: [$fightId1])" in batch.query
        assert 'actors(type: "Player")' in batch.query

    def test_server_batch_covers_every_server(self):
        batch = build_server_batch("Tester", KR_SERVERS, "KR")

        assert batch.size == len(KR_SERVERS)
        assert batch.variables["name"] == "Tester"
        assert batch.variables["region"] == "KR"
        assert batch.variables["server0"] == "carbuncle"
        assert "serverSlug: $server4" in batch.query
