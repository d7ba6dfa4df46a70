"""Tests for RaidHistorySearch orchestration."""

from datetime import datetime, timedelta, timezone

import pytest

from raidrecord.core.exceptions import BudgetExceededError, SearchCancelledError, TransportError
from raidrecord.core.models import RateLimitSnapshot
from raidrecord.providers.fflogs import FFLogsClient
from raidrecord.services import raid_history_search
from raidrecord.services import (
    BudgetTracker,
    RaidHistorySearch,
    SearchProgress,
    SearchState,
    sort_raid_history,
)
from tests.helpers.fake_fflogs_transport import FakeQueryTransport, rate_limit
from tests.helpers.fflogs_payloads import batch_data, rank, report_subtree, tier_subtree

KST = timezone(timedelta(hours=9))


def _ms(*args) -> int:
    return int(datetime(*args, tzinfo=KST).timestamp() * 1000)


@pytest.fixture
def tiers(tier_catalog):
    # Savage, Ultimate, Savage
    return [tier_catalog.get("68-5"), tier_catalog.get("65-5"), tier_catalog.get("62-11")]


def _search(transport, tier_catalog, budget=None):
    client = FFLogsClient(transport, budget=budget or BudgetTracker(points_per_tier=20))
    return RaidHistorySearch(client, tier_catalog)


def _two_phase_responses(spent_after_first=20, spent_after_second=40):
    """Tier batch where tiers 0 and 2 cleared, tier 1 is malformed, then a party batch."""
    tier_data = batch_data(
        "characterData",
        {
            0: tier_subtree([rank(_ms(2025, 7, 29, 20), "Dancer", "aaa", 3), rank(_ms(2025, 8, 5, 20), "Bard", "bbb", 1)]),
            1: {"encounterRankings": {"ranks": "not-a-list"}},
            2: tier_subtree([rank(_ms(2025, 1, 14, 21), "Sage", "ccc", 8)]),
        },
        rate_limit(spent=spent_after_first),
    )
    party_data = batch_data(
        "reportData",
        {
            0: report_subtree(
                3,
                _ms(2025, 7, 29, 19),
                30 * 60 * 1000,
                55 * 60 * 1000,
                [("Tank One", "Moogle", "Paladin"), ("Healer Two", "Chocobo", "Sage")],
            ),
            1: report_subtree(8, _ms(2025, 1, 14, 20), 0, 60 * 1000, [("Caster", "Fenrir", "RedMage")]),
        },
        rate_limit(spent=spent_after_second),
    )
    return [tier_data, party_data]


class TestSearchResults:
    @pytest.mark.asyncio
    async def test_failed_tier_is_omitted(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses())
        search = _search(transport, tier_catalog)

        records = await search.search(42, tiers)

        assert len(transport.calls) == 2
        assert [record.tier.tier_id for record in records] == ["68-5", "62-11"]
        assert search.state is SearchState.COMPLETED

    @pytest.mark.asyncio
    async def test_record_assembly(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses())
        search = _search(transport, tier_catalog)

        first, second = await search.search(42, tiers)

        assert first.job == "Dancer"
        assert first.clear_date == "2025-07-29 (Tue)"
        assert first.week == 2
        assert first.week_ambiguous is False
        assert first.report_url == "https://www.fflogs.com/reports/aaa#fight=3"
        assert [member.name for member in first.party_members] == ["Tank One", "Healer Two"]
        assert first.fight_start == _ms(2025, 7, 29, 19, 30)
        assert [usage.job for usage in first.additional_jobs] == ["Bard"]

        assert second.job == "Sage"
        assert second.week == 1
        assert second.party_members[0].job == "RedMage"

    @pytest.mark.asyncio
    async def test_assembly_failure_omits_only_that_tier(self, tier_catalog, tiers, monkeypatch):
        real_resolve_week = raid_history_search.resolve_week

        def failing_resolve_week(tier, clear_timestamp, fight_start=None):
            if tier.tier_id == "68-5":
                raise ValueError("bad timestamp")
            return real_resolve_week(tier, clear_timestamp, fight_start=fight_start)

        monkeypatch.setattr(raid_history_search, "resolve_week", failing_resolve_week)
        transport = FakeQueryTransport(_two_phase_responses())
        search = _search(transport, tier_catalog)

        records = await search.search(42, tiers)

        assert [record.tier.tier_id for record in records] == ["62-11"]
        assert records[0].week == 1
        assert search.state is SearchState.COMPLETED

    @pytest.mark.asyncio
    async def test_party_batch_only_covers_cleared_tiers(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses())

        await _search(transport, tier_catalog).search(42, tiers)

        assert transport.calls[1].variables == {
            "reportCode0": "aaa",
            "fightId0": 3,
            "reportCode1": "ccc",
            "fightId1": 8,
        }

    @pytest.mark.asyncio
    async def test_no_clears_skips_party_request(self, tier_catalog, tiers):
        transport = FakeQueryTransport([batch_data("characterData", {0: tier_subtree()})])
        events = []
        search = _search(transport, tier_catalog)
        search.set_progress_callback(events.append)

        records = await search.search(42, tiers[:1])

        assert records == []
        assert len(transport.calls) == 1
        assert [event.current for event in events] == [1, 2]

    @pytest.mark.asyncio
    async def test_zero_tiers_makes_no_calls(self, tier_catalog):
        transport = FakeQueryTransport()

        records = await _search(transport, tier_catalog).search(42, [])

        assert records == []
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_default_selection_used(self, tier_catalog):
        transport = FakeQueryTransport([batch_data("characterData", {})])
        search = _search(transport, tier_catalog)
        search.set_selected_tiers(["65-5", "44-5"])

        await search.search(42)

        assert search.get_selected_tier_count() == 2
        assert search.required_points() == 40
        assert transport.calls[0].variables["zoneId0"] == 65
        assert transport.calls[0].variables["zoneId1"] == 44

    @pytest.mark.asyncio
    async def test_transport_failure_fails_search(self, tier_catalog, tiers):
        transport = FakeQueryTransport([TransportError("Connection error")])
        search = _search(transport, tier_catalog)

        with pytest.raises(TransportError):
            await search.search(42, tiers)

        assert search.state is SearchState.FAILED


def _reset_day_clear(fight_end_offset_ms: int):
    """Savage clear whose pull started at 17:10 on a reset Tuesday, week 2 of the tier."""
    tier_data = batch_data(
        "characterData",
        {0: tier_subtree([rank(_ms(2025, 7, 29, 17, 10), "Dancer", "aaa", 3)])},
        rate_limit(spent=20),
    )
    party_data = batch_data(
        "reportData",
        {0: report_subtree(3, _ms(2025, 7, 29, 17), 10 * 60 * 1000, fight_end_offset_ms, [("Tank One", "Moogle", "Paladin")])},
        rate_limit(spent=30),
    )
    return [tier_data, party_data]


class TestWeekAttribution:
    @pytest.mark.asyncio
    async def test_kill_inside_window_is_ambiguous(self, tier_catalog):
        transport = FakeQueryTransport(_reset_day_clear(45 * 60 * 1000))

        (record,) = await _search(transport, tier_catalog).search(42, [tier_catalog.get("68-5")])

        assert record.fight_end == _ms(2025, 7, 29, 17, 45)
        assert record.week == 1
        assert record.week_ambiguous is True

    @pytest.mark.asyncio
    async def test_kill_after_window_uses_fight_end(self, tier_catalog):
        # Pull started in the window but the kill landed at 19:40
        transport = FakeQueryTransport(_reset_day_clear(160 * 60 * 1000))

        (record,) = await _search(transport, tier_catalog).search(42, [tier_catalog.get("68-5")])

        assert record.fight_end == _ms(2025, 7, 29, 19, 40)
        assert record.week == 2
        assert record.week_ambiguous is False

    @pytest.mark.asyncio
    async def test_rank_start_used_without_party_data(self, tier_catalog):
        tier_data, _ = _reset_day_clear(45 * 60 * 1000)
        transport = FakeQueryTransport([tier_data, batch_data("reportData", {0: None}, rate_limit(spent=30))])

        (record,) = await _search(transport, tier_catalog).search(42, [tier_catalog.get("68-5")])

        assert record.fight_start is None
        assert record.week == 2
        assert record.week_ambiguous is False


class TestProgressAndUsage:
    @pytest.mark.asyncio
    async def test_progress_emitted_before_each_call(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses())
        search = _search(transport, tier_catalog)
        seen = []

        def on_progress(event: SearchProgress):
            seen.append((event.current, event.total, event.message, len(transport.calls)))

        search.set_progress_callback(on_progress)
        await search.search(42, tiers)

        assert seen == [
            (1, 2, "fetching raid data", 0),
            (2, 2, "fetching party members", 1),
        ]

    @pytest.mark.asyncio
    async def test_usage_reported_after_each_call(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses(20, 45))
        search = _search(transport, tier_catalog)
        snapshots = []
        search.set_api_usage_callback(snapshots.append)

        await search.search(42, tiers)

        assert [snapshot.points_spent_this_hour for snapshot in snapshots] == [20, 45]

    @pytest.mark.asyncio
    async def test_per_search_callbacks_override(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses())
        search = _search(transport, tier_catalog)
        default_events, override_events = [], []
        search.set_progress_callback(default_events.append)

        await search.search(42, tiers, on_progress=override_events.append)

        assert default_events == []
        assert len(override_events) == 2

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_break_search(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses())
        search = _search(transport, tier_catalog)

        def explode(_):
            raise RuntimeError("display crashed")

        search.set_progress_callback(explode)
        search.set_api_usage_callback(explode)

        records = await search.search(42, tiers)

        assert len(records) == 2


class TestBudget:
    @pytest.mark.asyncio
    async def test_insufficient_budget_rejected_before_any_call(self, tier_catalog, tiers):
        budget = BudgetTracker(points_per_tier=20)
        budget.update_snapshot(RateLimitSnapshot(3600, 3560, 900))
        transport = FakeQueryTransport()
        events = []
        search = _search(transport, tier_catalog, budget)
        search.set_progress_callback(events.append)

        with pytest.raises(BudgetExceededError) as exc_info:
            await search.search(42, tiers)

        assert transport.calls == []
        assert events == []
        assert exc_info.value.remaining_points == 40
        assert exc_info.value.required_points == 60
        assert exc_info.value.reset_in_minutes == 15

    @pytest.mark.asyncio
    async def test_exact_budget_is_enough(self, tier_catalog, tiers):
        budget = BudgetTracker(points_per_tier=20)
        budget.update_snapshot(RateLimitSnapshot(3600, 3540, 900))
        transport = FakeQueryTransport(_two_phase_responses(spent_after_first=3560))

        records = await _search(transport, tier_catalog, budget).search(42, tiers)

        assert len(records) == 2

    @pytest.mark.asyncio
    async def test_budget_rechecked_before_party_lookup(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses(spent_after_first=3590))
        search = _search(transport, tier_catalog)

        with pytest.raises(BudgetExceededError):
            await search.search(42, tiers)

        assert len(transport.calls) == 1
        assert search.state is SearchState.FAILED


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_during_party_lookup(self, tier_catalog, tiers):
        search_ref = {}

        async def cancel_on_second_call(call):
            if "reportData" in call.query:
                search_ref["search"].cancel()

        transport = FakeQueryTransport(
            _two_phase_responses(spent_after_second=77), before_return=cancel_on_second_call
        )
        search = _search(transport, tier_catalog)
        search_ref["search"] = search

        with pytest.raises(SearchCancelledError):
            await search.search(42, tiers)

        assert len(transport.calls) == 2
        assert search.state is SearchState.CANCELLED
        # The in-flight response still updated the budget
        assert search._client.get_rate_limit_info().points_spent_this_hour == 77

    @pytest.mark.asyncio
    async def test_cancel_during_tier_fetch_skips_party_lookup(self, tier_catalog, tiers):
        search_ref = {}

        async def cancel_now(call):
            search_ref["search"].cancel()

        transport = FakeQueryTransport(_two_phase_responses(), before_return=cancel_now)
        search = _search(transport, tier_catalog)
        search_ref["search"] = search

        with pytest.raises(SearchCancelledError):
            await search.search(42, tiers)

        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_cancelled_instance_requires_reset(self, tier_catalog, tiers):
        transport = FakeQueryTransport(_two_phase_responses())
        search = _search(transport, tier_catalog)
        search.cancel()

        with pytest.raises(SearchCancelledError):
            await search.search(42, tiers)
        assert transport.calls == []

        search.reset_cancel()
        records = await search.search(42, tiers)

        assert len(records) == 2
        assert not search.is_cancelled


def test_sort_raid_history_newest_first(tier_catalog):
    from raidrecord.core.models import TierClearRecord

    def record(tier_id):
        return TierClearRecord(
            tier=tier_catalog.get(tier_id),
            job="Paladin",
            clear_timestamp=None,
            clear_date=None,
            week=None,
            week_ambiguous=False,
            all_star=None,
        )

    records = [record("44-5"), record("68-5"), record("53-5")]

    ordered = sort_raid_history(records)

    assert [r.tier.tier_id for r in ordered] == ["68-5", "53-5", "44-5"]
    assert sort_raid_history(ordered) == ordered
    assert [r.tier.tier_id for r in records] == ["44-5", "68-5", "53-5"]
