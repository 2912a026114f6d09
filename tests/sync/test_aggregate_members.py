"""Tests for the GroupAggregator."""

import logging
import sys

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
from src.orgsync.api.exceptions import NotFoundError
from src.orgsync.sync.use_cases.aggregate_members import GroupAggregator
from src.orgsync.sync.use_cases.fetch_members import PagedMemberFetcher


class TestGroupAggregator:
    """Tests for GroupAggregator.collect_all."""

    async def test_concatenates_in_input_order(self, make_membership_api):
        api = make_membership_api({
            "admins": ["alice", "bob"],
            "devs": ["carol", "alice"],
        })
        aggregator = GroupAggregator(PagedMemberFetcher(api))

        members = await aggregator.collect_all(["devs", "admins"])

        # Duplicates across groups are kept; dedup happens at write time
        assert members == ["carol", "alice", "alice", "bob"]

    async def test_empty_group_skipped(self, make_membership_api, caplog):
        api = make_membership_api({"admins": [], "devs": ["carol"]})
        aggregator = GroupAggregator(PagedMemberFetcher(api))

        with caplog.at_level(logging.WARNING):
            members = await aggregator.collect_all(["admins", "devs"])

        assert members == ["carol"]
        assert "'admins' yielded no members" in caplog.text

    async def test_failing_group_skipped(self, make_membership_api):
        api = make_membership_api({
            "missing": NotFoundError("Group", "missing"),
            "devs": ["carol", "dave"],
        })
        aggregator = GroupAggregator(PagedMemberFetcher(api))

        members = await aggregator.collect_all(["missing", "devs"])

        assert members == ["carol", "dave"]

    async def test_all_groups_empty(self, make_membership_api):
        api = make_membership_api({})
        aggregator = GroupAggregator(PagedMemberFetcher(api))

        assert await aggregator.collect_all(["a", "b"]) == []
        assert len(api.calls) == 2

    async def test_concurrent_fetch_keeps_order(self, make_membership_api):
        groups = {f"g{i}": [f"user{i}"] for i in range(6)}
        api = make_membership_api(groups)
        aggregator = GroupAggregator(PagedMemberFetcher(api), max_concurrent=3)

        members = await aggregator.collect_all(list(groups))

        assert members == [f"user{i}" for i in range(6)]

    async def test_fetch_each_returns_results(self, make_membership_api):
        api = make_membership_api({"devs": ["carol"]})
        aggregator = GroupAggregator(PagedMemberFetcher(api))

        results = await aggregator.fetch_each(["devs", "nobody"])

        assert [r.group_name for r in results] == ["devs", "nobody"]
        assert results[0].members == ["carol"]
        assert results[1].members == []
