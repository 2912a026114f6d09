"""Shared fixtures for sync tests."""

import sys

import pytest

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
from src.orgsync.sync.domain.entities import MembershipPage
from src.orgsync.sync.domain.ports import IMembershipAPI


class GroupMembershipAPI(IMembershipAPI):
    """Mock IMembershipAPI serving each group's members from memory.

    A group mapped to an exception raises it on every call.
    """

    def __init__(self, groups: dict[str, list[str] | Exception], events: list[str] | None = None):
        self.groups = groups
        self.events = events if events is not None else []
        self.calls: list[tuple[str, int, int]] = []

    async def fetch_page(self, group_name: str, page_size: int, start_at: int) -> MembershipPage:
        self.calls.append((group_name, page_size, start_at))
        self.events.append(f"fetch:{group_name}")
        members = self.groups.get(group_name, [])
        if isinstance(members, Exception):
            raise members
        values = members[start_at:start_at + page_size]
        return MembershipPage(
            values=values,
            is_last=start_at + page_size >= len(members),
            start_at=start_at,
        )


@pytest.fixture
def make_membership_api():
    """Factory for GroupMembershipAPI instances."""
    return GroupMembershipAPI
