"""Tests for the directory API adapters."""

import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
from src.orgsync.api.client import DirectoryClient
from src.orgsync.api.exceptions import APIError, ServerError
from src.orgsync.sync.adapters.directory_api_adapter import (
    DirectoryMembershipAPI,
    ServiceDeskOrganizationAPI,
)
from src.orgsync.sync.use_cases.fetch_members import PagedMemberFetcher, PaginationConfig


@pytest.fixture
def mock_client():
    client = MagicMock(spec=DirectoryClient)
    client.get = AsyncMock()
    client.post = AsyncMock(return_value={})
    return client


class TestDirectoryMembershipAPI:

    async def test_request_parameters(self, mock_client):
        mock_client.get.return_value = {"values": [], "isLast": True}

        await DirectoryMembershipAPI(mock_client).fetch_page("jira-users", 50, 51)

        mock_client.get.assert_awaited_once_with(
            "/rest/api/2/group/member",
            params={
                "includeInactiveUsers": "false",
                "maxResults": 50,
                "groupname": "jira-users",
                "startAt": 51,
            },
        )

    async def test_include_inactive(self, mock_client):
        mock_client.get.return_value = {"values": []}

        await DirectoryMembershipAPI(mock_client, include_inactive=True).fetch_page("g", 10, 0)

        params = mock_client.get.await_args.kwargs["params"]
        assert params["includeInactiveUsers"] == "true"

    async def test_page_parsing(self, mock_client):
        mock_client.get.return_value = {
            "values": [
                {"name": "alice", "active": True},
                {"name": "bob", "displayName": "Bob"},
                {"displayName": "no name"},
                "garbage",
            ],
            "isLast": False,
        }

        page = await DirectoryMembershipAPI(mock_client).fetch_page("g", 50, 0)

        assert page.values == ["alice", "bob"]
        assert page.is_last is False
        assert page.start_at == 0

    async def test_missing_is_last_means_last(self, mock_client):
        mock_client.get.return_value = {"values": [{"name": "alice"}]}

        page = await DirectoryMembershipAPI(mock_client).fetch_page("g", 50, 0)

        assert page.is_last is True

    @pytest.mark.parametrize("value", [False, "false", "true", 0, None])
    async def test_is_last_requires_real_true(self, mock_client, value):
        mock_client.get.return_value = {"values": [{"name": "alice"}], "isLast": value}

        page = await DirectoryMembershipAPI(mock_client).fetch_page("g", 50, 0)

        assert page.is_last is False

    async def test_missing_values_is_empty_page(self, mock_client):
        mock_client.get.return_value = {}

        page = await DirectoryMembershipAPI(mock_client).fetch_page("g", 50, 0)

        assert page.is_empty

    async def test_values_not_a_list(self, mock_client):
        mock_client.get.return_value = {"values": {"name": "alice"}}

        with pytest.raises(APIError):
            await DirectoryMembershipAPI(mock_client).fetch_page("g", 50, 0)

    @pytest.mark.parametrize("body", [None, [], [{"name": "alice"}], "oops", 42])
    async def test_non_object_body(self, mock_client, body):
        mock_client.get.return_value = body

        with pytest.raises(APIError) as exc:
            await DirectoryMembershipAPI(mock_client).fetch_page("g", 50, 0)

        assert exc.value.status_code == 200

    @pytest.mark.parametrize("body", [None, [], "oops"])
    async def test_fetcher_survives_non_object_body(self, mock_client, body):
        """A malformed listing ends the fetch with an error instead of raising."""
        mock_client.get.side_effect = [
            {"values": [{"name": "alice"}, {"name": "bob"}], "isLast": False},
            body,
        ]
        fetcher = PagedMemberFetcher(DirectoryMembershipAPI(mock_client), PaginationConfig(page_size=2))

        result = await fetcher.fetch_group("g")

        assert result.members == ["alice", "bob"]
        assert result.stop_reason == "error"
        assert not result.complete

    async def test_client_error_propagates(self, mock_client):
        mock_client.get.side_effect = ServerError()

        with pytest.raises(ServerError):
            await DirectoryMembershipAPI(mock_client).fetch_page("g", 50, 0)


class TestServiceDeskOrganizationAPI:

    async def test_push_chunk(self, mock_client):
        await ServiceDeskOrganizationAPI(mock_client).push_chunk(42, ["alice", "bob"])

        mock_client.post.assert_awaited_once_with(
            "/rest/servicedeskapi/organization/42/user",
            json_body={"usernames": ["alice", "bob"]},
        )
