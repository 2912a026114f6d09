#!/usr/bin/env python3
"""Tests for the command-line entry point.

Tests cover:
    - Exit codes for fatal configuration, credential and membership errors
    - Flag overrides reaching the settings
    - A full run against a fake directory client
"""

import sys
from unittest.mock import AsyncMock, patch

import pytest

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
import main
from src.orgsync.api.auth import Credential, CredentialStore
from src.orgsync.api.exceptions import CredentialError, EmptyMembershipError
from src.orgsync.sync.domain.entities import Environment, SyncResult

DIRECTORY = {
    "jira-support": ["alice", "bob"],
    "jira-l2": ["bob", "carol"],
    "jira-developers": ["dave"],
}


class StaticCredentialStore(CredentialStore):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.requested: list[str] = []

    def get_credential(self, principal: str) -> Credential:
        self.requested.append(principal)
        if self.fail:
            raise CredentialError(f"No secret for {principal}", principal=principal)
        return Credential(username=principal, secret="pw")


class FakeDirectoryClient:
    """Stands in for DirectoryClient, serving DIRECTORY and recording writes."""

    instances: list["FakeDirectoryClient"] = []

    def __init__(self, base_url, credential, **kwargs):
        self.base_url = base_url
        self.credential = credential
        self.posts: list[tuple[str, dict]] = []
        FakeDirectoryClient.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def get(self, endpoint, params=None):
        members = DIRECTORY.get(params["groupname"], [])
        start, size = params["startAt"], params["maxResults"]
        return {
            "values": [{"name": name} for name in members[start:start + size]],
            "isLast": start + size >= len(members),
        }

    async def post(self, endpoint, json_body, params=None):
        self.posts.append((endpoint, json_body))
        return {}


@pytest.fixture
def env(monkeypatch):
    for key in ("ORGSYNC_ENVIRONMENT", "ORGSYNC_TARGET", "ORGSYNC_PAGE_SIZE",
                "ORGSYNC_BATCH_SIZE", "ORGSYNC_MAX_CONCURRENT", "ORGSYNC_MAX_PAGES",
                "ORGSYNC_PAGE_DELAY"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv(
        "ORGSYNC_SYNC_GROUPS",
        "(support; 11,21; jira-support,jira-l2)(dev; 12,22; jira-developers)",
    )
    monkeypatch.setenv("ORGSYNC_BASE_URLS", "https://stg.example.com,https://jira.example.com")
    monkeypatch.setenv("ORGSYNC_USERNAMES", "svc-stg,svc-prod")
    FakeDirectoryClient.instances = []
    return monkeypatch


class TestParseArgs:

    def test_flags(self):
        args = main.parse_args([
            "--target", "support",
            "--environment", "production",
            "--config", "(a; 1,2; x)",
            "--page-size", "20",
            "--batch-size", "10",
            "--max-concurrent", "3",
            "-v",
        ])

        assert args.target == "support"
        assert args.environment == "production"
        assert args.sync_groups_raw == "(a; 1,2; x)"
        assert (args.page_size, args.batch_size, args.max_concurrent) == (20, 10, 3)
        assert args.verbose

    def test_unknown_environment_rejected(self):
        with pytest.raises(SystemExit):
            main.parse_args(["--environment", "qa"])


class TestExitCodes:

    def test_missing_configuration(self, env):
        env.delenv("ORGSYNC_SYNC_GROUPS")

        assert main.main([], credential_store=StaticCredentialStore()) == main.EXIT_FATAL

    def test_missing_credential(self, env):
        store = StaticCredentialStore(fail=True)

        assert main.main([], credential_store=store) == main.EXIT_FATAL
        assert store.requested == ["svc-stg"]

    def test_empty_named_group(self, env):
        with patch.object(
            main, "run_sync", new=AsyncMock(side_effect=EmptyMembershipError(sync_group="dev"))
        ):
            assert main.main(["--target", "dev"]) == main.EXIT_FATAL

    def test_success_prints_summary(self, env, capsys):
        result = SyncResult(
            name="support",
            target_id=11,
            source_groups=["jira-support"],
            synced_at=main.datetime.now(main.timezone.utc),
            fetched=2,
            unique=2,
            pushed=2,
        )
        with patch.object(main, "run_sync", new=AsyncMock(return_value=[result])) as run_sync:
            code = main.main(["--environment", "production", "--batch-size", "5"])

        assert code == main.EXIT_OK
        settings = run_sync.await_args.args[0]
        assert settings.environment is Environment.PRODUCTION
        assert settings.batch_size == 5
        output = capsys.readouterr().out
        assert "SYNC COMPLETE" in output
        assert "support -> 11: 2/2 pushed" in output


class TestEndToEnd:

    def test_all_sync_groups(self, env, capsys):
        with patch.object(main, "DirectoryClient", FakeDirectoryClient):
            code = main.main([], credential_store=StaticCredentialStore())

        assert code == main.EXIT_OK
        client, = FakeDirectoryClient.instances
        assert client.base_url == "https://stg.example.com"
        assert client.credential.username == "svc-stg"
        assert client.posts == [
            ("/rest/servicedeskapi/organization/11/user", {"usernames": ["alice", "bob", "carol"]}),
            ("/rest/servicedeskapi/organization/12/user", {"usernames": ["dave"]}),
        ]
        assert "dev -> 12: 1/1 pushed" in capsys.readouterr().out

    def test_named_group_in_production(self, env):
        with patch.object(main, "DirectoryClient", FakeDirectoryClient):
            code = main.main(
                ["--target", "dev", "--environment", "production"],
                credential_store=StaticCredentialStore(),
            )

        assert code == main.EXIT_OK
        client, = FakeDirectoryClient.instances
        assert client.base_url == "https://jira.example.com"
        assert client.posts == [
            ("/rest/servicedeskapi/organization/22/user", {"usernames": ["dave"]}),
        ]

    def test_unknown_target(self, env):
        with patch.object(main, "DirectoryClient", FakeDirectoryClient):
            code = main.main(["--target", "nope"], credential_store=StaticCredentialStore())

        assert code == main.EXIT_FATAL
