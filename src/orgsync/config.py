"""Settings for a sync run, loaded from environment variables.

Environment Variables:
    ORGSYNC_SYNC_GROUPS: Sync-group configuration string (required)
        e.g. "(support; 11,21; jira-support,jira-l2)(dev; 12,22; jira-developers)"
    ORGSYNC_BASE_URLS: "stagingURL,productionURL" (required)
    ORGSYNC_USERNAMES: "stagingPrincipal,productionPrincipal" (required)
    ORGSYNC_ENVIRONMENT: staging | production | 0 | 1 (default: staging)
    ORGSYNC_TARGET: Sync-group name or ALL (default: ALL)
    ORGSYNC_PAGE_SIZE: Members per listing page (default: 50)
    ORGSYNC_BATCH_SIZE: Usernames per write call (default: 50)
    ORGSYNC_MAX_CONCURRENT: Parallel fetches/writes (default: 1)
    ORGSYNC_PAGE_DELAY: Seconds between listing pages (default: 0)
    ORGSYNC_MAX_PAGES: Page limit per source group (default: unlimited)

Secrets are not settings; see api.auth.EnvCredentialStore.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from dotenv import load_dotenv

from .api.exceptions import ConfigurationError
from .sync.domain.entities import Environment
from .sync.use_cases.push_members import DEFAULT_BATCH_SIZE
from .sync.use_cases.sync_groups import ALL_SYNC_GROUPS

logger = logging.getLogger(__name__)

REQUIRED_KEYS = {
    "sync_groups_raw": "ORGSYNC_SYNC_GROUPS",
    "base_urls": "ORGSYNC_BASE_URLS",
    "usernames": "ORGSYNC_USERNAMES",
}


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",")]


def _optional_int(value: Optional[str]) -> Optional[int]:
    return int(value) if value else None


@dataclass
class SyncSettings:
    """Explicit configuration passed to every component of a run."""

    sync_groups_raw: str
    base_urls: list[str] = field(default_factory=list)
    usernames: list[str] = field(default_factory=list)
    environment: Environment = Environment.STAGING
    target: str = ALL_SYNC_GROUPS
    page_size: int = 50
    batch_size: int = DEFAULT_BATCH_SIZE
    max_concurrent: int = 1
    page_delay: float = 0.0
    max_pages: Optional[int] = None

    @classmethod
    def from_env(cls, **overrides: Any) -> "SyncSettings":
        """Load settings from the environment (and .env), then apply overrides.

        Overrides set to None are ignored, so CLI flags can be passed through
        unconditionally.

        Raises:
            ConfigurationError: If a required key is missing or a value is invalid
        """
        load_dotenv()
        overrides = {k: v for k, v in overrides.items() if v is not None}

        missing = [
            env_key for name, env_key in REQUIRED_KEYS.items()
            if name not in overrides and not os.getenv(env_key)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}",
                missing_keys=missing,
            )

        try:
            values = {
                "sync_groups_raw": os.getenv("ORGSYNC_SYNC_GROUPS", ""),
                "base_urls": _split_list(os.getenv("ORGSYNC_BASE_URLS", "")),
                "usernames": _split_list(os.getenv("ORGSYNC_USERNAMES", "")),
                "environment": Environment.parse(os.getenv("ORGSYNC_ENVIRONMENT", "staging")),
                "target": os.getenv("ORGSYNC_TARGET", ALL_SYNC_GROUPS).strip(),
                "page_size": int(os.getenv("ORGSYNC_PAGE_SIZE", "50")),
                "batch_size": int(os.getenv("ORGSYNC_BATCH_SIZE", str(DEFAULT_BATCH_SIZE))),
                "max_concurrent": int(os.getenv("ORGSYNC_MAX_CONCURRENT", "1")),
                "page_delay": float(os.getenv("ORGSYNC_PAGE_DELAY", "0")),
                "max_pages": _optional_int(os.getenv("ORGSYNC_MAX_PAGES")),
            }
        except ValueError as e:
            raise ConfigurationError(f"Invalid setting: {e}", cause=e)

        values.update(overrides)
        settings = cls(**values)
        settings.validate()
        logger.debug(f"Loaded {settings!r}")
        return settings

    def validate(self) -> None:
        """Check value ranges and that the environment has a URL and principal.

        Raises:
            ConfigurationError: On the first invalid value
        """
        for name in ("page_size", "batch_size", "max_concurrent"):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be at least 1, got {getattr(self, name)}")

        index = int(self.environment)
        env_name = self.environment.name.lower()
        if len(self.base_urls) <= index or not self.base_urls[index]:
            raise ConfigurationError(
                f"No base URL configured for {env_name}",
                missing_keys=["ORGSYNC_BASE_URLS"],
            )
        if len(self.usernames) <= index or not self.usernames[index]:
            raise ConfigurationError(
                f"No principal configured for {env_name}",
                missing_keys=["ORGSYNC_USERNAMES"],
            )

    @property
    def base_url(self) -> str:
        """Base URL for the active environment."""
        return self.base_urls[int(self.environment)]

    @property
    def principal(self) -> str:
        """Principal whose credential authenticates the active environment."""
        return self.usernames[int(self.environment)]

    def __repr__(self) -> str:
        return (
            f"SyncSettings("
            f"environment={self.environment.name.lower()}, "
            f"target={self.target}, "
            f"base_urls={self.base_urls}, "
            f"page_size={self.page_size}, "
            f"batch_size={self.batch_size}, "
            f"max_concurrent={self.max_concurrent})"
        )
