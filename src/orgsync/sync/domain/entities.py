"""Domain entities for sync operations.

These are pure data structures with no infrastructure dependencies.
They represent the core business objects used in membership sync.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any


class Environment(IntEnum):
    """Deployment environment; the value indexes every (staging, production) pair."""

    STAGING = 0
    PRODUCTION = 1

    @classmethod
    def parse(cls, value: "str | int | bool | Environment") -> "Environment":
        """Accept 'staging'/'production', 'stg'/'prod', 0/1 or a bool flag."""
        if isinstance(value, Environment):
            return value
        if isinstance(value, (bool, int)):
            return cls(int(value))

        normalized = str(value).strip().lower()
        aliases = {
            "0": cls.STAGING,
            "staging": cls.STAGING,
            "stg": cls.STAGING,
            "1": cls.PRODUCTION,
            "production": cls.PRODUCTION,
            "prod": cls.PRODUCTION,
        }
        if normalized not in aliases:
            raise ValueError(f"Unknown environment: {value!r}")
        return aliases[normalized]


@dataclass(frozen=True)
class SyncGroupDefinition:
    """A named sync-group: source groups mirrored into one target per environment.

    Attributes:
        name: Unique key of the sync-group (case-sensitive)
        target_ids: (staging_id, production_id); None marks a missing ID
        source_groups: Lower-cased source group names, first-seen order
    """

    name: str
    target_ids: tuple[int | None, int | None]
    source_groups: tuple[str, ...] = ()

    def target_id(self, environment: Environment) -> int | None:
        """Target ID for the given environment."""
        return self.target_ids[int(environment)]

    def skip_reason(self, environment: Environment) -> str | None:
        """Why this definition cannot be synced in environment, or None if it can."""
        if self.target_id(environment) is None:
            return "no target ID"
        if not self.source_groups:
            return "no source groups"
        return None


@dataclass
class MembershipPage:
    """One page of a paged member listing.

    Attributes:
        values: Member identifiers in response order
        is_last: Whether the API declared this the last page
        start_at: Offset used to request the page
    """

    values: list[str]
    is_last: bool
    start_at: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.values


@dataclass
class FetchResult:
    """Members accumulated for one source group.

    A fetch never raises; a transport failure ends the fetch and is
    recorded in ``error`` alongside whatever was accumulated.
    """

    group_name: str
    members: list[str] = field(default_factory=list)
    pages: int = 0
    calls: int = 0
    stop_reason: str = ""
    error: str | None = None

    @property
    def complete(self) -> bool:
        return self.error is None


@dataclass
class Chunk:
    """A bounded slice of the deduplicated membership, the unit of one write.

    Attributes:
        index: Sequential chunk number starting at 0
        start: Index of the first member in the deduplicated list
        usernames: Member identifiers in this chunk
    """

    index: int
    start: int
    usernames: list[str]

    @property
    def end(self) -> int:
        """Exclusive end index in the deduplicated list."""
        return self.start + len(self.usernames)


@dataclass
class PushResult:
    """Outcome of writing one chunk."""

    chunk: Chunk
    pushed: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class PushReport:
    """Aggregate outcome of writing every chunk to one target.

    Contains statistics about the write and the ranges that failed.
    """

    target_id: int
    attempted: int
    results: list[PushResult] = field(default_factory=list)

    @property
    def pushed(self) -> int:
        return sum(r.pushed for r in self.results if r.success)

    @property
    def chunk_count(self) -> int:
        return len(self.results)

    @property
    def failed_ranges(self) -> list[tuple[int, int]]:
        """(start, end) index ranges of chunks that failed, end exclusive."""
        return [(r.chunk.start, r.chunk.end) for r in self.results if not r.success]

    @property
    def success(self) -> bool:
        return not self.failed_ranges


@dataclass
class SyncResult:
    """Result of syncing one sync-group.

    Contains statistics about the sync operation, or the reason it was skipped.
    """

    name: str
    target_id: int | None
    source_groups: list[str]
    synced_at: datetime
    fetched: int = 0
    unique: int = 0
    pushed: int = 0
    failed_ranges: list[tuple[int, int]] = field(default_factory=list)
    skipped: bool = False
    skip_reason: str | None = None

    @property
    def success(self) -> bool:
        return not self.skipped and not self.failed_ranges

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging and CLI output."""
        return {
            "name": self.name,
            "target_id": self.target_id,
            "source_groups": self.source_groups,
            "fetched": self.fetched,
            "unique": self.unique,
            "pushed": self.pushed,
            "failed_ranges": [list(r) for r in self.failed_ranges],
            "skipped": self.skipped,
            "skip_reason": self.skip_reason,
            "synced_at": self.synced_at.isoformat(),
        }
