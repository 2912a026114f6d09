"""Aggregate the members of every source group of a sync-group."""

import logging
from collections.abc import Iterable

from ...api.concurrency import process_concurrent
from ..domain.entities import FetchResult
from .fetch_members import PagedMemberFetcher

logger = logging.getLogger(__name__)


class GroupAggregator:
    """Runs the paged fetch for each source group and flattens the results.

    The merged list keeps source-group order and may contain duplicates
    across groups; deduplication happens at the chunking boundary. Source
    groups yielding nothing are logged and skipped.
    """

    def __init__(self, fetcher: PagedMemberFetcher, max_concurrent: int = 1):
        """Initialize the aggregator.

        Args:
            fetcher: Paged fetcher for a single source group
            max_concurrent: Source groups fetched in parallel (1 = sequential)
        """
        self.fetcher = fetcher
        self.max_concurrent = max_concurrent

    async def fetch_each(self, source_groups: Iterable[str]) -> list[FetchResult]:
        """Fetch every source group, results in input order."""
        return await process_concurrent(
            list(source_groups),
            self.fetcher.fetch_group,
            max_concurrent=self.max_concurrent,
        )

    async def collect_all(self, source_groups: Iterable[str]) -> list[str]:
        """Fetch every source group and concatenate the members.

        Args:
            source_groups: Source group names

        Returns:
            Flattened member identifiers, possibly with duplicates
        """
        members: list[str] = []
        for result in await self.fetch_each(source_groups):
            if not result.members:
                logger.warning(f"Source group '{result.group_name}' yielded no members, skipping")
                continue
            if not result.complete:
                logger.warning(
                    f"Source group '{result.group_name}' is partial: "
                    f"{len(result.members)} member(s) before error"
                )
            members.extend(result.members)

        logger.info(f"Collected {len(members)} member(s) from source groups")
        return members
