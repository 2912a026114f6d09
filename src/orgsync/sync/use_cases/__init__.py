"""Use cases layer - Business logic for membership sync.

This layer contains the sync workflow:
- Parse the sync-group configuration (parse_sync_groups)
- Enumerate one source group page by page (PagedMemberFetcher)
- Merge every source group of a sync-group (GroupAggregator)
- Write deduplicated members in chunks (BatchWriter)
- Drive one or all sync-groups (SyncOrchestrator)

Use cases depend only on ports, not concrete implementations.
"""

from .aggregate_members import GroupAggregator
from .fetch_members import PagedMemberFetcher, PaginationConfig, is_repeated_page
from .parse_config import parse_sync_groups
from .push_members import DEFAULT_BATCH_SIZE, BatchWriter
from .sync_groups import ALL_SYNC_GROUPS, SyncOrchestrator

__all__ = [
    "ALL_SYNC_GROUPS",
    "DEFAULT_BATCH_SIZE",
    "BatchWriter",
    "GroupAggregator",
    "PagedMemberFetcher",
    "PaginationConfig",
    "SyncOrchestrator",
    "is_repeated_page",
    "parse_sync_groups",
]
