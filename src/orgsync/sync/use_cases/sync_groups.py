"""Sync Groups Use Case - Orchestrates the membership sync workflow.

For each selected sync-group:
1. Resolve the target ID for the active environment
2. Aggregate the members of every source group (via GroupAggregator)
3. Push the deduplicated members in chunks (via BatchWriter)

All fetches for a sync-group complete before its first write. Sync-groups
are processed one after another.

Fatal vs. skip:
- An unknown selector is a ConfigurationError
- A definition missing its target ID or source groups is skipped
- An empty aggregation raises EmptyMembershipError for an explicitly
  named sync-group, and is skipped when running ALL
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from ...api.exceptions import ConfigurationError, EmptyMembershipError
from ..domain.entities import Environment, SyncGroupDefinition, SyncResult
from .aggregate_members import GroupAggregator
from .push_members import BatchWriter

logger = logging.getLogger(__name__)

# Selector meaning "every configured sync-group"
ALL_SYNC_GROUPS = "ALL"


class SyncOrchestrator:
    """Ties aggregation to batched writes for configured sync-groups.

    Example:
        orchestrator = SyncOrchestrator(
            aggregator=GroupAggregator(PagedMemberFetcher(membership_api)),
            writer=BatchWriter(organization_api),
            sync_groups=parse_sync_groups(raw),
            environment=Environment.PRODUCTION,
        )
        results = await orchestrator.run("ALL")
    """

    def __init__(
        self,
        aggregator: GroupAggregator,
        writer: BatchWriter,
        sync_groups: Mapping[str, SyncGroupDefinition],
        environment: Environment = Environment.STAGING,
    ):
        self.aggregator = aggregator
        self.writer = writer
        self.sync_groups = sync_groups
        self.environment = environment

    async def sync_one(
        self,
        source_groups: Iterable[str],
        target_id: int,
        name: str | None = None,
    ) -> SyncResult:
        """Mirror the members of source_groups into target_id.

        Raises:
            EmptyMembershipError: If no source group yielded any member
        """
        started_at = datetime.now(timezone.utc)
        source_groups = list(source_groups)
        label = name or ",".join(source_groups)

        logger.info(f"Syncing '{label}': {source_groups} -> target {target_id}")

        members = await self.aggregator.collect_all(source_groups)
        if not members:
            raise EmptyMembershipError(
                f"No members found for '{label}'",
                sync_group=name,
                source_groups=source_groups,
            )

        report = await self.writer.push(target_id, members)

        completed_at = datetime.now(timezone.utc)
        duration = (completed_at - started_at).total_seconds()
        logger.info(
            f"Sync of '{label}' completed in {duration:.2f}s: "
            f"{report.pushed}/{report.attempted} pushed"
        )

        return SyncResult(
            name=label,
            target_id=target_id,
            source_groups=source_groups,
            synced_at=started_at,
            fetched=len(members),
            unique=report.attempted,
            pushed=report.pushed,
            failed_ranges=report.failed_ranges,
        )

    def resolve(self, selector: str) -> list[SyncGroupDefinition]:
        """Definitions selected by name, or all of them for ALL.

        Raises:
            ConfigurationError: If selector names no configured sync-group
        """
        if selector == ALL_SYNC_GROUPS:
            return list(self.sync_groups.values())

        if selector not in self.sync_groups:
            raise ConfigurationError(
                f"Unknown sync-group '{selector}'",
                details={"configured": list(self.sync_groups)},
            )
        return [self.sync_groups[selector]]

    async def run(self, selector: str = ALL_SYNC_GROUPS) -> list[SyncResult]:
        """Sync one named sync-group or ALL of them.

        Returns:
            One SyncResult per selected sync-group, skipped ones included
        """
        results: list[SyncResult] = []

        for definition in self.resolve(selector):
            target_id = definition.target_id(self.environment)
            source_groups = list(definition.source_groups)

            reason = definition.skip_reason(self.environment)
            if reason:
                logger.warning(
                    f"Skipping sync-group '{definition.name}' "
                    f"({self.environment.name.lower()}): {reason}"
                )
                results.append(self._skipped(definition, target_id, reason))
                continue

            try:
                result = await self.sync_one(source_groups, target_id, name=definition.name)
            except EmptyMembershipError as e:
                if selector != ALL_SYNC_GROUPS:
                    raise
                logger.warning(f"Skipping sync-group '{definition.name}': {e.message}")
                results.append(self._skipped(definition, target_id, "no members"))
                continue

            results.append(result)

        return results

    @staticmethod
    def _skipped(
        definition: SyncGroupDefinition,
        target_id: int | None,
        reason: str,
    ) -> SyncResult:
        return SyncResult(
            name=definition.name,
            target_id=target_id,
            source_groups=list(definition.source_groups),
            synced_at=datetime.now(timezone.utc),
            skipped=True,
            skip_reason=reason,
        )
