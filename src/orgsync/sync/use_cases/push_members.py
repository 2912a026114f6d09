"""Push Members Use Case - write a membership list to a target in chunks.

Workflow:
1. Deduplicate the members (first occurrence wins)
2. Partition into chunks of at most batch_size members
3. Issue one write per chunk via IOrganizationAPI
4. Record each chunk's outcome; a failed chunk is logged, not retried,
   and never stops the remaining chunks
"""

import logging
import math
from collections.abc import Iterable

from ...api.concurrency import process_concurrent
from ...api.exceptions import TransportError
from ..domain.entities import Chunk, PushReport, PushResult
from ..domain.ports import IOrganizationAPI

logger = logging.getLogger(__name__)

# Upstream limit on usernames per write call
DEFAULT_BATCH_SIZE = 50


class BatchWriter:
    """Deduplicates, chunks and writes members to a target organization.

    Example:
        writer = BatchWriter(ServiceDeskOrganizationAPI(client))
        report = await writer.push(target_id=42, members=usernames)
        print(report.pushed, report.failed_ranges)
    """

    def __init__(
        self,
        organization_api: IOrganizationAPI,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_concurrent: int = 1,
    ):
        """Initialize the writer.

        Args:
            organization_api: Port for the write endpoint
            batch_size: Maximum usernames per write
            max_concurrent: Chunks written in parallel (1 = sequential)
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.api = organization_api
        self.batch_size = batch_size
        self.max_concurrent = max_concurrent

    @staticmethod
    def deduplicate(members: Iterable[str]) -> list[str]:
        """Unique members, first-seen order."""
        return list(dict.fromkeys(members))

    def partition(self, members: list[str]) -> list[Chunk]:
        """Split members into sequentially indexed chunks."""
        chunk_count = math.ceil(len(members) / self.batch_size)
        chunks = []
        for index in range(chunk_count):
            start = index * self.batch_size
            end = min(start + self.batch_size, len(members))
            chunks.append(Chunk(index=index, start=start, usernames=members[start:end]))
        return chunks

    async def push(self, target_id: int, members: Iterable[str]) -> PushReport:
        """Write members to the target, one call per chunk.

        Args:
            target_id: Target organization ID
            members: Member identifiers, duplicates allowed

        Returns:
            PushReport with pushed/attempted counts and failed ranges
        """
        unique = self.deduplicate(members)
        chunks = self.partition(unique)
        logger.info(
            f"Pushing {len(unique)} unique member(s) to target {target_id} "
            f"in {len(chunks)} chunk(s) of up to {self.batch_size}"
        )

        results = await process_concurrent(
            chunks,
            lambda chunk: self._push_chunk(target_id, chunk),
            max_concurrent=self.max_concurrent,
        )
        report = PushReport(target_id=target_id, attempted=len(unique), results=results)

        if report.failed_ranges:
            logger.warning(
                f"Pushed {report.pushed}/{report.attempted} member(s) to target {target_id}; "
                f"failed ranges: {report.failed_ranges}"
            )
        else:
            logger.info(f"Pushed {report.pushed}/{report.attempted} member(s) to target {target_id}")
        return report

    async def _push_chunk(self, target_id: int, chunk: Chunk) -> PushResult:
        try:
            await self.api.push_chunk(target_id, chunk.usernames)
        except TransportError as e:
            logger.error(
                f"Chunk {chunk.index} [{chunk.start}:{chunk.end}] to target {target_id} failed: {e}"
            )
            return PushResult(chunk=chunk, error=str(e))

        logger.debug(f"Chunk {chunk.index} [{chunk.start}:{chunk.end}] pushed")
        return PushResult(chunk=chunk, pushed=len(chunk.usernames))
