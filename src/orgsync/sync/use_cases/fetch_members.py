"""Fetch Members Use Case - enumerate every member of one source group.

The listing endpoint pages by offset and is not fully reliable: it may
keep answering with the page it already served instead of advancing or
declaring the end. The fetcher therefore stops on whichever comes first:

1. The API flags the page as the last one
2. The API returns an empty page
3. The page repeats the tail of the previous page (same members, any order)
4. The optional max_pages safety limit is reached
5. A call fails; members accumulated so far are still returned

The repeated-page check compares multisets, so two different pages that
happen to hold the same members are also treated as the end of data.
"""

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Optional

from ...api.exceptions import TransportError
from ..domain.entities import FetchResult
from ..domain.ports import IMembershipAPI

logger = logging.getLogger(__name__)


@dataclass
class PaginationConfig:
    """Configuration for paged member listing.

    Attributes:
        page_size: Number of members per request
        delay_between_pages: Seconds to wait between requests (rate limiting)
        max_pages: Safety limit to prevent runaway loops (None = no limit)
    """
    page_size: int = 50
    delay_between_pages: float = 0.0
    max_pages: Optional[int] = None


def is_repeated_page(previous: list[str], current: list[str]) -> bool:
    """True when ``current`` holds exactly the members at the tail of ``previous``."""
    if not previous or not current:
        return False
    return Counter(previous[-len(current):]) == Counter(current)


class PagedMemberFetcher:
    """Accumulates the members of a source group across pages.

    Example:
        fetcher = PagedMemberFetcher(DirectoryMembershipAPI(client))
        result = await fetcher.fetch_group("jira-developers")
        print(result.members, result.stop_reason)
    """

    def __init__(
        self,
        membership_api: IMembershipAPI,
        config: Optional[PaginationConfig] = None,
    ):
        self.api = membership_api
        self.config = config or PaginationConfig()

    async def fetch_group(self, group_name: str, start_at: int = 0) -> FetchResult:
        """Fetch all members of a group, never raising.

        Args:
            group_name: Source group to enumerate
            start_at: Offset of the first page

        Returns:
            FetchResult with the accumulated members (possibly empty)
        """
        page_size = self.config.page_size
        result = FetchResult(group_name=group_name)
        previous: list[str] | None = None

        while True:
            result.calls += 1
            try:
                page = await self.api.fetch_page(group_name, page_size, start_at)
            except TransportError as e:
                logger.error(
                    f"Fetching '{group_name}' at startAt={start_at} failed, "
                    f"keeping {len(result.members)} member(s): {e}"
                )
                result.error = str(e)
                result.stop_reason = "error"
                break

            if page.is_empty:
                result.stop_reason = "empty page"
                break

            # The first page has nothing to repeat
            if previous is not None and start_at >= 1 and is_repeated_page(previous, page.values):
                logger.warning(
                    f"'{group_name}' returned a repeated page at startAt={start_at}, "
                    f"treating it as end of data"
                )
                result.stop_reason = "repeated page"
                break

            result.members.extend(page.values)
            result.pages += 1
            previous = page.values

            if page.is_last:
                result.stop_reason = "last page"
                break

            if self.config.max_pages and result.pages >= self.config.max_pages:
                logger.warning(f"Reached max_pages limit ({self.config.max_pages}) for '{group_name}'")
                result.stop_reason = "max pages"
                break

            start_at = start_at + page_size + 1

            if self.config.delay_between_pages > 0:
                await asyncio.sleep(self.config.delay_between_pages)

        logger.info(
            f"Fetched {len(result.members)} member(s) of '{group_name}' "
            f"in {result.pages} page(s) ({result.stop_reason})"
        )
        return result
