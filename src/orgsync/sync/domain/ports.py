"""Port interfaces for sync operations.

Ports define the contracts between the use cases and the infrastructure.
These are abstract base classes that adapters must implement.

Following the Hexagonal Architecture (Ports and Adapters) pattern:
- Ports are interfaces defined in the domain layer
- Adapters implement these ports in the adapters layer
- Use cases depend only on ports, not concrete implementations
"""

from abc import ABC, abstractmethod

from .entities import MembershipPage


class IMembershipAPI(ABC):
    """Port for the paged member listing of a source group."""

    @abstractmethod
    async def fetch_page(
        self,
        group_name: str,
        page_size: int,
        start_at: int,
    ) -> MembershipPage:
        """Fetch one page of members of a group.

        Args:
            group_name: Source group to list
            page_size: Maximum members in the page
            start_at: Offset of the first member

        Returns:
            MembershipPage with member identifiers and the last-page flag

        Raises:
            TransportError: If the call fails
        """
        ...


class IOrganizationAPI(ABC):
    """Port for adding members to a target organization."""

    @abstractmethod
    async def push_chunk(self, target_id: int, usernames: list[str]) -> None:
        """Add a batch of users to the target.

        Args:
            target_id: Environment-specific target organization ID
            usernames: Member identifiers, at most one batch worth

        Raises:
            TransportError: If the call fails
        """
        ...
