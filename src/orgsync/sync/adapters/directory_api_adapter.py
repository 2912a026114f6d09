"""Directory API adapters for the member listing and organization write endpoints.

These adapters implement IMembershipAPI and IOrganizationAPI by wrapping
DirectoryClient with the endpoint paths, query parameters and payloads of
the two REST APIs.
"""

from typing import TYPE_CHECKING, Any

from ...api.exceptions import APIError
from ..domain.entities import MembershipPage
from ..domain.ports import IMembershipAPI, IOrganizationAPI

if TYPE_CHECKING:
    from ...api.client import DirectoryClient


class DirectoryMembershipAPI(IMembershipAPI):
    """Paged group member listing.

    GET {base}/rest/api/2/group/member?includeInactiveUsers=false
        &maxResults={pageSize}&groupname={group}&startAt={startAt}
    """

    ENDPOINT = "/rest/api/2/group/member"

    def __init__(self, client: "DirectoryClient", include_inactive: bool = False):
        """Initialize the API adapter.

        Args:
            client: Configured DirectoryClient instance
            include_inactive: Also list deactivated users
        """
        self.client = client
        self.include_inactive = include_inactive

    async def fetch_page(
        self,
        group_name: str,
        page_size: int,
        start_at: int,
    ) -> MembershipPage:
        params = {
            "includeInactiveUsers": "true" if self.include_inactive else "false",
            "maxResults": page_size,
            "groupname": group_name,
            "startAt": start_at,
        }
        data = await self.client.get(self.ENDPOINT, params=params)
        if not isinstance(data, dict):
            raise APIError(
                f"Member listing returned {type(data).__name__}, expected an object",
                status_code=200,
                endpoint=self.ENDPOINT,
            )
        return MembershipPage(
            values=self._member_names(data),
            is_last=self._is_last(data),
            start_at=start_at,
        )

    @staticmethod
    def _is_last(data: dict[str, Any]) -> bool:
        # No isLast flag means nothing more to page through; anything but a
        # real True keeps paging until an empty or repeated page
        if "isLast" not in data:
            return True
        return data["isLast"] is True

    def _member_names(self, data: dict[str, Any]) -> list[str]:
        values = data.get("values") or []
        if not isinstance(values, list):
            raise APIError(
                "Member listing 'values' is not a list",
                status_code=200,
                endpoint=self.ENDPOINT,
            )
        return [v["name"] for v in values if isinstance(v, dict) and v.get("name")]


class ServiceDeskOrganizationAPI(IOrganizationAPI):
    """Adds users to a service desk organization.

    POST {base}/rest/servicedeskapi/organization/{orgId}/user
         {"usernames": [...]}
    """

    ENDPOINT = "/rest/servicedeskapi/organization/{org_id}/user"

    def __init__(self, client: "DirectoryClient"):
        self.client = client

    async def push_chunk(self, target_id: int, usernames: list[str]) -> None:
        await self.client.post(
            self.ENDPOINT.format(org_id=target_id),
            json_body={"usernames": list(usernames)},
        )
