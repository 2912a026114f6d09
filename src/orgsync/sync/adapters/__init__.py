"""Adapters layer - Infrastructure implementations for sync operations.

This layer contains concrete implementations of the ports defined in the domain layer:
- DirectoryMembershipAPI: paged group member listing, implements IMembershipAPI
- ServiceDeskOrganizationAPI: organization user writes, implements IOrganizationAPI
"""

from .directory_api_adapter import DirectoryMembershipAPI, ServiceDeskOrganizationAPI

__all__ = [
    "DirectoryMembershipAPI",
    "ServiceDeskOrganizationAPI",
]
