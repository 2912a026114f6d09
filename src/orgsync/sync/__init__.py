"""Sync module - Clean Architecture implementation of group membership sync.

Mirrors the members of configured source groups into a target organization.

Architecture:
    domain/     - Pure domain entities and port interfaces
    use_cases/  - Config parsing, paged fetch, aggregation, batched write, orchestration
    adapters/   - Infrastructure implementations (directory REST APIs)
"""

from .domain.entities import (
    Chunk,
    Environment,
    FetchResult,
    MembershipPage,
    PushReport,
    PushResult,
    SyncGroupDefinition,
    SyncResult,
)
from .domain.ports import IMembershipAPI, IOrganizationAPI

__all__ = [
    # Configuration Entities
    "Environment",
    "SyncGroupDefinition",
    # Fetch Entities
    "MembershipPage",
    "FetchResult",
    # Write Entities
    "Chunk",
    "PushResult",
    "PushReport",
    # Result Entities
    "SyncResult",
    # Ports
    "IMembershipAPI",
    "IOrganizationAPI",
]
