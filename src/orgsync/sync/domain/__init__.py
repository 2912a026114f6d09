"""Domain layer - Pure domain entities and port interfaces.

This layer contains:
- Entities: Pure data structures representing business objects
- Ports: Abstract interfaces defining contracts for adapters

No infrastructure dependencies allowed in this layer.
"""

from .entities import (
    Chunk,
    Environment,
    FetchResult,
    MembershipPage,
    PushReport,
    PushResult,
    SyncGroupDefinition,
    SyncResult,
)
from .ports import IMembershipAPI, IOrganizationAPI

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
