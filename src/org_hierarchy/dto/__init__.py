"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import HierarchyChangedRequest
from .responses import (
    CacheInfoResponse,
    EventResponse,
    FilterResponse,
    FlatListResponse,
    HealthCheckResponse,
    InvalidationResponse,
    PathResponse,
    StatisticsResponse,
    TreeNodeItem,
    TreeResponse,
    UnitContextResponse,
    UnitItem,
    UnitResponse,
)

__all__ = [
    "HierarchyChangedRequest",
    "UnitItem",
    "TreeNodeItem",
    "TreeResponse",
    "FlatListResponse",
    "FilterResponse",
    "StatisticsResponse",
    "UnitResponse",
    "PathResponse",
    "UnitContextResponse",
    "CacheInfoResponse",
    "InvalidationResponse",
    "EventResponse",
    "HealthCheckResponse",
]
