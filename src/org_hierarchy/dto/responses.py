"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class UnitItem(BaseModel):
    """Single organizational unit (snake_case fields, formatted timestamps)."""

    id: int = Field(..., description="Unit identifier")
    name: str = Field(..., description="Unit name")
    type: str = Field(..., description="Unit type, e.g. FACULTY or DEPARTMENT")
    parent_id: int | None = Field(None, description="Parent unit identifier")
    parent_name: str | None = Field(None, description="Parent unit name")
    hierarchy_path: str = Field("", description="Materialized ancestry path")
    depth_level: int = Field(0, description="Absolute depth in the organization", ge=0)
    children_count: int = Field(0, description="Number of direct children", ge=0)
    is_active: bool = Field(True, description="Whether the unit is active")
    is_academic_unit: bool = False
    is_administrative_unit: bool = False
    is_teaching_unit: bool = False
    created_at: str | None = Field(None, description="Creation time (YYYY-MM-DD HH:MM:SS)")
    updated_at: str | None = Field(None, description="Last update time (YYYY-MM-DD HH:MM:SS)")


class TreeNodeItem(BaseModel):
    """A unit with its nested children."""

    unit: UnitItem
    children: list["TreeNodeItem"] = Field(default_factory=list)


TreeNodeItem.model_rebuild()


class TreeResponse(BaseModel):
    """Response DTO for tree retrieval."""

    status: str = Field("success", description="'success' or 'error'")
    root_id: int | None = Field(None, description="Requested subtree root, if any")
    data: TreeNodeItem


class FlatListResponse(BaseModel):
    """Response DTO for the pre-order unit list."""

    root_id: int | None = None
    count: int = Field(..., ge=0)
    units: list[UnitItem] = Field(default_factory=list)


class FilterResponse(BaseModel):
    """Response DTO for type filtering. ``data`` is null when nothing matched."""

    type: str = Field(..., description="The unit type filtered on")
    is_match: bool = Field(..., description="Whether any unit of that type exists")
    data: TreeNodeItem | None = None


class StatisticsResponse(BaseModel):
    """Response DTO for hierarchy statistics."""

    root_id: int | None = None
    total_units: int = Field(..., ge=0)
    active_units: int = Field(..., ge=0)
    max_depth: int = Field(..., description="Subtree height (1 for a single unit)", ge=0)
    by_type: dict[str, int] = Field(default_factory=dict)


class UnitResponse(BaseModel):
    """Response DTO for a single unit lookup."""

    status: str = "success"
    data: UnitItem


class PathResponse(BaseModel):
    """Response DTO for the root-to-unit path."""

    unit_id: int
    path: list[UnitItem] = Field(..., description="Units from the root down to the target")


class UnitContextResponse(BaseModel):
    """Response DTO for a unit's hierarchical context."""

    unit: UnitItem
    ancestors: list[UnitItem] = Field(default_factory=list)
    descendants: list[UnitItem] = Field(default_factory=list)
    children_count: int = Field(..., description="Number of descendants", ge=0)
    depth_level: int = Field(..., ge=0)
    hierarchy_path: str


class CacheInfoResponse(BaseModel):
    """Response DTO for cache diagnostics."""

    total_entries: int = Field(..., ge=0)
    valid_entries: int = Field(..., ge=0)
    expired_entries: int = Field(..., ge=0)
    memory_estimate: int = Field(..., description="Rough size of cached values in bytes", ge=0)
    keys: list[str] = Field(default_factory=list)
    default_ttl: int = Field(..., description="Default entry TTL in seconds", ge=0)


class InvalidationResponse(BaseModel):
    """Response DTO for invalidation operations."""

    success: bool = Field(..., description="Whether the operation succeeded")
    removed_count: int = Field(..., description="Number of cache entries removed", ge=0)
    message: str = Field(..., description="Human-readable status message")


class EventResponse(BaseModel):
    """Response DTO for a published event."""

    success: bool
    event: dict[str, Any]


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    source_healthy: bool = Field(..., description="Whether the hierarchy source is reachable")
    cache_entries: int = Field(..., ge=0)
