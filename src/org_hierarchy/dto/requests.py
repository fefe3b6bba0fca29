"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class HierarchyChangedRequest(BaseModel):
    """Request DTO for publishing a hierarchy change.

    The handler converts this into a HierarchyChanged event.
    """

    change_type: str = Field(
        ...,
        description="Kind of change: created, moved, updated or deleted",
        min_length=1,
    )
    affected_unit_id: int = Field(..., description="Unit the change originated from", ge=0)
    affected_unit_ids: list[int] = Field(
        default_factory=list,
        description="Other units affected by the change",
    )
