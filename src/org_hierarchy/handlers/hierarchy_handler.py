"""HTTP handlers for hierarchy and cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging

from fastapi import HTTPException, status

from org_hierarchy.dto import (
    CacheInfoResponse,
    EventResponse,
    FilterResponse,
    FlatListResponse,
    HealthCheckResponse,
    HierarchyChangedRequest,
    InvalidationResponse,
    PathResponse,
    StatisticsResponse,
    TreeNodeItem,
    TreeResponse,
    UnitContextResponse,
    UnitItem,
    UnitResponse,
)
from org_hierarchy.entities import UnitSnapshot
from org_hierarchy.events import HierarchyChanged
from org_hierarchy.exceptions import UnitNotFoundError
from org_hierarchy.services import HierarchyService
from org_hierarchy.tree import HierarchyTreeNode

logger = logging.getLogger(__name__)


def _unit_item(unit: UnitSnapshot) -> UnitItem:
    return UnitItem(**unit.to_dict())


def _tree_item(tree: HierarchyTreeNode) -> TreeNodeItem:
    return TreeNodeItem.model_validate(tree.to_nested())


def _check_id(value: int | None, label: str) -> None:
    if value is not None and value <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label}: {value}",
        )


def _not_found(e: UnitNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _server_error(action: str, e: Exception) -> HTTPException:
    logger.exception("Failed to %s", action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {e}",
    )


class HierarchyHandler:
    """HTTP handlers for hierarchy operations.

    This handler delegates business logic to HierarchyService and handles
    HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses
    """

    def __init__(self, hierarchy_service: HierarchyService) -> None:
        """Initialize the hierarchy handler.

        Args:
            hierarchy_service: The hierarchy service for business logic (required).
        """
        self._service = hierarchy_service

    def get_tree(self, root_id: int | None = None) -> TreeResponse:
        """Handle GET /hierarchy/tree requests.

        Raises:
            HTTPException: 400 for an invalid root id, 404 if it does not exist
        """
        _check_id(root_id, "root unit id")
        try:
            tree = self._service.get_tree(root_id)
            return TreeResponse(root_id=root_id, data=_tree_item(tree))
        except UnitNotFoundError as e:
            raise _not_found(e) from e
        except Exception as e:
            raise _server_error("get hierarchy tree", e) from e

    def get_flat_list(self, root_id: int | None = None) -> FlatListResponse:
        """Handle GET /hierarchy/flat requests."""
        _check_id(root_id, "root unit id")
        try:
            units = self._service.flatten(root_id)
            return FlatListResponse(
                root_id=root_id,
                count=len(units),
                units=[_unit_item(u) for u in units],
            )
        except UnitNotFoundError as e:
            raise _not_found(e) from e
        except Exception as e:
            raise _server_error("flatten hierarchy", e) from e

    def get_statistics(self, root_id: int | None = None) -> StatisticsResponse:
        """Handle GET /hierarchy/statistics requests."""
        _check_id(root_id, "root unit id")
        try:
            stats = self._service.get_statistics(root_id)
            return StatisticsResponse(root_id=root_id, **stats.to_dict())
        except UnitNotFoundError as e:
            raise _not_found(e) from e
        except Exception as e:
            raise _server_error("get hierarchy statistics", e) from e

    def filter_by_type(self, unit_type: str, root_id: int | None = None) -> FilterResponse:
        """Handle GET /hierarchy/filter requests."""
        _check_id(root_id, "root unit id")
        try:
            filtered = self._service.filter_by_type(unit_type, root_id)
            return FilterResponse(
                type=unit_type,
                is_match=filtered is not None,
                data=_tree_item(filtered) if filtered is not None else None,
            )
        except UnitNotFoundError as e:
            raise _not_found(e) from e
        except Exception as e:
            raise _server_error("filter hierarchy", e) from e

    def get_unit(self, unit_id: int) -> UnitResponse:
        """Handle GET /hierarchy/units/{unit_id} requests."""
        _check_id(unit_id, "unit id")
        try:
            return UnitResponse(data=_unit_item(self._service.find_unit(unit_id)))
        except UnitNotFoundError as e:
            raise _not_found(e) from e
        except Exception as e:
            raise _server_error("get unit", e) from e

    def get_path(self, unit_id: int) -> PathResponse:
        """Handle GET /hierarchy/units/{unit_id}/path requests."""
        _check_id(unit_id, "unit id")
        try:
            path = self._service.path_to_unit(unit_id)
            return PathResponse(unit_id=unit_id, path=[_unit_item(u) for u in path])
        except UnitNotFoundError as e:
            raise _not_found(e) from e
        except Exception as e:
            raise _server_error("get unit path", e) from e

    def get_unit_context(self, unit_id: int) -> UnitContextResponse:
        """Handle GET /hierarchy/units/{unit_id}/context requests."""
        _check_id(unit_id, "unit id")
        try:
            context = self._service.get_unit_context(unit_id)
            return UnitContextResponse(
                unit=_unit_item(context["unit"]),
                ancestors=[_unit_item(u) for u in context["ancestors"]],
                descendants=[_unit_item(u) for u in context["descendants"]],
                children_count=context["children_count"],
                depth_level=context["depth_level"],
                hierarchy_path=context["hierarchy_path"],
            )
        except UnitNotFoundError as e:
            raise _not_found(e) from e
        except Exception as e:
            raise _server_error("get unit context", e) from e

    def publish_change(self, request: HierarchyChangedRequest) -> EventResponse:
        """Handle POST /hierarchy/events requests."""
        event = HierarchyChanged(
            change_type=request.change_type,
            affected_unit_id=request.affected_unit_id,
            affected_unit_ids=tuple(request.affected_unit_ids),
        )
        self._service.publish(event)
        return EventResponse(success=True, event=event.to_dict())

    def get_cache_info(self) -> CacheInfoResponse:
        """Handle GET /cache/info requests."""
        cache = self._service.cache
        return CacheInfoResponse(**cache.info(), default_ttl=cache.default_ttl)

    def clear_cache(self) -> InvalidationResponse:
        """Handle DELETE /cache requests."""
        count = self._service.refresh()
        return InvalidationResponse(
            success=True,
            removed_count=count,
            message="Cache cleared successfully",
        )

    def invalidate_hierarchy(self) -> InvalidationResponse:
        """Handle DELETE /cache/hierarchy requests."""
        count = self._service.cache.invalidate_group()
        return InvalidationResponse(
            success=True,
            removed_count=count,
            message="Hierarchy trees and statistics invalidated",
        )

    def invalidate_unit(self, unit_id: int) -> InvalidationResponse:
        """Handle DELETE /cache/units/{unit_id} requests."""
        _check_id(unit_id, "unit id")
        count = self._service.cache.invalidate_unit(unit_id)
        return InvalidationResponse(
            success=True,
            removed_count=count,
            message=f"Cache entries for unit {unit_id} invalidated",
        )

    def sweep_expired(self) -> InvalidationResponse:
        """Handle POST /cache/sweep requests."""
        count = self._service.cache.sweep_expired()
        return InvalidationResponse(
            success=True,
            removed_count=count,
            message="Expired entries removed",
        )

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = self._service.is_healthy()
        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            source_healthy=is_healthy,
            cache_entries=self._service.cache.info()["total_entries"],
        )
