"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Source / Cache
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from org_hierarchy.services import HierarchyService

    service = HierarchyService.create(source=source)
    ```
"""

from .hierarchy_service import VIRTUAL_ROOT_ID, VIRTUAL_ROOT_TYPE, HierarchyService
from .invalidation import register_cache_invalidation

__all__ = [
    "HierarchyService",
    "register_cache_invalidation",
    "VIRTUAL_ROOT_ID",
    "VIRTUAL_ROOT_TYPE",
]
