"""Org Hierarchy - Cached organizational unit trees.

This package provides a layered architecture around an in-memory
hierarchy tree and its TTL cache:

Layers:
    - tree / cache: Core structures (HierarchyTreeNode, HierarchyCache)
    - protocols: Interface contracts (HierarchySource)
    - repositories: Data access implementations
    - services: Business logic (read-through caching, invalidation policy)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from org_hierarchy import HierarchyCache, HierarchyTreeNode

    tree = HierarchyTreeNode.build(raw)
    cache = HierarchyCache()
    cache.set_hierarchy_tree(tree, root_id=tree.unit.id)
    ```

For HTTP API:
    ```python
    from org_hierarchy.api.app import app
    ```
"""

from org_hierarchy.cache import HierarchyCache
from org_hierarchy.config import settings
from org_hierarchy.entities import CacheEntry, TreeStatistics, UnitSnapshot, UnitType
from org_hierarchy.events import EventDispatcher, HierarchyChanged, UnitCreated, UnitMoved
from org_hierarchy.exceptions import HierarchyError, MalformedInputError, UnitNotFoundError
from org_hierarchy.protocols import HierarchySource
from org_hierarchy.repositories import StaticHierarchySource
from org_hierarchy.services import HierarchyService
from org_hierarchy.tree import HierarchyTreeNode, build_forest

__all__ = [
    # Configuration
    "settings",
    # Core
    "HierarchyTreeNode",
    "build_forest",
    "HierarchyCache",
    # Protocols (interfaces)
    "HierarchySource",
    # Services (business logic)
    "HierarchyService",
    # Repositories (data access)
    "StaticHierarchySource",
    # Entities (domain models)
    "CacheEntry",
    "TreeStatistics",
    "UnitSnapshot",
    "UnitType",
    # Events
    "EventDispatcher",
    "HierarchyChanged",
    "UnitCreated",
    "UnitMoved",
    # Errors
    "HierarchyError",
    "MalformedInputError",
    "UnitNotFoundError",
]
