"""Hierarchy service for core business logic.

This service orchestrates read-through caching by coordinating the
hierarchy source (raw data), the tree (structure and queries) and the
cache (memoized results).
"""

import logging
from typing import Any

from org_hierarchy.cache import HierarchyCache
from org_hierarchy.entities import TreeStatistics, UnitSnapshot
from org_hierarchy.events import EventDispatcher
from org_hierarchy.exceptions import UnitNotFoundError
from org_hierarchy.protocols import HierarchySource
from org_hierarchy.tree import HierarchyTreeNode, build_forest

from .invalidation import register_cache_invalidation

logger = logging.getLogger(__name__)

VIRTUAL_ROOT_ID = 0
VIRTUAL_ROOT_NAME = "System"
VIRTUAL_ROOT_TYPE = "SYSTEM"


class HierarchyService:
    """Read-through access to the organizational hierarchy.

    Every read checks the cache first and falls back to rebuilding from
    the source on a miss or expiry. Events published through ``publish``
    invalidate the affected cache entries.

    Example:
        ```python
        from org_hierarchy.repositories import StaticHierarchySource
        from org_hierarchy.services import HierarchyService

        service = HierarchyService.create(source=StaticHierarchySource(roots=[...]))
        tree = service.get_tree()
        stats = service.get_statistics()
        ```
    """

    def __init__(
        self,
        source: HierarchySource,
        cache: HierarchyCache,
        dispatcher: EventDispatcher | None = None,
        max_depth: int | None = None,
    ) -> None:
        """Initialize the hierarchy service.

        Args:
            source: Provider of raw nested hierarchy data (required).
            cache: Cache for trees, statistics and contexts (required).
            dispatcher: Event dispatcher. Cache invalidation listeners are
                registered on it. Defaults to a new dispatcher.
            max_depth: Maximum tree nesting depth. Defaults to settings.
        """
        self._source = source
        self._cache = cache
        self._dispatcher = dispatcher or EventDispatcher()
        self._max_depth = max_depth
        register_cache_invalidation(self._dispatcher, self._cache)

    @classmethod
    def create(
        cls,
        source: HierarchySource,
        cache: HierarchyCache | None = None,
        dispatcher: EventDispatcher | None = None,
        max_depth: int | None = None,
    ) -> "HierarchyService":
        """Factory method to create HierarchyService with sensible defaults.

        Args:
            source: Provider of raw hierarchy data (required).
            cache: Cache instance. If None, creates one from settings.
            dispatcher: Event dispatcher. If None, creates a new one.
            max_depth: Maximum tree nesting depth. If None, uses settings.

        Returns:
            Configured HierarchyService instance
        """
        return cls(
            source=source,
            cache=cache or HierarchyCache(),
            dispatcher=dispatcher,
            max_depth=max_depth,
        )

    def get_tree(self, root_id: int | None = None) -> HierarchyTreeNode:
        """Get the hierarchy tree, or the subtree rooted at ``root_id``.

        Without ``root_id`` a single root is returned as-is, several roots
        are grouped under a virtual "System" node, and an empty hierarchy
        yields a childless virtual node.

        Raises:
            UnitNotFoundError: If ``root_id`` is not in the hierarchy
            MalformedInputError: If the source returns malformed data
        """
        tree = self._cache.get_hierarchy_tree(root_id)
        if tree is not None:
            return tree

        tree = self._build_tree(root_id)
        self._cache.set_hierarchy_tree(tree, root_id)
        return tree

    def get_statistics(self, root_id: int | None = None) -> TreeStatistics:
        """Get statistics for the hierarchy or the subtree at ``root_id``.

        The virtual "System" root, when present, is not counted.
        """
        stats = self._cache.get_statistics(root_id)
        if stats is not None:
            return stats

        tree = self.get_tree(root_id)
        if _is_virtual(tree.unit):
            stats = _combine([child.statistics() for child in tree.children])
        else:
            stats = tree.statistics()

        self._cache.set_statistics(stats, root_id)
        return stats

    def get_unit_context(self, unit_id: int) -> dict[str, Any]:
        """Get the unit with its ancestors and descendants.

        Returns:
            Dictionary with ``unit``, ``ancestors`` (root first), ``descendants``
            (pre-order), ``children_count`` (number of descendants),
            ``depth_level`` and ``hierarchy_path``

        Raises:
            UnitNotFoundError: If ``unit_id`` is not in the hierarchy
        """
        context = self._cache.get_unit_context(unit_id)
        if context is not None:
            return context

        tree = self.get_tree()
        path = tree.path_to(unit_id)
        if path is None or _is_virtual(path[-1]):
            raise UnitNotFoundError(unit_id)

        node = tree.find_node(unit_id)
        unit = path[-1]
        descendants = node.to_flat_list()[1:]

        context = {
            "unit": unit,
            "ancestors": [u for u in path[:-1] if not _is_virtual(u)],
            "descendants": descendants,
            "children_count": len(descendants),
            "depth_level": unit.depth_level,
            "hierarchy_path": unit.hierarchy_path,
        }
        self._cache.set_unit_context(unit_id, context)
        return context

    def find_unit(self, unit_id: int) -> UnitSnapshot:
        """Find a unit anywhere in the hierarchy.

        Raises:
            UnitNotFoundError: If ``unit_id`` is not in the hierarchy
        """
        unit = self.get_tree().find_by_id(unit_id)
        if unit is None or _is_virtual(unit):
            raise UnitNotFoundError(unit_id)
        return unit

    def path_to_unit(self, unit_id: int, root_id: int | None = None) -> list[UnitSnapshot]:
        """Get the units from the root (or ``root_id``) down to ``unit_id``.

        Raises:
            UnitNotFoundError: If either unit is not in the hierarchy
        """
        path = self.get_tree(root_id).path_to(unit_id)
        if path is None or _is_virtual(path[-1]):
            raise UnitNotFoundError(unit_id)
        return [u for u in path if not _is_virtual(u)]

    def flatten(self, root_id: int | None = None) -> list[UnitSnapshot]:
        """Get every unit in pre-order."""
        return [u for u in self.get_tree(root_id).to_flat_list() if not _is_virtual(u)]

    def filter_by_type(self, unit_type: str, root_id: int | None = None) -> HierarchyTreeNode | None:
        """Get the tree pruned to ``unit_type`` units and their ancestors.

        Returns:
            The filtered tree, or None when no unit has that type
        """
        return self.get_tree(root_id).filter_by_type(unit_type)

    def publish(self, event: Any) -> None:
        """Dispatch a domain event (and the cache invalidation it triggers)."""
        self._dispatcher.dispatch(event)

    def refresh(self) -> int:
        """Drop every cached entry so the next read rebuilds from the source.

        Returns:
            Number of entries removed
        """
        return self._cache.invalidate_all()

    def is_healthy(self) -> bool:
        return self._source.health_check()

    @property
    def cache(self) -> HierarchyCache:
        """Get the underlying cache (for testing and diagnostics)."""
        return self._cache

    @property
    def dispatcher(self) -> EventDispatcher:
        """Get the event dispatcher."""
        return self._dispatcher

    def _build_tree(self, root_id: int | None) -> HierarchyTreeNode:
        roots = build_forest(self._source.load_roots(), self._max_depth)
        logger.info("Rebuilt hierarchy from source: %d root(s)", len(roots))

        if root_id is not None:
            for root in roots:
                node = root.find_node(root_id)
                if node is not None:
                    return node
            raise UnitNotFoundError(root_id)

        if len(roots) == 1:
            return roots[0]

        return HierarchyTreeNode(
            unit=UnitSnapshot(
                id=VIRTUAL_ROOT_ID,
                name=VIRTUAL_ROOT_NAME,
                type=VIRTUAL_ROOT_TYPE,
                hierarchy_path=f"/{VIRTUAL_ROOT_ID}",
                children_count=len(roots),
            ),
            children=roots,
        )


def _is_virtual(unit: UnitSnapshot) -> bool:
    return unit.id == VIRTUAL_ROOT_ID and unit.type == VIRTUAL_ROOT_TYPE


def _combine(stats: list[TreeStatistics]) -> TreeStatistics:
    by_type: dict[str, int] = {}
    for item in stats:
        for unit_type, count in item.by_type.items():
            by_type[unit_type] = by_type.get(unit_type, 0) + count

    return TreeStatistics(
        total_units=sum(s.total_units for s in stats),
        active_units=sum(s.active_units for s in stats),
        max_depth=max((s.max_depth for s in stats), default=0),
        by_type=by_type,
    )
