"""Default mapping from domain events to cache invalidation."""

import logging
from collections.abc import Iterable

from org_hierarchy.cache import CONTEXT_PREFIX, HierarchyCache
from org_hierarchy.events import EventDispatcher, HierarchyChanged, UnitCreated, UnitMoved

logger = logging.getLogger(__name__)


def register_cache_invalidation(dispatcher: EventDispatcher, cache: HierarchyCache) -> None:
    """Subscribe cache invalidation listeners to hierarchy events.

    Policy:
        - UnitCreated: drop trees/statistics and the parent's entries
        - UnitMoved: drop trees/statistics and entries of the unit and both parents
        - HierarchyChanged: when the change type requires it, drop
          trees/statistics and entries of every affected unit

    Every structural change also drops all unit contexts. A context holds
    the unit's ancestors and descendants, so a change anywhere on that
    chain makes it stale.

    Args:
        dispatcher: Dispatcher the events are published on
        cache: Cache to invalidate
    """

    def invalidate(unit_ids: Iterable[int | None]) -> None:
        cache.invalidate_group()
        cache.invalidate_group(CONTEXT_PREFIX)
        for unit_id in unit_ids:
            if unit_id is not None:
                cache.invalidate_unit(unit_id)

    def on_unit_created(event: UnitCreated) -> None:
        logger.info("Unit %d created, invalidating hierarchy cache", event.unit_id)
        invalidate([event.parent_id])

    def on_unit_moved(event: UnitMoved) -> None:
        logger.info(
            "Unit %d moved from %s to %s, invalidating hierarchy cache",
            event.unit_id,
            event.old_parent_id,
            event.new_parent_id,
        )
        invalidate([event.unit_id, event.old_parent_id, event.new_parent_id])

    def on_hierarchy_changed(event: HierarchyChanged) -> None:
        if not event.requires_cache_invalidation:
            logger.debug("Hierarchy change %r does not affect the cache", event.change_type)
            return
        logger.info(
            "Hierarchy %s for units %s, invalidating hierarchy cache",
            event.change_type,
            list(event.affected_unit_ids),
        )
        invalidate(event.affected_unit_ids)

    dispatcher.add_listener(UnitCreated, on_unit_created)
    dispatcher.add_listener(UnitMoved, on_unit_moved)
    dispatcher.add_listener(HierarchyChanged, on_hierarchy_changed)
