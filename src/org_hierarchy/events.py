"""Domain events for hierarchy changes and a simple in-process dispatcher.

Events are raised by whatever manages units (outside this package); the
dispatcher fans them out to listeners such as the cache invalidation
policy in ``org_hierarchy.services.invalidation``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from org_hierarchy.entities import format_timestamp

logger = logging.getLogger(__name__)

CACHE_INVALIDATING_CHANGES = frozenset({"created", "moved", "updated", "deleted"})


@dataclass(frozen=True)
class UnitCreated:
    """A unit was created."""

    unit_id: int
    unit_name: str
    unit_type: str
    parent_id: int | None = None
    occurred_on: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "unit_name": self.unit_name,
            "unit_type": self.unit_type,
            "parent_id": self.parent_id,
            "occurred_on": format_timestamp(self.occurred_on),
        }


@dataclass(frozen=True)
class UnitMoved:
    """A unit was moved under a different parent."""

    unit_id: int
    unit_name: str
    old_parent_id: int | None
    new_parent_id: int | None
    occurred_on: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "unit_name": self.unit_name,
            "old_parent_id": self.old_parent_id,
            "new_parent_id": self.new_parent_id,
            "occurred_on": format_timestamp(self.occurred_on),
        }


@dataclass(frozen=True)
class HierarchyChanged:
    """Generic structural change affecting one or more units.

    Attributes:
        change_type: One of "created", "moved", "updated", "deleted" (or a custom label)
        affected_unit_id: The unit the change originated from
        affected_unit_ids: Every affected unit; always starts with
            ``affected_unit_id`` and holds no duplicates
        occurred_on: When the change happened
    """

    change_type: str
    affected_unit_id: int
    affected_unit_ids: tuple[int, ...] = ()
    occurred_on: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        ids = dict.fromkeys([self.affected_unit_id, *self.affected_unit_ids])
        object.__setattr__(self, "affected_unit_ids", tuple(ids))

    @property
    def requires_cache_invalidation(self) -> bool:
        return self.change_type in CACHE_INVALIDATING_CHANGES

    def to_dict(self) -> dict[str, Any]:
        return {
            "change_type": self.change_type,
            "affected_unit_id": self.affected_unit_id,
            "affected_unit_ids": list(self.affected_unit_ids),
            "requires_cache_invalidation": self.requires_cache_invalidation,
            "occurred_on": format_timestamp(self.occurred_on),
        }


Listener = Callable[[Any], None]


class EventDispatcher:
    """Synchronous event dispatcher keyed by exact event class.

    A listener that raises is logged and skipped; the remaining listeners
    still run.

    Example:
        ```python
        dispatcher = EventDispatcher()
        dispatcher.add_listener(UnitCreated, lambda e: print(e.unit_name))
        dispatcher.dispatch(UnitCreated(unit_id=5, unit_name="CS", unit_type="DEPARTMENT"))
        ```
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = {}

    def add_listener(self, event_type: type, listener: Listener) -> None:
        """Register ``listener`` for events of exactly ``event_type``."""
        self._listeners.setdefault(event_type, []).append(listener)

    def dispatch(self, event: Any) -> None:
        """Call every listener registered for the event's class, in order."""
        for listener in self._listeners.get(type(event), []):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed for %s", listener, type(event).__name__)

    def get_listeners(self, event_type: type) -> list[Listener]:
        return list(self._listeners.get(event_type, []))

    def remove_listeners(self, event_type: type) -> None:
        self._listeners.pop(event_type, None)

    def clear_listeners(self) -> None:
        self._listeners.clear()
