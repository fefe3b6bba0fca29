"""Process-local TTL cache for hierarchy trees, statistics and unit contexts."""

import logging
import sys
import threading
import time
from collections.abc import Callable
from typing import Any

from org_hierarchy.config import UNIT_MATCH_MODES, settings
from org_hierarchy.entities import CacheEntry, TreeStatistics
from org_hierarchy.tree import HierarchyTreeNode

logger = logging.getLogger(__name__)

TREE_PREFIX = "hierarchy_tree"
STATS_PREFIX = "hierarchy_stats"
CONTEXT_PREFIX = "unit_context"

# Group boundary shared by the tree and statistics prefixes
HIERARCHY_GROUP = "hierarchy_"


def make_key(prefix: str, scope_id: int | None = None) -> str:
    """Build a cache key: ``prefix`` for global entries, ``prefix_{id}`` otherwise."""
    return prefix if scope_id is None else f"{prefix}_{scope_id}"


class HierarchyCache:
    """TTL cache keyed by prefix plus an optional unit id.

    Instances are created and owned explicitly; there is no module-level
    singleton, so each test can use a fresh cache. Values are stored as-is,
    callers must treat what they get back as read-only.

    Example:
        ```python
        cache = HierarchyCache(default_ttl=600)
        cache.set_hierarchy_tree(tree, root_id=1)
        cache.get_hierarchy_tree(1)   # tree
        cache.invalidate_unit(1)
        cache.get_hierarchy_tree(1)   # None
        ```
    """

    def __init__(
        self,
        default_ttl: int | None = None,
        unit_match: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl: Time-to-live for entries in seconds. Defaults to settings.
            unit_match: "exact" or "loose" key matching for ``invalidate_unit``.
                Defaults to settings.
            clock: Returns the current Unix time; injectable for tests.
        """
        self._default_ttl = settings.cache_ttl if default_ttl is None else default_ttl
        if self._default_ttl <= 0:
            raise ValueError(f"default_ttl must be a positive number of seconds, got {self._default_ttl}")
        self._unit_match = unit_match or settings.cache_unit_match
        if self._unit_match not in UNIT_MATCH_MODES:
            raise ValueError(f"unit_match must be 'exact' or 'loose', got {self._unit_match!r}")
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    # Trees

    def get_hierarchy_tree(self, root_id: int | None = None) -> HierarchyTreeNode | None:
        """Get a cached tree (None on miss or expiry)."""
        return self._get(make_key(TREE_PREFIX, root_id))

    def set_hierarchy_tree(
        self,
        tree: HierarchyTreeNode,
        root_id: int | None = None,
        ttl: int | None = None,
    ) -> None:
        """Cache a tree under ``hierarchy_tree[_{root_id}]``."""
        self._set(make_key(TREE_PREFIX, root_id), tree, ttl)

    # Statistics

    def get_statistics(self, scope_id: int | None = None) -> TreeStatistics | None:
        """Get cached statistics (None on miss or expiry)."""
        return self._get(make_key(STATS_PREFIX, scope_id))

    def set_statistics(
        self,
        stats: TreeStatistics,
        scope_id: int | None = None,
        ttl: int | None = None,
    ) -> None:
        """Cache statistics under ``hierarchy_stats[_{scope_id}]``."""
        self._set(make_key(STATS_PREFIX, scope_id), stats, ttl)

    # Unit contexts

    def get_unit_context(self, unit_id: int) -> dict[str, Any] | None:
        """Get a cached unit context (None on miss or expiry)."""
        return self._get(make_key(CONTEXT_PREFIX, unit_id))

    def set_unit_context(self, unit_id: int, context: dict[str, Any], ttl: int | None = None) -> None:
        """Cache a unit context under ``unit_context_{unit_id}``."""
        self._set(make_key(CONTEXT_PREFIX, unit_id), context, ttl)

    # Invalidation

    def invalidate_group(self, prefix: str = HIERARCHY_GROUP) -> int:
        """Remove every entry whose key starts with ``prefix``.

        With the default prefix this drops all trees and statistics but
        leaves unit contexts in place.

        Returns:
            Number of entries removed
        """
        return self._remove_where(lambda key: key.startswith(prefix), f"group {prefix!r}")

    def invalidate_unit(self, unit_id: int) -> int:
        """Remove every entry scoped to ``unit_id``.

        In "exact" mode a key matches when its last ``_`` segment is the id,
        so unit 1 does not touch ``unit_context_12``. "loose" mode keeps the
        legacy substring test on ``_{unit_id}``, which does.

        Returns:
            Number of entries removed
        """
        if self._unit_match == "loose":
            needle = f"_{unit_id}"
            return self._remove_where(lambda key: needle in key, f"unit {unit_id}")

        target = str(unit_id)
        return self._remove_where(
            lambda key: "_" in key and key.rsplit("_", 1)[1] == target,
            f"unit {unit_id}",
        )

    def invalidate_all(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("Cache cleared: %d entries removed", count)
        return count

    def sweep_expired(self) -> int:
        """Remove every expired entry regardless of key.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if not entry.is_valid(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        return len(expired)

    def info(self) -> dict[str, Any]:
        """Get a diagnostic snapshot of the cache.

        Returns:
            Dictionary with total/valid/expired counts, a rough memory
            estimate in bytes and the current keys
        """
        now = self._clock()
        with self._lock:
            entries = dict(self._entries)

        valid = sum(1 for entry in entries.values() if entry.is_valid(now))
        memory = sum(sys.getsizeof(key) + sys.getsizeof(entry.value) for key, entry in entries.items())

        return {
            "total_entries": len(entries),
            "valid_entries": valid,
            "expired_entries": len(entries) - valid,
            "memory_estimate": memory,
            "keys": sorted(entries),
        }

    @property
    def default_ttl(self) -> int:
        """Get the default entry TTL in seconds."""
        return self._default_ttl

    @property
    def unit_match(self) -> str:
        """Get the unit invalidation matching mode."""
        return self._unit_match

    def _get(self, key: str) -> Any:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not entry.is_valid(now):
            logger.debug("Cache miss: %s", key)
            return None
        logger.debug("Cache hit: %s", key)
        return entry.value

    def _set(self, key: str, value: Any, ttl: int | None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        entry = CacheEntry(value=value, expires_at=self._clock() + ttl)
        with self._lock:
            self._entries[key] = entry

    def _remove_where(self, predicate: Callable[[str], bool], label: str) -> int:
        with self._lock:
            keys = [key for key in self._entries if predicate(key)]
            for key in keys:
                del self._entries[key]
        logger.debug("Invalidated %s: %d entries removed", label, len(keys))
        return len(keys)
