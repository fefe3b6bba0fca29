#!/usr/bin/env python3
"""
Demo script for the organizational hierarchy cache.

This script builds a sample university hierarchy, queries it, and walks
through the cache lifecycle (read-through, expiry, invalidation by event).
"""

import json
import time

from org_hierarchy import (
    HierarchyCache,
    HierarchyService,
    HierarchyTreeNode,
    StaticHierarchySource,
    UnitMoved,
)
from org_hierarchy.config import configure_logging

SAMPLE_HIERARCHY = {
    "unit": {"id": 1, "name": "Central Campus", "type": "CAMPUS", "hierarchy_path": "Central Campus"},
    "children": [
        {
            "unit": {
                "id": 2,
                "name": "Engineering",
                "type": "FACULTY",
                "parent_id": 1,
                "hierarchy_path": "Central Campus > Engineering",
            },
            "children": [
                {"unit": {"id": 3, "name": "Computer Science", "type": "DEPARTMENT", "parent_id": 2}},
                {"unit": {"id": 4, "name": "Electrical Engineering", "type": "DEPARTMENT", "parent_id": 2}},
                {
                    "unit": {"id": 5, "name": "School of Architecture", "type": "SCHOOL", "parent_id": 2},
                    "children": [
                        {"unit": {"id": 6, "name": "Urban Lab", "type": "CENTER", "parent_id": 5, "is_active": False}},
                    ],
                },
            ],
        },
        {
            "unit": {"id": 7, "name": "Academic Affairs", "type": "DIRECTORATE", "parent_id": 1},
            "children": [
                {"unit": {"id": 8, "name": "Extension Coordination", "type": "COORDINATION", "parent_id": 7}},
            ],
        },
    ],
}


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_tree() -> None:
    """Demonstrate tree queries."""
    print_section("Tree Queries")

    tree = HierarchyTreeNode.build(SAMPLE_HIERARCHY)

    print("\nPre-order units:")
    for unit in tree.to_flat_list():
        print(f"  [{unit.id}] {unit.name} ({unit.type})")

    path = tree.path_to(6)
    print("\nPath to Urban Lab: " + " > ".join(u.name for u in path))

    departments = tree.filter_by_type("DEPARTMENT")
    print("\nFiltered to departments:")
    print(json.dumps([u.name for u in departments.to_flat_list()], indent=2))

    print("\nStatistics:")
    print(json.dumps(tree.statistics().to_dict(), indent=2))


def demo_cache() -> None:
    """Demonstrate cache expiry and invalidation."""
    print_section("Cache Lifecycle")

    cache = HierarchyCache(default_ttl=2)
    service = HierarchyService.create(source=StaticHierarchySource([SAMPLE_HIERARCHY]), cache=cache)

    start = time.time()
    service.get_tree()
    build_ms = (time.time() - start) * 1000

    start = time.time()
    service.get_tree()
    hit_ms = (time.time() - start) * 1000

    print(f"\n  Build: {build_ms:.3f}ms, cached read: {hit_ms:.3f}ms")

    service.get_statistics()
    service.get_unit_context(3)
    print(f"  Keys: {cache.info()['keys']}")

    service.publish(UnitMoved(unit_id=3, unit_name="Computer Science", old_parent_id=2, new_parent_id=7))
    print(f"  After UnitMoved: {cache.info()['keys']}")

    service.get_tree()
    print("\n  Waiting for TTL to elapse...")
    time.sleep(2.1)
    info = cache.info()
    print(f"  Valid: {info['valid_entries']}, expired: {info['expired_entries']}")
    print(f"  Swept: {cache.sweep_expired()}")


def main() -> None:
    configure_logging("WARNING")
    demo_tree()
    demo_cache()


if __name__ == "__main__":
    main()
