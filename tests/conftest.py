"""
Shared fixtures for the hierarchy tests.
"""

import pytest

from org_hierarchy import HierarchyCache, HierarchyTreeNode


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def unit(unit_id, name, unit_type, parent_id=None, is_active=True, **extra):
    """Build a raw unit mapping."""
    data = {
        "id": unit_id,
        "name": name,
        "type": unit_type,
        "parent_id": parent_id,
        "is_active": is_active,
        "created_at": "2025-07-10 15:30:00",
        "updated_at": "2025-07-11 09:00:00",
    }
    data.update(extra)
    return data


def node(raw_unit, *children):
    return {"unit": raw_unit, "children": list(children)}


@pytest.fixture
def engineering_raw():
    """Engineering faculty with two departments."""
    return node(
        unit(1, "Engineering", "FACULTY", hierarchy_path="Engineering"),
        node(unit(2, "CS", "DEPARTMENT", parent_id=1, hierarchy_path="Engineering > CS")),
        node(unit(3, "EE", "DEPARTMENT", parent_id=1, hierarchy_path="Engineering > EE")),
    )


@pytest.fixture
def campus_raw():
    """Campus with a faculty, a school, a directorate and an inactive department."""
    return node(
        unit(10, "Main Campus", "CAMPUS"),
        node(
            unit(11, "Sciences", "FACULTY", parent_id=10),
            node(unit(12, "Math", "DEPARTMENT", parent_id=11)),
            node(
                unit(13, "Physics", "DEPARTMENT", parent_id=11, is_active=False),
                node(unit(14, "Optics Lab", "CENTER", parent_id=13)),
            ),
        ),
        node(unit(15, "Research", "DIRECTORATE", parent_id=10)),
    )


@pytest.fixture
def engineering_tree(engineering_raw):
    return HierarchyTreeNode.build(engineering_raw)


@pytest.fixture
def campus_tree(campus_raw):
    return HierarchyTreeNode.build(campus_raw)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Fresh cache per test with a controllable clock."""
    return HierarchyCache(default_ttl=3600, unit_match="exact", clock=clock)
