"""
Tests for the read-through hierarchy service.
"""

import json

import pytest

from org_hierarchy import (
    HierarchyService,
    MalformedInputError,
    StaticHierarchySource,
    UnitCreated,
    UnitMoved,
    UnitNotFoundError,
)
from org_hierarchy.services import VIRTUAL_ROOT_ID, VIRTUAL_ROOT_TYPE
from tests.conftest import node, unit


def ids(units):
    return [u.id for u in units]


class CountingSource(StaticHierarchySource):
    """Static source that records how often it is loaded."""

    def __init__(self, roots):
        super().__init__(roots=roots)
        self.loads = 0

    def load_roots(self):
        self.loads += 1
        return super().load_roots()


@pytest.fixture
def source(campus_raw):
    return CountingSource([campus_raw])


@pytest.fixture
def service(source, cache):
    return HierarchyService.create(source=source, cache=cache)


def test_get_tree_reads_through_cache(service, source):
    """Test the second read is served from the cache."""
    first = service.get_tree()
    second = service.get_tree()

    assert first is second
    assert first.unit.id == 10
    assert source.loads == 1


def test_get_tree_rebuilds_after_expiry(service, source, clock):
    service.get_tree()
    clock.advance(3600)
    service.get_tree()

    assert source.loads == 2


def test_get_subtree(service):
    subtree = service.get_tree(11)

    assert subtree.unit.name == "Sciences"
    assert service.cache.get_hierarchy_tree(11) is subtree


def test_get_subtree_unknown_root(service):
    with pytest.raises(UnitNotFoundError) as exc_info:
        service.get_tree(99)
    assert exc_info.value.unit_id == 99


def test_multiple_roots_get_virtual_root(cache, engineering_raw, campus_raw):
    service = HierarchyService.create(
        source=StaticHierarchySource([engineering_raw, campus_raw]),
        cache=cache,
    )
    tree = service.get_tree()

    assert tree.unit.id == VIRTUAL_ROOT_ID
    assert tree.unit.type == VIRTUAL_ROOT_TYPE
    assert [c.unit.id for c in tree.children] == [1, 10]


def test_statistics_exclude_virtual_root(cache, engineering_raw, campus_raw):
    service = HierarchyService.create(
        source=StaticHierarchySource([engineering_raw, campus_raw]),
        cache=cache,
    )
    stats = service.get_statistics()

    assert stats.total_units == 9
    assert stats.max_depth == 4
    assert "SYSTEM" not in stats.by_type
    assert [u.id for u in service.flatten()] == [1, 2, 3, 10, 11, 12, 13, 14, 15]


def test_empty_hierarchy_gets_childless_virtual_root(cache):
    service = HierarchyService.create(source=StaticHierarchySource(), cache=cache)

    tree = service.get_tree()
    assert tree.unit.id == VIRTUAL_ROOT_ID
    assert tree.children == []
    assert service.get_statistics().total_units == 0


def test_statistics_are_cached(service, source):
    stats = service.get_statistics()

    assert stats.total_units == 6
    assert service.get_statistics() is stats
    assert service.cache.get_statistics() is stats
    assert source.loads == 1


def test_unit_context(service):
    context = service.get_unit_context(13)

    assert context["unit"].name == "Physics"
    assert [u.id for u in context["ancestors"]] == [10, 11]
    assert [u.id for u in context["descendants"]] == [14]
    assert context["children_count"] == 1
    assert service.cache.get_unit_context(13) is context


def test_unit_context_unknown_unit(service):
    with pytest.raises(UnitNotFoundError):
        service.get_unit_context(404)


def test_find_unit_and_path(service):
    assert service.find_unit(15).name == "Research"
    assert [u.id for u in service.path_to_unit(14)] == [10, 11, 13, 14]
    assert [u.id for u in service.path_to_unit(14, root_id=11)] == [11, 13, 14]

    with pytest.raises(UnitNotFoundError):
        service.find_unit(404)
    with pytest.raises(UnitNotFoundError):
        service.path_to_unit(15, root_id=11)


def test_filter_by_type(service):
    filtered = service.filter_by_type("DEPARTMENT")

    assert [u.id for u in filtered.to_flat_list()] == [10, 11, 12, 13]
    assert service.filter_by_type("INSTITUTE") is None


def test_publish_invalidates_cache(service, source):
    service.get_tree()
    service.get_statistics()

    service.publish(UnitCreated(unit_id=16, unit_name="Biology", unit_type="DEPARTMENT", parent_id=11))
    service.get_tree()

    assert source.loads == 2


def test_refresh_clears_everything(service, source):
    service.get_tree()
    service.get_unit_context(12)

    assert service.refresh() == 2
    service.get_tree()
    assert source.loads == 2


def test_malformed_source_data_propagates(cache):
    service = HierarchyService.create(
        source=StaticHierarchySource([{"children": []}]),
        cache=cache,
    )

    with pytest.raises(MalformedInputError):
        service.get_tree()
    assert cache.info()["total_entries"] == 0


def test_static_source_from_json_file(tmp_path, engineering_raw):
    path = tmp_path / "hierarchy.json"
    path.write_text(json.dumps(engineering_raw), encoding="utf-8")

    source = StaticHierarchySource.from_json_file(path)

    assert source.load_roots() == [engineering_raw]
    assert source.health_check()


def test_static_source_rejects_scalar_json(tmp_path):
    path = tmp_path / "hierarchy.json"
    path.write_text("42", encoding="utf-8")

    with pytest.raises(ValueError):
        StaticHierarchySource.from_json_file(path)


def test_static_source_returns_copies(engineering_raw):
    source = StaticHierarchySource([engineering_raw])
    source.load_roots()[0]["unit"]["name"] = "Changed"

    assert source.load_roots()[0]["unit"]["name"] == "Engineering"


def test_static_source_replace_roots(cache, engineering_raw):
    source = StaticHierarchySource([engineering_raw])
    service = HierarchyService.create(source=source, cache=cache)
    assert service.get_tree().unit.id == 1

    source.replace_roots([node(unit(50, "Law", "FACULTY"))])
    service.refresh()

    assert service.get_tree().unit.id == 50


def test_move_refreshes_descendant_contexts(cache):
    """Test a moved unit's descendants get their new ancestor chain."""
    source = StaticHierarchySource([
        node(
            unit(1, "Campus", "CAMPUS"),
            node(unit(2, "Sciences", "FACULTY", parent_id=1), node(unit(4, "Math", "DEPARTMENT", parent_id=2))),
            node(unit(3, "Research", "DIRECTORATE", parent_id=1)),
        )
    ])
    service = HierarchyService.create(source=source, cache=cache)
    assert ids(service.get_unit_context(4)["ancestors"]) == [1, 2]

    source.replace_roots([
        node(
            unit(1, "Campus", "CAMPUS"),
            node(
                unit(3, "Research", "DIRECTORATE", parent_id=1),
                node(unit(2, "Sciences", "FACULTY", parent_id=3), node(unit(4, "Math", "DEPARTMENT", parent_id=2))),
            ),
        )
    ])
    service.publish(UnitMoved(unit_id=2, unit_name="Sciences", old_parent_id=1, new_parent_id=3))

    assert ids(service.get_unit_context(4)["ancestors"]) == [1, 3, 2]


def test_create_refreshes_ancestor_contexts(cache):
    """Test a new grandchild shows up in the grandparent's descendants."""
    source = StaticHierarchySource([
        node(unit(1, "Campus", "CAMPUS"), node(unit(2, "Sciences", "FACULTY", parent_id=1)))
    ])
    service = HierarchyService.create(source=source, cache=cache)
    assert ids(service.get_unit_context(1)["descendants"]) == [2]

    source.replace_roots([
        node(
            unit(1, "Campus", "CAMPUS"),
            node(unit(2, "Sciences", "FACULTY", parent_id=1), node(unit(5, "Math", "DEPARTMENT", parent_id=2))),
        )
    ])
    service.publish(UnitCreated(unit_id=5, unit_name="Math", unit_type="DEPARTMENT", parent_id=2))

    assert ids(service.get_unit_context(1)["descendants"]) == [2, 5]
