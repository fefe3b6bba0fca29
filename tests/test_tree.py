"""
Tests for the hierarchy tree.
"""

from datetime import datetime

import pytest

from org_hierarchy import HierarchyTreeNode, MalformedInputError, UnitSnapshot, build_forest
from tests.conftest import node, unit


def ids(units):
    return [u.id for u in units]


def test_build_engineering(engineering_tree):
    """Test building a small tree keeps order and fields."""
    assert engineering_tree.unit.name == "Engineering"
    assert engineering_tree.children_count == 2
    assert [c.unit.name for c in engineering_tree.children] == ["CS", "EE"]
    assert engineering_tree.unit.created_at == datetime(2025, 7, 10, 15, 30, 0)
    assert not engineering_tree.children[0].has_children()


def test_build_derives_classification_flags(engineering_tree):
    """Test known unit types set the academic/teaching flags."""
    assert engineering_tree.unit.is_academic_unit
    assert not engineering_tree.unit.is_teaching_unit
    assert engineering_tree.children[0].unit.is_teaching_unit


def test_build_accepts_missing_children():
    tree = HierarchyTreeNode.build({"unit": {"id": 7, "name": "Solo", "type": "CENTER"}})
    assert tree.children == []

    tree = HierarchyTreeNode.build({"unit": {"id": 7, "name": "Solo", "type": "CENTER"}, "children": None})
    assert tree.children == []


@pytest.mark.parametrize(
    "raw",
    [
        {"children": []},
        {"unit": "Engineering", "children": []},
        {"unit": {"name": "No id", "type": "FACULTY"}},
        {"unit": {"id": "1", "name": "Bad id", "type": "FACULTY"}},
        {"unit": {"id": 1, "type": "FACULTY"}},
        {"unit": {"id": 1, "name": "No type"}},
        {"unit": {"id": 1, "name": "Bad children", "type": "FACULTY"}, "children": "nope"},
        {"unit": {"id": 1, "name": "Bad child", "type": "FACULTY"}, "children": [42]},
        {"unit": {"id": 1, "name": "Bad date", "type": "FACULTY", "created_at": "yesterday"}},
        {"unit": {"id": 1, "name": "Bad depth", "type": "FACULTY", "depth_level": "abc"}},
        {"unit": {"id": 1, "name": "Bad depth", "type": "FACULTY", "depth_level": {"level": 2}}},
        {"unit": {"id": 1, "name": "Bad count", "type": "FACULTY", "children_count": []}},
        {"unit": {"id": 1, "name": "Bad parent", "type": "FACULTY", "parent_id": "7"}},
        {"unit": {"id": 1, "name": "Bad parent name", "type": "FACULTY", "parent_name": 7}},
        {"unit": {"id": 1, "name": "Bad flag", "type": "FACULTY", "is_active": "false"}},
        {"unit": {"id": 1, "name": "Bad flag", "type": "FACULTY", "is_teaching_unit": 1}},
    ],
)
def test_build_rejects_malformed_input(raw):
    with pytest.raises(MalformedInputError):
        HierarchyTreeNode.build(raw)


def test_build_rejects_non_mapping():
    with pytest.raises(MalformedInputError):
        HierarchyTreeNode.build([1, 2, 3])


def test_build_error_reports_location():
    raw = node(unit(1, "Root", "FACULTY"), node(unit(2, "Ok", "DEPARTMENT")), {"children": []})
    with pytest.raises(MalformedInputError) as exc_info:
        HierarchyTreeNode.build(raw)
    assert exc_info.value.path == "$.children[1]"


def test_build_rejects_duplicate_ids():
    """Test the same unit id in two branches is rejected."""
    raw = node(
        unit(1, "Root", "FACULTY"),
        node(unit(2, "A", "DEPARTMENT"), node(unit(4, "Shared", "CENTER"))),
        node(unit(3, "B", "DEPARTMENT"), node(unit(4, "Shared", "CENTER"))),
    )
    with pytest.raises(MalformedInputError, match="more than once"):
        HierarchyTreeNode.build(raw)


def test_build_enforces_max_depth():
    raw = node(unit(1, "L1", "CAMPUS"), node(unit(2, "L2", "FACULTY"), node(unit(3, "L3", "DEPARTMENT"))))

    assert HierarchyTreeNode.build(raw, max_depth=3).statistics().max_depth == 3
    with pytest.raises(MalformedInputError, match="deeper than 2"):
        HierarchyTreeNode.build(raw, max_depth=2)


def test_build_error_reports_unit_field_location():
    raw = node(unit(1, "Root", "FACULTY"), node(unit(2, "Lab", "CENTER", depth_level="abc")))
    with pytest.raises(MalformedInputError, match="depth_level") as exc_info:
        HierarchyTreeNode.build(raw)
    assert exc_info.value.path == "$.children[0].unit"


def test_build_rejects_non_positive_max_depth(engineering_raw):
    with pytest.raises(ValueError):
        HierarchyTreeNode.build(engineering_raw, max_depth=0)
    with pytest.raises(ValueError):
        build_forest([engineering_raw], max_depth=0)


def test_build_forest_checks_ids_across_roots():
    first = node(unit(1, "A", "FACULTY"))
    second = node(unit(2, "B", "FACULTY"))

    roots = build_forest([first, second])
    assert [r.unit.id for r in roots] == [1, 2]

    with pytest.raises(MalformedInputError):
        build_forest([first, node(unit(1, "A again", "FACULTY"))])


def test_to_nested_uses_snake_case_and_formatted_timestamps(engineering_tree):
    nested = engineering_tree.to_nested()

    assert set(nested) == {"unit", "children"}
    assert nested["unit"]["created_at"] == "2025-07-10 15:30:00"
    assert nested["unit"]["hierarchy_path"] == "Engineering"
    assert nested["children"][1]["unit"]["parent_id"] == 1
    assert nested["children"][1]["children"] == []


def test_round_trip_preserves_flat_list(campus_tree):
    """Test build(to_nested(tree)) yields the same flat list."""
    rebuilt = HierarchyTreeNode.build(campus_tree.to_nested())

    assert rebuilt.to_flat_list() == campus_tree.to_flat_list()
    assert rebuilt.to_nested() == campus_tree.to_nested()


def test_flat_list_is_pre_order(campus_tree):
    assert ids(campus_tree.to_flat_list()) == [10, 11, 12, 13, 14, 15]


def test_find_by_id(campus_tree):
    assert campus_tree.find_by_id(14).name == "Optics Lab"
    assert campus_tree.find_by_id(10) is campus_tree.unit
    assert campus_tree.find_by_id(99) is None


def test_find_by_id_matches_flat_list(campus_tree):
    flat_ids = set(ids(campus_tree.to_flat_list()))
    for unit_id in range(0, 20):
        assert (campus_tree.find_by_id(unit_id) is not None) == (unit_id in flat_ids)


def test_find_node_returns_subtree(campus_tree):
    subtree = campus_tree.find_node(11)
    assert ids(subtree.to_flat_list()) == [11, 12, 13, 14]


def test_path_to(campus_tree):
    assert ids(campus_tree.path_to(14)) == [10, 11, 13, 14]
    assert ids(campus_tree.path_to(10)) == [10]
    assert campus_tree.path_to(99) is None


def test_path_starts_at_root_and_ends_at_target(campus_tree):
    for u in campus_tree.to_flat_list():
        path = campus_tree.path_to(u.id)
        assert path[0].id == campus_tree.unit.id
        assert path[-1].id == u.id


def test_filter_by_type_keeps_ancestors(engineering_tree):
    """Test filtering to departments keeps the faculty as their parent."""
    filtered = engineering_tree.filter_by_type("DEPARTMENT")

    assert filtered.unit.name == "Engineering"
    assert len(filtered.children) == 2
    assert all(c.unit.type == "DEPARTMENT" for c in filtered.children)


def test_filter_by_type_prunes_unrelated_branches(campus_tree):
    filtered = campus_tree.filter_by_type("CENTER")

    assert ids(filtered.to_flat_list()) == [10, 11, 13, 14]
    # Original tree is untouched
    assert ids(campus_tree.to_flat_list()) == [10, 11, 12, 13, 14, 15]


def test_filter_by_type_without_match(campus_tree):
    assert campus_tree.filter_by_type("INSTITUTE") is None


def test_statistics_engineering(engineering_tree):
    stats = engineering_tree.statistics()

    assert stats.to_dict() == {
        "total_units": 3,
        "active_units": 3,
        "max_depth": 2,
        "by_type": {"FACULTY": 1, "DEPARTMENT": 2},
    }


def test_statistics_single_node():
    tree = HierarchyTreeNode(unit=UnitSnapshot(id=1, name="Lone", type="CENTER", is_active=False))
    stats = tree.statistics()

    assert stats.total_units == 1
    assert stats.active_units == 0
    assert stats.max_depth == 1
    assert stats.by_type == {"CENTER": 1}


def test_statistics_invariants(campus_tree):
    stats = campus_tree.statistics()
    flat = campus_tree.to_flat_list()

    assert stats.total_units == len(flat)
    assert stats.active_units == 5
    assert stats.active_units <= stats.total_units
    assert stats.max_depth == 4
    assert sum(stats.by_type.values()) == stats.total_units
    assert len(stats.by_type) == len({u.type for u in flat})


def test_add_child_appends():
    root = HierarchyTreeNode(unit=UnitSnapshot(id=1, name="Root", type="FACULTY"))
    root.add_child(HierarchyTreeNode(unit=UnitSnapshot(id=2, name="A", type="DEPARTMENT")))
    root.add_child(HierarchyTreeNode(unit=UnitSnapshot(id=3, name="B", type="DEPARTMENT")))

    assert root.has_children()
    assert ids(root.to_flat_list()) == [1, 2, 3]


def test_round_trip_normalizes_iso_timestamps():
    """Test ISO timestamps with fractions and offsets survive a round trip."""
    raw = node(
        unit(
            1,
            "Root",
            "FACULTY",
            created_at="2025-07-10T15:30:00.250000+02:00",
            updated_at="2025-07-11T09:00:00",
        ),
    )
    tree = HierarchyTreeNode.build(raw)
    rebuilt = HierarchyTreeNode.build(tree.to_nested())

    assert tree.unit.created_at == datetime(2025, 7, 10, 13, 30, 0)
    assert tree.unit.updated_at == datetime(2025, 7, 11, 9, 0, 0)
    assert rebuilt.to_flat_list() == tree.to_flat_list()
