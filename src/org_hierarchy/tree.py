"""In-memory organizational hierarchy tree.

A tree is built from the nested structure produced by a hierarchy source:

    {"unit": {...unit fields...}, "children": [{"unit": ..., "children": [...]}, ...]}

Nodes never point back to their parent, so a built tree cannot contain a
cycle. Children keep insertion order, which is also traversal order.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from org_hierarchy.config import settings
from org_hierarchy.entities import TreeStatistics, UnitSnapshot
from org_hierarchy.exceptions import MalformedInputError


@dataclass
class HierarchyTreeNode:
    """One unit plus its already-resolved children.

    Example:
        ```python
        tree = HierarchyTreeNode.build({
            "unit": {"id": 1, "name": "Engineering", "type": "FACULTY"},
            "children": [
                {"unit": {"id": 2, "name": "CS", "type": "DEPARTMENT"}, "children": []},
            ],
        })
        tree.find_by_id(2).name  # "CS"
        ```
    """

    unit: UnitSnapshot
    children: list["HierarchyTreeNode"] = field(default_factory=list)

    @classmethod
    def build(cls, raw: Mapping[str, Any], max_depth: int | None = None) -> "HierarchyTreeNode":
        """Recursively construct a tree from nested raw input.

        Args:
            raw: Mapping of shape ``{"unit": {...}, "children": [...]}``
            max_depth: Maximum nesting depth. Defaults to settings.

        Returns:
            The root node of the built tree

        Raises:
            MalformedInputError: If the shape is wrong, the input is nested deeper
                than ``max_depth``, or a unit id appears more than once
        """
        return _build_node(raw, _depth_limit(max_depth), 1, set(), "$")

    def add_child(self, child: "HierarchyTreeNode") -> None:
        """Append a child node. Not checked for duplicates or cycles."""
        self.children.append(child)

    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def children_count(self) -> int:
        return len(self.children)

    def to_nested(self) -> dict[str, Any]:
        """Convert to the nested structure accepted by ``build``."""
        return {
            "unit": self.unit.to_dict(),
            "children": [child.to_nested() for child in self.children],
        }

    def to_flat_list(self) -> list[UnitSnapshot]:
        """Return every unit in pre-order (self, then each child's subtree)."""
        result = [self.unit]
        for child in self.children:
            result.extend(child.to_flat_list())
        return result

    def find_node(self, unit_id: int) -> "HierarchyTreeNode | None":
        """Return the first node in pre-order whose unit has ``unit_id``."""
        if self.unit.id == unit_id:
            return self

        for child in self.children:
            found = child.find_node(unit_id)
            if found is not None:
                return found

        return None

    def find_by_id(self, unit_id: int) -> UnitSnapshot | None:
        """Return the unit with ``unit_id``, or None when it is not in the tree."""
        node = self.find_node(unit_id)
        return node.unit if node is not None else None

    def path_to(self, unit_id: int) -> list[UnitSnapshot] | None:
        """Return the units from this root down to ``unit_id``, or None."""
        if self.unit.id == unit_id:
            return [self.unit]

        for child in self.children:
            path = child.path_to(unit_id)
            if path is not None:
                return [self.unit, *path]

        return None

    def filter_by_type(self, unit_type: str) -> "HierarchyTreeNode | None":
        """Return a copy keeping only units of ``unit_type`` and their ancestors.

        A node is kept if its own type matches or at least one child is kept.
        Returns None when nothing in the tree matches. The original tree is
        left untouched.
        """
        filtered_children = []
        for child in self.children:
            filtered = child.filter_by_type(unit_type)
            if filtered is not None:
                filtered_children.append(filtered)

        if self.unit.type == unit_type or filtered_children:
            return HierarchyTreeNode(unit=self.unit, children=filtered_children)

        return None

    def statistics(self) -> TreeStatistics:
        """Compute subtree statistics bottom-up.

        ``max_depth`` is the height of this subtree (1 for a leaf), not the
        absolute depth of the deepest unit in the organization.
        """
        total = 1
        active = 1 if self.unit.is_active else 0
        max_depth = 1
        by_type = {self.unit.type: 1}

        for child in self.children:
            child_stats = child.statistics()
            total += child_stats.total_units
            active += child_stats.active_units
            max_depth = max(max_depth, child_stats.max_depth + 1)
            for unit_type, count in child_stats.by_type.items():
                by_type[unit_type] = by_type.get(unit_type, 0) + count

        return TreeStatistics(
            total_units=total,
            active_units=active,
            max_depth=max_depth,
            by_type=by_type,
        )


def build_forest(
    raws: Iterable[Mapping[str, Any]],
    max_depth: int | None = None,
) -> list[HierarchyTreeNode]:
    """Build several root trees, rejecting unit ids repeated across any of them.

    Args:
        raws: Nested root structures
        max_depth: Maximum nesting depth. Defaults to settings.

    Returns:
        One HierarchyTreeNode per raw root, in input order

    Raises:
        MalformedInputError: As for ``HierarchyTreeNode.build``
    """
    seen: set[int] = set()
    limit = _depth_limit(max_depth)
    return [_build_node(raw, limit, 1, seen, f"$[{i}]") for i, raw in enumerate(raws)]


def _build_node(
    raw: Any,
    max_depth: int,
    depth: int,
    seen: set[int],
    path: str,
) -> HierarchyTreeNode:
    if depth > max_depth:
        raise MalformedInputError(f"hierarchy is nested deeper than {max_depth} levels", path)

    if not isinstance(raw, Mapping):
        raise MalformedInputError(f"expected a mapping, got {type(raw).__name__}", path)

    unit_data = raw.get("unit")
    if not isinstance(unit_data, Mapping):
        raise MalformedInputError("missing 'unit' mapping", path)

    try:
        unit = UnitSnapshot.from_dict(unit_data)
    except MalformedInputError as e:
        raise MalformedInputError(e.reason, f"{path}.unit") from e

    if unit.id in seen:
        raise MalformedInputError(f"unit id {unit.id} appears more than once", f"{path}.unit")
    seen.add(unit.id)

    children_data = raw.get("children")
    if children_data is None:
        children_data = []
    elif not isinstance(children_data, (list, tuple)):
        raise MalformedInputError(
            f"'children' must be a list, got {type(children_data).__name__}", path
        )

    children = [
        _build_node(child, max_depth, depth + 1, seen, f"{path}.children[{i}]")
        for i, child in enumerate(children_data)
    ]

    return HierarchyTreeNode(unit=unit, children=children)


def _depth_limit(max_depth: int | None) -> int:
    limit = settings.max_tree_depth if max_depth is None else max_depth
    if limit < 1:
        raise ValueError(f"max_depth must be at least 1, got {limit}")
    return limit
