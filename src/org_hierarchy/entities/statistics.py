"""Tree statistics domain entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TreeStatistics:
    """Aggregate counts for a (sub)tree.

    Attributes:
        total_units: Number of units in the subtree, root included
        active_units: Number of active units in the subtree
        max_depth: Subtree height; 1 for a leaf
        by_type: Unit count per type string
    """

    total_units: int
    active_units: int
    max_depth: int
    by_type: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total_units": self.total_units,
            "active_units": self.active_units,
            "max_depth": self.max_depth,
            "by_type": dict(self.by_type),
        }
