"""Hierarchy source protocol.

Defines the interface for anything that can produce the raw nested unit
structure a HierarchyTreeNode is built from.

Implementations can include:
- A static JSON document (default)
- A relational database loading units and their parent links
- A remote directory service
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HierarchySource(Protocol):
    """Protocol for raw hierarchy providers.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        from org_hierarchy.protocols import HierarchySource

        source: HierarchySource = StaticHierarchySource(roots=[...])
        ```
    """

    def load_roots(self) -> list[dict[str, Any]]:
        """Load every root unit with its descendants.

        Returns:
            List of nested ``{"unit": {...}, "children": [...]}`` structures,
            one per root unit
        """
        ...

    def health_check(self) -> bool:
        """Check if the source is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
