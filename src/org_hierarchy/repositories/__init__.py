"""Repository layer for data access.

This layer provides HierarchySource implementations. They are
protocol-based (structural typing), not inheritance-based: any class
implementing the required methods satisfies the protocol.
"""

from org_hierarchy.protocols import HierarchySource

from .static_source import StaticHierarchySource

__all__ = [
    "HierarchySource",
    "StaticHierarchySource",
]
