"""Protocol interfaces for swappable implementations.

Protocols enable:
- Easy swapping of implementations (JSON file -> database, etc.)
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .hierarchy_source import HierarchySource

__all__ = [
    "HierarchySource",
]
