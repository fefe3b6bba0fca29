"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on sources
or the cache internals.

Architecture:
    Handler -> Service -> Source / Cache
    (HTTP)  -> (Business) -> (Data Access)
"""

from .hierarchy_handler import HierarchyHandler

__all__ = [
    "HierarchyHandler",
]
