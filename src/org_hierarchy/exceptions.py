"""Exceptions raised by the hierarchy package.

Cache misses and "not found" tree queries are not errors; they come back
as ``None``. Only tree construction and service lookups raise.
"""


class HierarchyError(Exception):
    """Base class for hierarchy errors."""


class MalformedInputError(HierarchyError, ValueError):
    """Raw nested input does not have the ``{"unit": ..., "children": [...]}`` shape."""

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{message} (at {path})")
        self.reason = message
        self.path = path


class UnitNotFoundError(HierarchyError, LookupError):
    """No unit with the requested id exists in the hierarchy."""

    def __init__(self, unit_id: int) -> None:
        super().__init__(f"Organizational unit with id {unit_id} not found")
        self.unit_id = unit_id
