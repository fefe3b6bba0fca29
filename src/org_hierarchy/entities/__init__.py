"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by the tree, cache
and services. They are NOT used for API contracts - use DTOs from the
dto package for that.
"""

from .cache_entry import CacheEntry
from .statistics import TreeStatistics
from .unit import TIMESTAMP_FORMAT, UnitSnapshot, UnitType, format_timestamp

__all__ = [
    "CacheEntry",
    "TreeStatistics",
    "UnitSnapshot",
    "UnitType",
    "TIMESTAMP_FORMAT",
    "format_timestamp",
]
