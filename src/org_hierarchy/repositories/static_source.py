"""Static implementation of HierarchySource.

Serves a fixed list of nested roots, either given directly or read once
from a JSON file. It satisfies the HierarchySource protocol.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

from org_hierarchy.config import settings

logger = logging.getLogger(__name__)


class StaticHierarchySource:
    """In-memory hierarchy source.

    The JSON document may hold either a single nested root object or a list
    of them.
    """

    def __init__(self, roots: list[dict[str, Any]] | None = None) -> None:
        """Initialize the source.

        Args:
            roots: Nested root structures. Defaults to an empty hierarchy.
        """
        self._roots = list(roots or [])

    @classmethod
    def from_json_file(cls, path: str | Path) -> "StaticHierarchySource":
        """Load roots from a JSON file.

        Args:
            path: Path to the JSON document

        Returns:
            Configured StaticHierarchySource

        Raises:
            OSError: If the file cannot be read
            ValueError: If the document is not valid JSON or not an object/list
        """
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)

        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise ValueError(f"Hierarchy file {path} must contain an object or a list")

        logger.info("Loaded %d root unit(s) from %s", len(data), path)
        return cls(roots=data)

    @classmethod
    def create(cls, path: str | Path | None = None) -> "StaticHierarchySource":
        """Factory method using the configured data path when none is given.

        Args:
            path: JSON file path. If None, uses settings; if that is unset too,
                the source starts empty.

        Returns:
            Configured StaticHierarchySource
        """
        path = path or settings.hierarchy_data_path
        if path is None:
            logger.info("No hierarchy data path configured, starting with an empty hierarchy")
            return cls()
        return cls.from_json_file(path)

    def load_roots(self) -> list[dict[str, Any]]:
        """Return a copy of the configured roots."""
        return copy.deepcopy(self._roots)

    def replace_roots(self, roots: list[dict[str, Any]]) -> None:
        """Swap in a new set of roots (callers should invalidate caches)."""
        self._roots = list(roots)

    def health_check(self) -> bool:
        return True
