"""Organizational unit snapshot entity."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from org_hierarchy.exceptions import MalformedInputError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class UnitType(str, Enum):
    """Known organizational unit types."""

    CAMPUS = "CAMPUS"
    FACULTY = "FACULTY"
    REGIONAL_CENTER = "REGIONAL_CENTER"
    INSTITUTE = "INSTITUTE"
    DEPARTMENT = "DEPARTMENT"
    SCHOOL = "SCHOOL"
    DIRECTORATE = "DIRECTORATE"
    COORDINATION = "COORDINATION"
    DIVISION = "DIVISION"
    CENTER = "CENTER"

    @classmethod
    def parse(cls, value: str) -> "UnitType | None":
        """Return the matching UnitType, or None for an unknown type string."""
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def is_academic(self) -> bool:
        return self in (UnitType.FACULTY, UnitType.REGIONAL_CENTER, UnitType.INSTITUTE)

    @property
    def is_administrative(self) -> bool:
        return self in (UnitType.DIRECTORATE, UnitType.COORDINATION, UnitType.DIVISION)

    @property
    def is_teaching(self) -> bool:
        return self in (UnitType.DEPARTMENT, UnitType.SCHOOL)


def format_timestamp(value: datetime | None) -> str | None:
    """Format a timestamp as ``YYYY-MM-DD HH:MM:SS``."""
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)


def _normalize_timestamp(value: datetime) -> datetime:
    # Stored at the resolution ``format_timestamp`` can write back: naive UTC, whole seconds
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=0)


def _parse_timestamp(value: Any, field_name: str) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _normalize_timestamp(value)
    if isinstance(value, str):
        try:
            return datetime.strptime(value, TIMESTAMP_FORMAT)
        except ValueError:
            pass
        try:
            return _normalize_timestamp(datetime.fromisoformat(value))
        except ValueError as e:
            raise MalformedInputError(f"'{field_name}' is not a valid timestamp: {value!r}") from e
    raise MalformedInputError(f"'{field_name}' must be a timestamp string, got {type(value).__name__}")


def _optional_int(data: Mapping[str, Any], field_name: str, default: int | None) -> int | None:
    value = data.get(field_name)
    if value is None:
        return default
    if not isinstance(value, int) or isinstance(value, bool):
        raise MalformedInputError(f"unit '{field_name}' must be an integer, got {value!r}")
    return value


def _optional_str(data: Mapping[str, Any], field_name: str, default: str | None) -> str | None:
    value = data.get(field_name)
    if value is None:
        return default
    if not isinstance(value, str):
        raise MalformedInputError(f"unit '{field_name}' must be a string, got {value!r}")
    return value


def _flag(data: Mapping[str, Any], field_name: str, default: bool) -> bool:
    value = data.get(field_name)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise MalformedInputError(f"unit '{field_name}' must be a boolean, got {value!r}")
    return value


@dataclass(frozen=True)
class UnitSnapshot:
    """Read-only projection of an organizational unit.

    The persistence layer owns the unit itself; trees and caches only ever
    hold these snapshots.

    Attributes:
        id: Unit identifier
        name: Display name
        type: Unit type string (usually a UnitType value)
        parent_id: Identifier of the parent unit, if any
        parent_name: Name of the parent unit, if any
        hierarchy_path: Materialized ancestry path (e.g. "Campus > Engineering")
        depth_level: Absolute depth of the unit in the organization
        children_count: Number of direct children known to the persistence layer
        is_active: Whether the unit is active
        is_academic_unit: Faculty-like unit
        is_administrative_unit: Directorate-like unit
        is_teaching_unit: Department-like unit
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    name: str
    type: str
    parent_id: int | None = None
    parent_name: str | None = None
    hierarchy_path: str = ""
    depth_level: int = 0
    children_count: int = 0
    is_active: bool = True
    is_academic_unit: bool = False
    is_administrative_unit: bool = False
    is_teaching_unit: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnitSnapshot":
        """Create a snapshot from a snake_case field mapping.

        Args:
            data: Mapping with at least ``id``, ``name`` and ``type``

        Returns:
            The parsed UnitSnapshot

        Raises:
            MalformedInputError: If a required field is missing or has the wrong type
        """
        unit_id = data.get("id")
        if not isinstance(unit_id, int) or isinstance(unit_id, bool):
            raise MalformedInputError(f"unit 'id' must be an integer, got {unit_id!r}")

        name = data.get("name")
        if not isinstance(name, str):
            raise MalformedInputError(f"unit 'name' must be a string, got {name!r}")

        unit_type = data.get("type")
        if not isinstance(unit_type, str):
            raise MalformedInputError(f"unit 'type' must be a string, got {unit_type!r}")

        known = UnitType.parse(unit_type)

        return cls(
            id=unit_id,
            name=name,
            type=unit_type,
            parent_id=_optional_int(data, "parent_id", None),
            parent_name=_optional_str(data, "parent_name", None),
            hierarchy_path=_optional_str(data, "hierarchy_path", ""),
            depth_level=_optional_int(data, "depth_level", 0),
            children_count=_optional_int(data, "children_count", 0),
            is_active=_flag(data, "is_active", True),
            is_academic_unit=_flag(data, "is_academic_unit", known is not None and known.is_academic),
            is_administrative_unit=_flag(
                data, "is_administrative_unit", known is not None and known.is_administrative
            ),
            is_teaching_unit=_flag(data, "is_teaching_unit", known is not None and known.is_teaching),
            created_at=_parse_timestamp(data.get("created_at"), "created_at"),
            updated_at=_parse_timestamp(data.get("updated_at"), "updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready snake_case field map."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "parent_id": self.parent_id,
            "parent_name": self.parent_name,
            "hierarchy_path": self.hierarchy_path,
            "depth_level": self.depth_level,
            "children_count": self.children_count,
            "is_active": self.is_active,
            "is_academic_unit": self.is_academic_unit,
            "is_administrative_unit": self.is_administrative_unit,
            "is_teaching_unit": self.is_teaching_unit,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }
