"""Core type definitions for ddlmeta."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TypeAlias

TableName: TypeAlias = str
TableKey: TypeAlias = str
ColumnName: TypeAlias = str

__all__ = [
    "TableName",
    "TableKey",
    "ColumnName",
    "BaseType",
    "BASE_TYPE_NAMES",
    "MAX_LENGTH",
    "OnDelete",
    "ColumnType",
    "base_type_name",
]

# Length recorded for STRING(MAX) and BYTES(MAX).
MAX_LENGTH = 9223372036854775807


class BaseType(IntEnum):
    """Column base kinds, in the order the DDL parser enumerates them."""

    BOOL = 0
    INT64 = 1
    FLOAT64 = 2
    NUMERIC = 3
    STRING = 4
    BYTES = 5
    DATE = 6
    TIMESTAMP = 7
    JSON = 8


BASE_TYPE_NAMES: tuple[str, ...] = (
    "bool",
    "int64",
    "float64",
    "int",
    "string",
    "[]byte",
    "civil.Date",
    "time.Time",
    "json",
)

NULLABLE_TYPE_NAMES: dict[BaseType, str] = {
    BaseType.BOOL: "spanner.NullBool",
    BaseType.INT64: "spanner.NullInt64",
    BaseType.STRING: "spanner.NullString",
    BaseType.TIMESTAMP: "spanner.NullTime",
    BaseType.JSON: "spanner.NullJSON",
}


def base_type_name(base: int) -> str:
    """Return the canonical type name for a base kind.

    Raises:
        ValueError: If base is outside the BaseType enumeration.
    """
    return BASE_TYPE_NAMES[BaseType(base)]


class OnDelete(Enum):
    """ON DELETE policy of an interleaved table."""

    NO_ACTION = "no-action"
    CASCADE = "cascade"


@dataclass(frozen=True)
class ColumnType:
    """Resolved column type: base kind, array flag and declared length."""

    base: BaseType
    array: bool = False
    length: int = 0

    @property
    def is_max_length(self) -> bool:
        return self.length == MAX_LENGTH

    @property
    def serialized_length(self) -> int:
        """Length as written to the output document (MAX becomes 0)."""
        return 0 if self.is_max_length else self.length

    @property
    def base_name(self) -> str:
        return base_type_name(self.base)

    def resolve_name(self, not_null: bool) -> tuple[str, str]:
        """Return (element type, full type) names for a column of this type.

        Nullable scalars of kinds with a dedicated null wrapper use it;
        strings inside arrays keep the bare name. Any other nullable kind
        becomes a pointer to the bare type.
        """
        name = self.base_name
        if not not_null:
            wrapper = NULLABLE_TYPE_NAMES.get(self.base)
            if self.base == BaseType.STRING and self.array:
                wrapper = name
            name = wrapper if wrapper is not None else f"*{name}"
        if self.array:
            return name, f"[]{name}"
        return name, name
