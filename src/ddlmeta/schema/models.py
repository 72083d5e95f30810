"""Schema representation classes."""

from dataclasses import dataclass, field
from typing import Optional

from ddlmeta import naming
from ddlmeta.types import ColumnType, OnDelete, TableKey

CHANGE_STREAM_KIND = "ChangeStream"


class NamedMixin:
    """Naming variants shared by tables, columns and key parts.

    ``name`` is the raw (plural for tables) identifier and ``name_db`` its
    singular form.
    """

    name: str
    name_db: str

    @property
    def upper_camel(self) -> str:
        return naming.camel(self.name_db)

    @property
    def lower_camel(self) -> str:
        return naming.lower_first(self.upper_camel)

    @property
    def upper_camel_plural(self) -> str:
        return naming.upper_camel_plural(self.name)

    @property
    def lower_camel_plural(self) -> str:
        return naming.lower_first(self.upper_camel_plural)


@dataclass
class Column(NamedMixin):
    """Column definition."""

    name: str
    type: ColumnType
    not_null: bool = False

    @property
    def name_db(self) -> str:
        return naming.singular(self.name)

    @property
    def json_key(self) -> str:
        return naming.json_key(self.name)

    @property
    def json_key_initialisms(self) -> str:
        return naming.json_key_initialisms(self.name)

    @property
    def exact_json(self) -> str:
        return naming.exact_json(self.name)

    @property
    def exact(self) -> str:
        return naming.exact(self.name)

    @property
    def key(self) -> str:
        return self.json_key

    @property
    def type_name(self) -> str:
        """Full type name, e.g. ``[]spanner.NullInt64`` or ``*float64``."""
        return self.type.resolve_name(self.not_null)[1]

    @property
    def base_type_name(self) -> str:
        """Element type name, nullability applied but without the array prefix."""
        return self.type.resolve_name(self.not_null)[0]


@dataclass
class KeyPart(NamedMixin):
    """A column taking part in a primary key, index or change stream watch.

    ``type`` is the base type name of the referenced column, or empty when
    the column could not be resolved.
    """

    column: str
    type: str = ""

    @property
    def name(self) -> str:
        return self.column

    @property
    def name_db(self) -> str:
        return naming.singular(self.column)


@dataclass
class Interleave:
    parent: str
    on_delete: OnDelete = OnDelete.NO_ACTION


@dataclass
class Index:
    """Secondary index, or the synthetic index of a change stream watch clause."""

    name: str
    table: str
    columns: list[KeyPart] = field(default_factory=list)
    unique: bool = False
    null_filtered: bool = False
    watch_all: bool = False
    storing: list[str] = field(default_factory=list)
    interleave: Optional[str] = None


@dataclass
class ForeignKey:
    columns: list[str]
    ref_table: str
    ref_columns: list[str]


@dataclass
class TableConstraint:
    name: str
    foreign_key: ForeignKey


@dataclass
class Table(NamedMixin):
    """Table or change stream node of the schema graph.

    ``children``, ``ref_tables``, ``descendents`` and ``dependency_order``
    are filled in by ``ddlmeta.schema.graph``.
    """

    name: str
    key: TableKey
    name_db: str = ""
    kind: Optional[str] = None
    columns: list[Column] = field(default_factory=list)
    primary_key: list[KeyPart] = field(default_factory=list)
    interleave: Optional[Interleave] = None
    indexes: list[Index] = field(default_factory=list)
    constraints: list[TableConstraint] = field(default_factory=list)
    children: list[TableKey] = field(default_factory=list)
    ref_tables: list[TableKey] = field(default_factory=list)
    descendents: set[TableKey] = field(default_factory=set)
    dependency_order: int = 0

    def __post_init__(self) -> None:
        if not self.name_db:
            self.name_db = naming.singular(self.name)

    @property
    def short_name(self) -> str:
        return naming.short_name(self.name_db)

    @property
    def is_change_stream(self) -> bool:
        return self.kind == CHANGE_STREAM_KIND

    @property
    def edges(self) -> list[TableKey]:
        """Keys of directly dependent tables: children, then referencing tables."""
        return self.children + self.ref_tables

    def get_column(self, name: str) -> Optional[Column]:
        """Get a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None


@dataclass
class Schema:
    """Complete schema: tables in their current order."""

    tables: list[Table] = field(default_factory=list)

    def get_table(self, key: TableKey) -> Optional[Table]:
        """Get a table by graph key."""
        for table in self.tables:
            if table.key == key:
                return table
        return None

    def by_key(self) -> dict[TableKey, Table]:
        return {t.key: t for t in self.tables}

    def by_name(self) -> dict[str, Table]:
        return {t.name: t for t in self.tables}
