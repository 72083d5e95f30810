"""Declarations produced by the DDL parser.

A parsed schema is an ordered list of ``Declaration`` values, one per
statement, in file order.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ddlmeta.types import ColumnType, OnDelete

__all__ = [
    "ColumnDecl",
    "KeyPartDecl",
    "ForeignKeyDecl",
    "ConstraintDecl",
    "InterleaveDecl",
    "TableDecl",
    "IndexDecl",
    "WatchDecl",
    "ChangeStreamDecl",
    "OtherDecl",
    "Declaration",
]


@dataclass(frozen=True)
class ColumnDecl:
    name: str
    type: ColumnType
    not_null: bool = False


@dataclass(frozen=True)
class KeyPartDecl:
    column: str
    desc: bool = False


@dataclass(frozen=True)
class ForeignKeyDecl:
    columns: list[str]
    ref_table: str
    ref_columns: list[str]


@dataclass(frozen=True)
class ConstraintDecl:
    """Named table constraint. Only foreign keys carry graph information."""

    name: str
    foreign_key: Optional[ForeignKeyDecl] = None
    check: Optional[str] = None


@dataclass(frozen=True)
class InterleaveDecl:
    parent: str
    on_delete: OnDelete = OnDelete.NO_ACTION


@dataclass(frozen=True)
class TableDecl:
    """CREATE TABLE."""

    name: str
    columns: list[ColumnDecl] = field(default_factory=list)
    primary_key: list[KeyPartDecl] = field(default_factory=list)
    interleave: Optional[InterleaveDecl] = None
    constraints: list[ConstraintDecl] = field(default_factory=list)


@dataclass(frozen=True)
class IndexDecl:
    """CREATE INDEX."""

    name: str
    table: str
    columns: list[KeyPartDecl] = field(default_factory=list)
    unique: bool = False
    null_filtered: bool = False
    storing: list[str] = field(default_factory=list)
    interleave: Optional[str] = None


@dataclass(frozen=True)
class WatchDecl:
    """One FOR clause of a change stream.

    all_columns is True when the table is watched without a column list.
    """

    table: str
    columns: list[str] = field(default_factory=list)
    all_columns: bool = False


@dataclass(frozen=True)
class ChangeStreamDecl:
    """CREATE CHANGE STREAM."""

    name: str
    watch: list[WatchDecl] = field(default_factory=list)


@dataclass(frozen=True)
class OtherDecl:
    """Any statement kind the model builder does not interpret."""

    kind: str
    data: Any = None


Declaration = Union[TableDecl, IndexDecl, ChangeStreamDecl, OtherDecl]
