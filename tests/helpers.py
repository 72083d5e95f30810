"""Shared test helpers for ddlmeta tests."""

from typing import Iterable, Optional, Sequence

from ddlmeta.config import Config
from ddlmeta.runner import enrich
from ddlmeta.schema.ddl import (
    ColumnDecl,
    ConstraintDecl,
    Declaration,
    ForeignKeyDecl,
    InterleaveDecl,
    KeyPartDecl,
    TableDecl,
)
from ddlmeta.schema.models import Schema
from ddlmeta.types import BaseType, ColumnType, OnDelete


def make_column(
    name: str,
    base: BaseType = BaseType.INT64,
    *,
    not_null: bool = False,
    array: bool = False,
    length: int = 0,
) -> ColumnDecl:
    """Create a column declaration with an INT64 default type."""
    return ColumnDecl(
        name=name,
        type=ColumnType(base=base, array=array, length=length),
        not_null=not_null,
    )


def make_table(
    name: str,
    columns: Iterable[str] = ("id",),
    primary_key: Iterable[str] = ("id",),
    parent: Optional[str] = None,
    on_delete: OnDelete = OnDelete.NO_ACTION,
    foreign_keys: Sequence[tuple[str, str]] = (),
) -> TableDecl:
    """Create a table declaration.

    Args:
        name: Table name
        columns: INT64 NOT NULL column names
        primary_key: Primary key column names
        parent: Interleave parent table name
        on_delete: Interleave ON DELETE policy
        foreign_keys: (constraint name, referenced table) pairs, each on
            column ``<ref>_id`` referencing ``id``
    """
    constraints = [
        ConstraintDecl(
            name=fk_name,
            foreign_key=ForeignKeyDecl(
                columns=[f"{ref.lower()}_id"], ref_table=ref, ref_columns=["id"]
            ),
        )
        for fk_name, ref in foreign_keys
    ]
    return TableDecl(
        name=name,
        columns=[make_column(c, not_null=True) for c in columns],
        primary_key=[KeyPartDecl(column=c) for c in primary_key],
        interleave=InterleaveDecl(parent=parent, on_delete=on_delete)
        if parent
        else None,
        constraints=constraints,
    )


def enrich_decls(*declarations: Declaration) -> Schema:
    """Run the full enrichment pipeline over declarations."""
    return enrich(list(declarations))


def order_of(schema: Schema) -> list[str]:
    """Table keys in the schema's current order."""
    return [t.key for t in schema.tables]


def make_test_config(schema_path: str, output: Optional[str] = None, **kwargs) -> Config:
    """Create a Config for tests with sensible defaults."""
    return Config(schema_path=schema_path, output=output, **kwargs)
