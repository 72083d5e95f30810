"""Build the schema model from parsed DDL declarations."""

import logging
from typing import Optional, Sequence

from ddlmeta import naming
from ddlmeta.exceptions import DuplicateTableError
from ddlmeta.schema.ddl import (
    ChangeStreamDecl,
    Declaration,
    IndexDecl,
    OtherDecl,
    TableDecl,
)
from ddlmeta.schema.models import (
    CHANGE_STREAM_KIND,
    Column,
    ForeignKey,
    Index,
    Interleave,
    KeyPart,
    Schema,
    Table,
    TableConstraint,
)

__all__ = ["ModelBuilder", "build_schema"]

logger = logging.getLogger(__name__)


class ModelBuilder:
    """Convert a declaration list into a Schema.

    Two passes over the declarations: the first materializes tables and
    change streams, the second attaches indexes and resolves watched column
    types, which may refer to tables declared later in the file.
    """

    def __init__(self) -> None:
        self.schema = Schema()
        self._tables_by_name: dict[str, Table] = {}
        self._tables_by_key: dict[str, Table] = {}
        self._stream_names: dict[str, str] = {}

    def build(self, declarations: Sequence[Declaration]) -> Schema:
        for decl in declarations:
            if isinstance(decl, TableDecl):
                self._add_table(decl)
            elif isinstance(decl, ChangeStreamDecl):
                self._add_change_stream(decl)
            elif isinstance(decl, IndexDecl):
                pass
            elif isinstance(decl, OtherDecl):
                logger.warning(f"Skipping unsupported statement: {decl.kind}")
            else:
                logger.warning(f"Skipping unknown declaration: {type(decl).__name__}")

        for decl in declarations:
            if isinstance(decl, IndexDecl):
                self._attach_index(decl)
            elif isinstance(decl, ChangeStreamDecl):
                self._resolve_watch_columns(decl)

        return self.schema

    def _register(self, table: Table) -> None:
        if table.key in self._tables_by_key:
            other = self._tables_by_key[table.key]
            raise DuplicateTableError(
                table.key,
                f"Tables '{other.name}' and '{table.name}' share key '{table.key}'",
            )
        if table.name in self._tables_by_name:
            raise DuplicateTableError(
                table.key, f"Duplicate table name '{table.name}'"
            )
        self._tables_by_key[table.key] = table
        self._tables_by_name[table.name] = table
        self.schema.tables.append(table)

    def _add_table(self, decl: TableDecl) -> None:
        columns = [
            Column(name=c.name, type=c.type, not_null=c.not_null)
            for c in decl.columns
        ]
        primary_key = [KeyPart(column=p.column) for p in decl.primary_key]

        interleave = None
        if decl.interleave is not None:
            interleave = Interleave(
                parent=decl.interleave.parent,
                on_delete=decl.interleave.on_delete,
            )

        constraints = []
        for c in decl.constraints:
            if c.foreign_key is None:
                continue
            constraints.append(
                TableConstraint(
                    name=c.name,
                    foreign_key=ForeignKey(
                        columns=list(c.foreign_key.columns),
                        ref_table=c.foreign_key.ref_table,
                        ref_columns=list(c.foreign_key.ref_columns),
                    ),
                )
            )

        self._register(
            Table(
                name=decl.name,
                key=naming.table_key(decl.name),
                columns=columns,
                primary_key=primary_key,
                interleave=interleave,
                constraints=constraints,
            )
        )
        for part in primary_key:
            self._resolve_key_part(decl.name, part, "primary key")

    def _add_change_stream(self, decl: ChangeStreamDecl) -> None:
        key = naming.stream_key(decl.name)
        name_db = naming.snake(key)
        indexes = [
            Index(
                name="",
                table=w.table,
                columns=[KeyPart(column=c) for c in w.columns],
                watch_all=w.all_columns,
            )
            for w in decl.watch
        ]
        self._register(
            Table(
                name=naming.plural(name_db),
                key=key,
                name_db=name_db,
                kind=CHANGE_STREAM_KIND,
                indexes=indexes,
            )
        )
        self._stream_names[decl.name] = key

    def _attach_index(self, decl: IndexDecl) -> None:
        table = self._tables_by_name.get(decl.table)
        if table is None:
            logger.warning(
                f"Index '{decl.name}' refers to unknown table '{decl.table}'"
            )
            return

        index = Index(
            name=decl.name,
            table=decl.table,
            columns=[KeyPart(column=p.column) for p in decl.columns],
            unique=decl.unique,
            null_filtered=decl.null_filtered,
            storing=list(decl.storing),
            interleave=decl.interleave,
        )
        for part in index.columns:
            self._resolve_key_part(table.name, part, f"index '{decl.name}'")
        table.indexes.append(index)

    def _resolve_watch_columns(self, decl: ChangeStreamDecl) -> None:
        stream = self._tables_by_key.get(self._stream_names.get(decl.name, ""))
        if stream is None:
            return
        for index in stream.indexes:
            if self._tables_by_name.get(index.table) is None:
                logger.warning(
                    f"Change stream '{decl.name}' watches unknown table '{index.table}'"
                )
                continue
            for part in index.columns:
                self._resolve_key_part(
                    index.table, part, f"change stream '{decl.name}'"
                )

    def _resolve_key_part(self, table_name: str, part: KeyPart, owner: str) -> None:
        column = self._find_column(table_name, part.column)
        if column is None:
            logger.warning(
                f"Column '{part.column}' of {owner} not found in table '{table_name}'"
            )
            return
        part.type = column.type.base_name

    def _find_column(self, table_name: str, column_name: str) -> Optional[Column]:
        table = self._tables_by_name.get(table_name)
        if table is None:
            return None
        return table.get_column(column_name)


def build_schema(declarations: Sequence[Declaration]) -> Schema:
    """Build a Schema from declarations in file order."""
    return ModelBuilder().build(declarations)
