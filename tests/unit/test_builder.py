"""Tests for the schema model builder."""

import logging

import pytest

from ddlmeta.exceptions import DuplicateTableError
from ddlmeta.schema.builder import ModelBuilder, build_schema
from ddlmeta.schema.ddl import (
    ChangeStreamDecl,
    ConstraintDecl,
    IndexDecl,
    KeyPartDecl,
    OtherDecl,
    TableDecl,
    WatchDecl,
)
from ddlmeta.schema.models import CHANGE_STREAM_KIND
from ddlmeta.types import BaseType, OnDelete
from tests.helpers import make_column, make_table


class TestTables:
    """Pass 1: tables."""

    def test_table_key_and_names(self):
        schema = build_schema([make_table("UserAccounts")])
        table = schema.get_table("userAccount")

        assert table is not None
        assert table.name == "UserAccounts"
        assert table.name_db == "UserAccount"
        assert table.kind is None

    def test_columns_keep_declaration_order(self):
        decl = TableDecl(
            name="Users",
            columns=[
                make_column("zeta", not_null=True),
                make_column("alpha", BaseType.STRING),
                make_column("mid", BaseType.BOOL, array=True),
            ],
        )
        table = build_schema([decl]).tables[0]

        assert [c.name for c in table.columns] == ["zeta", "alpha", "mid"]
        assert table.columns[0].not_null is True
        assert table.columns[2].type.array is True

    def test_primary_key_types_resolved(self):
        decl = TableDecl(
            name="Users",
            columns=[make_column("id", not_null=True), make_column("email", BaseType.STRING)],
            primary_key=[KeyPartDecl("id"), KeyPartDecl("email")],
        )
        table = build_schema([decl]).tables[0]

        assert [(p.column, p.type) for p in table.primary_key] == [
            ("id", "int64"),
            ("email", "string"),
        ]

    def test_primary_key_missing_column_logged(self, caplog):
        decl = make_table("Users", columns=["id"], primary_key=["id", "ghost"])
        with caplog.at_level(logging.WARNING):
            table = build_schema([decl]).tables[0]

        assert table.primary_key[1].type == ""
        assert "ghost" in caplog.text

    def test_interleave_copied(self):
        schema = build_schema(
            [
                make_table("Parents"),
                make_table("Children", parent="Parents", on_delete=OnDelete.CASCADE),
            ]
        )
        child = schema.get_table("child")

        assert child.interleave.parent == "Parents"
        assert child.interleave.on_delete == OnDelete.CASCADE

    def test_only_foreign_key_constraints_kept(self):
        decl = TableDecl(
            name="Orders",
            columns=[make_column("id")],
            constraints=[ConstraintDecl(name="CK_positive", check="id > 0")],
        )
        table = build_schema([decl]).tables[0]
        assert table.constraints == []

    def test_foreign_key_constraint_copied(self):
        schema = build_schema([make_table("Orders", foreign_keys=[("FK_user", "Users")])])
        constraint = schema.tables[0].constraints[0]

        assert constraint.name == "FK_user"
        assert constraint.foreign_key.columns == ["users_id"]
        assert constraint.foreign_key.ref_table == "Users"
        assert constraint.foreign_key.ref_columns == ["id"]


class TestDuplicates:
    def test_duplicate_key_rejected(self):
        with pytest.raises(DuplicateTableError, match="share key 'user'") as exc_info:
            build_schema([make_table("Users"), make_table("User")])
        assert exc_info.value.key == "user"

    def test_duplicate_name_rejected(self):
        with pytest.raises(DuplicateTableError):
            build_schema([make_table("Users"), make_table("Users")])


class TestIndexes:
    """Pass 2: standalone indexes."""

    def test_index_declared_before_table(self):
        index = IndexDecl(
            name="UsersByEmail",
            table="Users",
            columns=[KeyPartDecl("email")],
            unique=True,
            null_filtered=True,
            storing=["id"],
            interleave="Accounts",
        )
        users = TableDecl(
            name="Users",
            columns=[make_column("id"), make_column("email", BaseType.STRING)],
        )
        table = build_schema([index, users]).get_table("user")

        assert len(table.indexes) == 1
        built = table.indexes[0]
        assert built.name == "UsersByEmail"
        assert built.table == "Users"
        assert [(p.column, p.type) for p in built.columns] == [("email", "string")]
        assert built.unique is True
        assert built.null_filtered is True
        assert built.storing == ["id"]
        assert built.interleave == "Accounts"
        assert built.watch_all is False

    def test_index_missing_column_logged_not_fatal(self, caplog):
        index = IndexDecl(name="ByGhost", table="Users", columns=[KeyPartDecl("ghost")])
        with caplog.at_level(logging.WARNING):
            table = build_schema([make_table("Users"), index]).tables[0]

        assert table.indexes[0].columns[0].type == ""
        assert "ghost" in caplog.text

    def test_index_unknown_table_skipped(self, caplog):
        index = IndexDecl(name="ByNothing", table="Nowhere", columns=[KeyPartDecl("id")])
        with caplog.at_level(logging.WARNING):
            schema = build_schema([make_table("Users"), index])

        assert schema.tables[0].indexes == []
        assert "Nowhere" in caplog.text


class TestChangeStreams:
    def _stream(self) -> ChangeStreamDecl:
        return ChangeStreamDecl(
            name="EverythingStream",
            watch=[
                WatchDecl(table="Users", all_columns=True),
                WatchDecl(table="Posts", columns=["title", "ghost"]),
            ],
        )

    def test_change_stream_table(self):
        schema = build_schema([self._stream()])
        stream = schema.get_table("everythingStream")

        assert stream.kind == CHANGE_STREAM_KIND
        assert stream.name_db == "everything_stream"
        assert stream.name == "everything_streams"
        assert stream.columns == []
        assert [ix.table for ix in stream.indexes] == ["Users", "Posts"]
        assert [ix.watch_all for ix in stream.indexes] == [True, False]

    def test_watched_column_types_resolved_from_later_tables(self, caplog):
        posts = TableDecl(
            name="Posts",
            columns=[make_column("id"), make_column("title", BaseType.STRING)],
        )
        with caplog.at_level(logging.WARNING):
            schema = build_schema([self._stream(), make_table("Users"), posts])
        watch = schema.get_table("everythingStream").indexes[1]

        assert [(p.column, p.type) for p in watch.columns] == [
            ("title", "string"),
            ("ghost", ""),
        ]
        assert "ghost" in caplog.text

    def test_unknown_watched_table_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            build_schema([self._stream()])
        assert "unknown table 'Posts'" in caplog.text


class TestOtherDeclarations:
    def test_other_declarations_skipped(self, caplog):
        with caplog.at_level(logging.WARNING):
            schema = build_schema(
                [OtherDecl(kind="alter_database"), make_table("Users")]
            )

        assert [t.key for t in schema.tables] == ["user"]
        assert "alter_database" in caplog.text

    def test_declaration_order_preserved(self):
        schema = ModelBuilder().build(
            [make_table("Zebras"), make_table("Apples"), make_table("Mangos")]
        )
        assert [t.name for t in schema.tables] == ["Zebras", "Apples", "Mangos"]
