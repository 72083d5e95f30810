"""Tests for schema models."""

from ddlmeta.schema.models import (
    CHANGE_STREAM_KIND,
    Column,
    KeyPart,
    Schema,
    Table,
)
from ddlmeta.types import MAX_LENGTH, BaseType, ColumnType


class TestColumn:
    """Column naming variants and type names."""

    def test_column_naming_variants(self):
        col = Column(name="user_id", type=ColumnType(BaseType.INT64), not_null=True)
        assert col.name_db == "user_id"
        assert col.upper_camel == "UserId"
        assert col.lower_camel == "userId"
        assert col.upper_camel_plural == "UserIds"
        assert col.lower_camel_plural == "userIds"
        assert col.json_key == "userId"
        assert col.json_key_initialisms == "userID"
        assert col.exact_json == "user_id"
        assert col.exact == "UserId"
        assert col.key == "userId"

    def test_id_column_json_key(self):
        col = Column(name="id", type=ColumnType(BaseType.INT64), not_null=True)
        assert col.json_key == "id"
        assert col.json_key_initialisms == "id"

    def test_singular_name_of_plural_column(self):
        col = Column(name="tags", type=ColumnType(BaseType.STRING, array=True))
        assert col.name_db == "tag"
        assert col.upper_camel == "Tag"
        assert col.upper_camel_plural == "Tags"

    def test_type_names(self):
        col = Column(
            name="tags",
            type=ColumnType(BaseType.STRING, array=True, length=MAX_LENGTH),
        )
        assert col.type_name == "[]string"
        assert col.base_type_name == "string"

    def test_nullable_column_type(self):
        col = Column(name="score", type=ColumnType(BaseType.FLOAT64))
        assert col.type_name == "*float64"


class TestKeyPart:
    def test_key_part_naming(self):
        part = KeyPart(column="album_ids", type="int64")
        assert part.name == "album_ids"
        assert part.name_db == "album_id"
        assert part.upper_camel == "AlbumId"
        assert part.lower_camel == "albumId"
        assert part.upper_camel_plural == "AlbumIds"

    def test_unresolved_key_part_has_empty_type(self):
        assert KeyPart(column="missing").type == ""


class TestTable:
    def test_table_defaults(self):
        table = Table(name="UserAccounts", key="userAccount")
        assert table.name_db == "UserAccount"
        assert table.upper_camel == "UserAccount"
        assert table.lower_camel == "userAccount"
        assert table.upper_camel_plural == "UserAccounts"
        assert table.lower_camel_plural == "userAccounts"
        assert table.short_name == "ua"
        assert table.kind is None
        assert not table.is_change_stream
        assert table.children == []
        assert table.ref_tables == []
        assert table.descendents == set()
        assert table.dependency_order == 0

    def test_change_stream_name_db_kept(self):
        table = Table(
            name="everything_streams",
            key="everythingStream",
            name_db="everything_stream",
            kind=CHANGE_STREAM_KIND,
        )
        assert table.is_change_stream
        assert table.upper_camel == "EverythingStream"
        assert table.short_name == "es"

    def test_edges_children_then_ref_tables(self):
        table = Table(name="Users", key="user", children=["b"], ref_tables=["a"])
        assert table.edges == ["b", "a"]

    def test_get_column(self):
        col = Column(name="id", type=ColumnType(BaseType.INT64))
        table = Table(name="Users", key="user", columns=[col])
        assert table.get_column("id") is col
        assert table.get_column("missing") is None


class TestSchema:
    def test_lookups(self):
        users = Table(name="Users", key="user")
        posts = Table(name="Posts", key="post")
        schema = Schema(tables=[users, posts])

        assert schema.get_table("user") is users
        assert schema.get_table("Users") is None
        assert schema.by_name() == {"Users": users, "Posts": posts}
        assert schema.by_key() == {"user": users, "post": posts}
