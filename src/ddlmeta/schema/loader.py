"""Load DDL declarations from YAML schema files."""

import re
from pathlib import Path
from typing import Any

import yaml

from ddlmeta.exceptions import SchemaLoadError
from ddlmeta.schema.ddl import (
    ChangeStreamDecl,
    ColumnDecl,
    ConstraintDecl,
    Declaration,
    ForeignKeyDecl,
    IndexDecl,
    InterleaveDecl,
    KeyPartDecl,
    OtherDecl,
    TableDecl,
    WatchDecl,
)
from ddlmeta.types import MAX_LENGTH, BaseType, ColumnType, OnDelete

__all__ = ["load_declarations", "parse_declarations", "parse_column_type"]

VALID_TABLE_FIELDS = {"name", "columns", "primary_key", "interleave", "constraints"}

VALID_COLUMN_FIELDS = {"name", "type", "not_null"}

VALID_INDEX_FIELDS = {
    "name",
    "table",
    "columns",
    "unique",
    "null_filtered",
    "storing",
    "interleave",
}

VALID_CHANGE_STREAM_FIELDS = {"name", "watch"}

VALID_WATCH_FIELDS = {"table", "columns"}

VALID_CONSTRAINT_FIELDS = {"name", "foreign_key", "check"}

VALID_FOREIGN_KEY_FIELDS = {"columns", "ref_table", "ref_columns"}

TYPE_PATTERN = re.compile(
    r"^(?P<array>ARRAY\s*<\s*)?"
    r"(?P<base>[A-Z0-9]+)"
    r"(?:\s*\(\s*(?P<length>MAX|\d+)\s*\))?"
    r"(?P<close>\s*>)?$",
    re.IGNORECASE,
)

BASE_TYPES = {
    "BOOL": BaseType.BOOL,
    "INT64": BaseType.INT64,
    "FLOAT64": BaseType.FLOAT64,
    "NUMERIC": BaseType.NUMERIC,
    "STRING": BaseType.STRING,
    "BYTES": BaseType.BYTES,
    "DATE": BaseType.DATE,
    "TIMESTAMP": BaseType.TIMESTAMP,
    "JSON": BaseType.JSON,
}

ON_DELETE_VALUES = {
    "no_action": OnDelete.NO_ACTION,
    "no-action": OnDelete.NO_ACTION,
    "cascade": OnDelete.CASCADE,
}


def load_declarations(schema_path: Path) -> list[Declaration]:
    """Load declarations from a YAML file or a directory of YAML files.

    Files in a directory are read in sorted order and their statements
    concatenated.
    """
    if schema_path.is_file():
        return _load_file(schema_path)
    elif schema_path.is_dir():
        declarations: list[Declaration] = []
        for yaml_file in sorted(schema_path.glob("*.yaml")):
            declarations.extend(_load_file(yaml_file))
        return declarations
    else:
        raise SchemaLoadError(f"Schema path does not exist: {schema_path}")


def _load_file(file_path: Path) -> list[Declaration]:
    try:
        with open(file_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML in {file_path}: {e}") from e

    if data is None:
        raise SchemaLoadError(f"Empty YAML file: {file_path}")
    return parse_declarations(data)


def parse_declarations(data: Any) -> list[Declaration]:
    """Parse the ``statements`` list of a schema document."""
    if not isinstance(data, dict) or "statements" not in data:
        raise SchemaLoadError("Schema document missing 'statements' list")

    statements = data["statements"] or []
    if not isinstance(statements, list):
        raise SchemaLoadError("'statements' must be a list")

    declarations: list[Declaration] = []
    for position, statement in enumerate(statements, start=1):
        if not isinstance(statement, dict) or len(statement) != 1:
            raise SchemaLoadError(
                f"Statement {position} must be a mapping with a single kind key"
            )
        ((kind, body),) = statement.items()
        declarations.append(_parse_statement(kind, body or {}))
    return declarations


def _parse_statement(kind: str, body: Any) -> Declaration:
    if kind == "create_table":
        return _parse_table(body)
    elif kind == "create_index":
        return _parse_index(body)
    elif kind == "create_change_stream":
        return _parse_change_stream(body)
    else:
        return OtherDecl(kind=kind, data=body)


def _check_fields(data: Any, valid: set[str], what: str) -> None:
    if not isinstance(data, dict):
        raise SchemaLoadError(f"{what} definition must be a mapping")
    unknown_fields = set(data.keys()) - valid
    if unknown_fields:
        raise SchemaLoadError(
            f"Unknown field(s) in {what} definition: {', '.join(sorted(unknown_fields))}"
        )


def _list_field(data: dict, key: str, what: str) -> list:
    """Return the list stored under ``key``; a missing or empty value is []."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SchemaLoadError(f"'{key}' of {what} must be a list")
    return list(value)


def _require_name(data: dict, what: str) -> str:
    name = data.get("name")
    if not name:
        raise SchemaLoadError(f"{what} definition missing 'name' field")
    return str(name)


def _parse_table(data: Any) -> TableDecl:
    _check_fields(data, VALID_TABLE_FIELDS, "table")
    name = _require_name(data, "Table")

    what = f"table '{name}'"
    columns = [_parse_column(col, name) for col in _list_field(data, "columns", what)]

    seen = set()
    for col in columns:
        if col.name in seen:
            raise SchemaLoadError(
                f"Duplicate column name '{col.name}' in table '{name}'"
            )
        seen.add(col.name)

    interleave = None
    if il_data := data.get("interleave"):
        interleave = _parse_interleave(il_data, name)

    return TableDecl(
        name=name,
        columns=columns,
        primary_key=[
            _parse_key_part(p) for p in _list_field(data, "primary_key", what)
        ],
        interleave=interleave,
        constraints=[
            _parse_constraint(c, name) for c in _list_field(data, "constraints", what)
        ],
    )


def _parse_column(data: Any, table: str) -> ColumnDecl:
    _check_fields(data, VALID_COLUMN_FIELDS, "column")

    name = data.get("name")
    if not name:
        raise SchemaLoadError(f"Column definition in '{table}' missing 'name' field")

    col_type = data.get("type")
    if not col_type:
        raise SchemaLoadError(f"Column '{name}' missing 'type' field")

    return ColumnDecl(
        name=name,
        type=parse_column_type(str(col_type)),
        not_null=bool(data.get("not_null", False)),
    )


def parse_column_type(text: str) -> ColumnType:
    """Parse a column type such as ``INT64``, ``STRING(MAX)`` or ``ARRAY<BYTES(16)>``."""
    match = TYPE_PATTERN.match(text.strip())
    if not match or bool(match.group("array")) != bool(match.group("close")):
        raise SchemaLoadError(f"Invalid column type '{text}'")

    base = BASE_TYPES.get(match.group("base").upper())
    if base is None:
        raise SchemaLoadError(f"Unknown column type '{match.group('base')}'")

    length = 0
    if raw_length := match.group("length"):
        if base not in (BaseType.STRING, BaseType.BYTES):
            raise SchemaLoadError(f"Type '{text}' does not take a length")
        length = MAX_LENGTH if raw_length.upper() == "MAX" else int(raw_length)

    return ColumnType(base=base, array=bool(match.group("array")), length=length)


def _parse_key_part(data: Any) -> KeyPartDecl:
    if isinstance(data, str):
        return KeyPartDecl(column=data)
    if isinstance(data, dict) and data.get("column"):
        return KeyPartDecl(column=data["column"], desc=bool(data.get("desc", False)))
    raise SchemaLoadError(f"Invalid key part: {data!r}")


def _parse_interleave(data: Any, table: str) -> InterleaveDecl:
    if isinstance(data, str):
        return InterleaveDecl(parent=data)
    if not isinstance(data, dict) or not data.get("parent"):
        raise SchemaLoadError(f"Interleave of '{table}' missing 'parent' field")

    on_delete_raw = str(data.get("on_delete", "no_action")).lower()
    on_delete = ON_DELETE_VALUES.get(on_delete_raw.replace(" ", "_"))
    if on_delete is None:
        raise SchemaLoadError(
            f"Invalid on_delete '{data.get('on_delete')}' in table '{table}'"
        )
    return InterleaveDecl(parent=data["parent"], on_delete=on_delete)


def _parse_constraint(data: Any, table: str) -> ConstraintDecl:
    _check_fields(data, VALID_CONSTRAINT_FIELDS, "constraint")

    foreign_key = None
    if fk_data := data.get("foreign_key"):
        _check_fields(fk_data, VALID_FOREIGN_KEY_FIELDS, "foreign key")
        if not fk_data.get("ref_table"):
            raise SchemaLoadError(
                f"Foreign key in table '{table}' missing 'ref_table' field"
            )
        what = f"foreign key of '{table}'"
        columns = _list_field(fk_data, "columns", what)
        ref_columns = _list_field(fk_data, "ref_columns", what)
        if len(columns) != len(ref_columns):
            raise SchemaLoadError(
                f"Foreign key in table '{table}' has {len(columns)} columns "
                f"but {len(ref_columns)} referenced columns"
            )
        foreign_key = ForeignKeyDecl(
            columns=columns,
            ref_table=fk_data["ref_table"],
            ref_columns=ref_columns,
        )

    return ConstraintDecl(
        name=data.get("name") or "",
        foreign_key=foreign_key,
        check=data.get("check"),
    )


def _parse_index(data: Any) -> IndexDecl:
    _check_fields(data, VALID_INDEX_FIELDS, "index")
    name = _require_name(data, "Index")

    table = data.get("table")
    if not table:
        raise SchemaLoadError(f"Index '{name}' missing 'table' field")

    what = f"index '{name}'"
    return IndexDecl(
        name=name,
        table=table,
        columns=[_parse_key_part(p) for p in _list_field(data, "columns", what)],
        unique=bool(data.get("unique", False)),
        null_filtered=bool(data.get("null_filtered", False)),
        storing=_list_field(data, "storing", what),
        interleave=data.get("interleave"),
    )


def _parse_change_stream(data: Any) -> ChangeStreamDecl:
    _check_fields(data, VALID_CHANGE_STREAM_FIELDS, "change stream")
    name = _require_name(data, "Change stream")

    watch = []
    for w_data in _list_field(data, "watch", f"change stream '{name}'"):
        if isinstance(w_data, str):
            watch.append(WatchDecl(table=w_data, all_columns=True))
            continue
        _check_fields(w_data, VALID_WATCH_FIELDS, "watch")
        if not w_data.get("table"):
            raise SchemaLoadError(f"Watch clause of '{name}' missing 'table' field")
        all_columns = w_data.get("columns") is None
        watch.append(
            WatchDecl(
                table=w_data["table"],
                columns=_list_field(w_data, "columns", f"watch clause of '{name}'"),
                all_columns=all_columns,
            )
        )

    return ChangeStreamDecl(name=name, watch=watch)
