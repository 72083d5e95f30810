"""Export the enriched schema model as a JSON or YAML document."""

import json
from typing import Any

import yaml

from ddlmeta.exceptions import ExportError
from ddlmeta.schema.models import Column, Index, KeyPart, Schema, Table

__all__ = [
    "DEFAULT_FILE_KIND",
    "OUTPUT_FORMATS",
    "table_to_dict",
    "schema_to_document",
    "export_json",
    "export_yaml",
    "render",
]

DEFAULT_FILE_KIND = "spanner"

OUTPUT_FORMATS = ("json", "yaml")


def schema_to_document(schema: Schema, file_kind: str = DEFAULT_FILE_KIND) -> dict[str, Any]:
    """Wrap the tables, in their current order, in the output document."""
    return {
        "kind": file_kind,
        "srcKind": file_kind,
        "data": [table_to_dict(t) for t in schema.tables],
    }


def table_to_dict(table: Table) -> dict[str, Any]:
    """Convert a Table model to a dictionary suitable for export."""
    data: dict[str, Any] = {}
    if table.kind:
        data["kind"] = table.kind

    data.update(
        {
            "namesDb": table.name,
            "nameDb": table.name_db,
            "Name": table.upper_camel,
            "name": table.lower_camel,
            "Names": table.upper_camel_plural,
            "names": table.lower_camel_plural,
            "n": table.short_name,
            "key": table.key,
            "fields": [_column_to_dict(c) for c in table.columns],
        }
    )

    if table.primary_key:
        data["primaryKey"] = [_key_part_to_dict(p) for p in table.primary_key]

    if table.interleave is not None:
        data["interleave"] = {
            "parent": table.interleave.parent,
            "onDelete": table.interleave.on_delete.value,
        }

    if table.indexes:
        data["indexes"] = [_index_to_dict(ix) for ix in table.indexes]

    if table.children:
        data["children"] = list(table.children)

    if table.ref_tables:
        data["refTables"] = list(table.ref_tables)

    if table.descendents:
        data["descendents"] = sorted(table.descendents)

    data["dependencyOrder"] = table.dependency_order
    return data


def _column_to_dict(col: Column) -> dict[str, Any]:
    """Convert a Column model to a dictionary."""
    return {
        "namesDb": col.name,
        "nameDb": col.name_db,
        "nameJson": col.json_key,
        "nameJsonGo": col.json_key_initialisms,
        "Name": col.upper_camel,
        "name": col.lower_camel,
        "Names": col.upper_camel_plural,
        "names": col.lower_camel_plural,
        "nameExact": col.exact_json,
        "NameExact": col.exact,
        "Type": col.type_name,
        "baseType": col.base_type_name,
        "isArray": col.type.array,
        "notNull": col.not_null,
        "key": col.key,
        "len": col.type.serialized_length,
    }


def _key_part_to_dict(part: KeyPart) -> dict[str, Any]:
    return {
        "namesDb": part.column,
        "nameDb": part.name_db,
        "Name": part.upper_camel,
        "name": part.lower_camel,
        "Names": part.upper_camel_plural,
        "names": part.lower_camel_plural,
        "Type": part.type,
        "baseType": part.type,
    }


def _index_to_dict(index: Index) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": index.name,
        "table": index.table,
        "fields": [_key_part_to_dict(p) for p in index.columns],
    }
    if index.unique:
        data["unique"] = True
    if index.null_filtered:
        data["nullFiltered"] = True
    if index.watch_all:
        data["watchAll"] = True
    if index.storing:
        data["storing"] = list(index.storing)
    if index.interleave:
        data["interleave"] = index.interleave
    return data


def export_json(schema: Schema, file_kind: str = DEFAULT_FILE_KIND) -> str:
    """Export the schema document as tab-indented JSON."""
    return json.dumps(
        schema_to_document(schema, file_kind), indent="\t", ensure_ascii=False
    )


def export_yaml(schema: Schema, file_kind: str = DEFAULT_FILE_KIND) -> str:
    """Export the schema document as YAML."""
    return yaml.dump(
        schema_to_document(schema, file_kind),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def render(schema: Schema, output_format: str, file_kind: str = DEFAULT_FILE_KIND) -> str:
    """Render the schema document in ``output_format`` (json or yaml)."""
    if output_format == "json":
        return export_json(schema, file_kind)
    elif output_format == "yaml":
        return export_yaml(schema, file_kind)
    raise ExportError(
        f"Unknown output format '{output_format}'. Expected one of: {', '.join(OUTPUT_FORMATS)}"
    )
