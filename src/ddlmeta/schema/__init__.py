"""Schema declarations, model, relationship graph and export."""

from ddlmeta.schema.builder import ModelBuilder, build_schema
from ddlmeta.schema.graph import (
    build_relationships,
    compute_descendents,
    resolve_dependency_order,
)
from ddlmeta.schema.models import (
    Column,
    ForeignKey,
    Index,
    Interleave,
    KeyPart,
    Schema,
    Table,
    TableConstraint,
)

__all__ = [
    "Column",
    "ForeignKey",
    "Index",
    "Interleave",
    "KeyPart",
    "ModelBuilder",
    "Schema",
    "Table",
    "TableConstraint",
    "build_relationships",
    "build_schema",
    "compute_descendents",
    "resolve_dependency_order",
]
