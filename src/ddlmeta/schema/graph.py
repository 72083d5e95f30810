"""Relationship graph, descendant closure and dependency order of tables.

Edges run from a table to the tables that depend on it: from an interleave
parent to its children, and from a referenced table to every table holding a
foreign key to it. Tables reachable along those edges are emitted first.
"""

import functools
import logging

from ddlmeta.exceptions import SchemaModelError
from ddlmeta.schema.models import Schema, Table
from ddlmeta.types import TableKey

__all__ = [
    "build_relationships",
    "compute_descendents",
    "resolve_dependency_order",
    "compare_tables",
]

logger = logging.getLogger(__name__)


def build_relationships(schema: Schema) -> None:
    """Fill ``children`` and ``ref_tables`` of every table, sorted by key.

    Raises:
        SchemaModelError: If a table is interleaved in an unknown parent.
    """
    by_name = schema.by_name()
    added: set[tuple[TableKey, TableKey]] = set()

    for table in schema.tables:
        if table.interleave is not None:
            parent = by_name.get(table.interleave.parent)
            if parent is None:
                raise SchemaModelError(
                    f"Table '{table.name}' is interleaved in unknown table "
                    f"'{table.interleave.parent}'"
                )
            parent.children.append(table.key)

        for constraint in table.constraints:
            ref_name = constraint.foreign_key.ref_table
            referenced = by_name.get(ref_name)
            if referenced is None:
                logger.debug(
                    f"Foreign key '{constraint.name}' on '{table.name}' "
                    f"references unknown table '{ref_name}'"
                )
                continue
            pair = (referenced.key, table.key)
            if pair in added:
                continue
            referenced.ref_tables.append(table.key)
            added.add(pair)

    for table in schema.tables:
        table.children.sort()
        table.ref_tables.sort()


def compute_descendents(schema: Schema) -> None:
    """Set ``descendents`` of every table to its transitive closure.

    Each table starts from its direct edges and expands with a visited set,
    so cyclic schemas terminate; a table on a cycle lists itself.
    """
    edges = {t.key: set(t.edges) for t in schema.tables}
    for table in schema.tables:
        table.descendents = _reachable(edges[table.key], edges)


def _reachable(
    start: set[TableKey], edges: dict[TableKey, set[TableKey]]
) -> set[TableKey]:
    visited: set[TableKey] = set()
    pending = list(start)
    while pending:
        key = pending.pop()
        if key in visited:
            continue
        visited.add(key)
        pending.extend(edges.get(key, set()) - visited)
    return visited


def compare_tables(a: Table, b: Table) -> int:
    """Order two tables: descendants first, then fewer descendants, then key."""
    a_under_b = a.key in b.descendents
    b_under_a = b.key in a.descendents
    if a_under_b != b_under_a:
        return -1 if a_under_b else 1
    if len(a.descendents) != len(b.descendents):
        return -1 if len(a.descendents) < len(b.descendents) else 1
    if a.key != b.key:
        return -1 if a.key < b.key else 1
    return 0


def resolve_dependency_order(schema: Schema) -> None:
    """Sort tables with ``compare_tables`` and assign 1-based dependency_order."""
    schema.tables = sorted(schema.tables, key=functools.cmp_to_key(compare_tables))
    for position, table in enumerate(schema.tables, start=1):
        table.dependency_order = position
