"""Enrichment pipeline and output generation."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import ddlmeta
from ddlmeta.config import Config
from ddlmeta.schema.builder import build_schema
from ddlmeta.schema.ddl import Declaration
from ddlmeta.schema.exporter import render
from ddlmeta.schema.graph import (
    build_relationships,
    compute_descendents,
    resolve_dependency_order,
)
from ddlmeta.schema.loader import load_declarations
from ddlmeta.schema.models import Schema

__all__ = ["GenerateResult", "enrich", "load_schema", "is_up_to_date", "generate"]

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Outcome of a generate run."""

    output_path: Optional[Path]
    written: bool
    schema: Optional[Schema] = None

    @property
    def skipped(self) -> bool:
        return not self.written


def enrich(declarations: Sequence[Declaration]) -> Schema:
    """Build the model and derive relationships, descendents and order."""
    schema = build_schema(declarations)
    build_relationships(schema)
    compute_descendents(schema)
    resolve_dependency_order(schema)
    return schema


def load_schema(schema_path: Path) -> Schema:
    """Load declarations from ``schema_path`` and enrich them."""
    return enrich(load_declarations(schema_path))


def _latest_mtime(paths: Sequence[Path]) -> float:
    return max((p.stat().st_mtime for p in paths if p.exists()), default=0.0)


def _input_paths(schema_path: Path) -> list[Path]:
    paths = [Path(ddlmeta.__file__).parent]
    paths.extend(Path(ddlmeta.__file__).parent.rglob("*.py"))
    if schema_path.is_dir():
        paths.append(schema_path)
        paths.extend(sorted(schema_path.glob("*.yaml")))
    else:
        paths.append(schema_path)
    return paths


def is_up_to_date(schema_path: Path, output_path: Path) -> bool:
    """True when the output is at least as new as the schema and the package."""
    if not output_path.exists():
        return False
    input_time = _latest_mtime(_input_paths(schema_path))
    return 0 < input_time <= output_path.stat().st_mtime


def generate(config: Config) -> GenerateResult:
    """Load, enrich and write the schema document described by ``config``.

    Nothing is written unless the whole document rendered successfully.
    """
    config.validate()
    schema_path = Path(config.schema_path)
    output_path = config.resolve_output_path()

    if not config.force and output_path is not None:
        if is_up_to_date(schema_path, output_path):
            logger.debug(f"Skipping {output_path}: no input has changed (use -f)")
            return GenerateResult(output_path=output_path, written=False)

    schema = load_schema(schema_path)
    content = render(schema, config.output_format, config.file_kind)

    if output_path is None:
        sys.stdout.write(content)
    else:
        output_path.write_text(content)
        logger.info(f"Wrote {len(schema.tables)} tables to {output_path}")

    return GenerateResult(output_path=output_path, written=True, schema=schema)
