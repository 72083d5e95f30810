"""Configuration management for ddlmeta."""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ddlmeta.exceptions import ConfigError
from ddlmeta.schema.exporter import DEFAULT_FILE_KIND, OUTPUT_FORMATS

CONFIG_SECTION = "ddlmeta"
DEFAULT_CONFIG_FILE = "ddlmeta.cfg"
STDOUT = "-"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def load_config_file(path: Path, section: str = CONFIG_SECTION) -> dict[str, str]:
    """Load settings from the ``[ddlmeta]`` section of an INI file.

    Args:
        path: Config file path; a missing file yields no settings.
        section: Section name to read.

    Returns:
        Dict of raw string values from the section.
    """
    if not path.is_file():
        return {}

    config = configparser.ConfigParser()
    try:
        config.read(path)
    except configparser.Error as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    if section not in config:
        return {}
    return {k: v.strip() for k, v in config[section].items()}


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean setting from env or config file text."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: '{value}'")


@dataclass
class Config:
    """Configuration for ddlmeta."""

    schema_path: Optional[str] = None
    output: Optional[str] = None
    output_format: str = "json"
    file_kind: str = DEFAULT_FILE_KIND
    force: bool = False
    changed: bool = False
    debug: bool = False

    @classmethod
    def from_env(
        cls,
        *,
        schema_path: Optional[str] = None,
        output: Optional[str] = None,
        output_format: Optional[str] = None,
        file_kind: Optional[str] = None,
        force: Optional[bool] = None,
        changed: Optional[bool] = None,
        debug: Optional[bool] = None,
        config_file: Optional[str] = None,
    ) -> "Config":
        """Load configuration from env vars and ddlmeta.cfg, with CLI overrides.

        Priority (highest to lowest):
        1. Explicit parameters (CLI args)
        2. Environment variables (DDLMETA_*)
        3. [ddlmeta] section of the config file
        """
        cfg_path = config_file or os.environ.get("DDLMETA_CONFIG", DEFAULT_CONFIG_FILE)
        file_cfg = load_config_file(Path(cfg_path))

        def resolve(explicit, env_key, cfg_key):
            if explicit is not None:
                return explicit
            env_val = os.environ.get(env_key)
            if env_val is not None:
                return env_val
            return file_cfg.get(cfg_key)

        def resolve_bool(explicit, env_key, cfg_key):
            if explicit is not None:
                return explicit
            value = resolve(None, env_key, cfg_key)
            return parse_bool(value, env_key) if value is not None else False

        return cls(
            schema_path=resolve(schema_path, "DDLMETA_SCHEMA", "schema"),
            output=resolve(output, "DDLMETA_OUTPUT", "output"),
            output_format=resolve(output_format, "DDLMETA_FORMAT", "format") or "json",
            file_kind=resolve(file_kind, "DDLMETA_FILE_KIND", "file_kind")
            or DEFAULT_FILE_KIND,
            force=resolve_bool(force, "DDLMETA_FORCE", "force"),
            changed=resolve_bool(changed, "DDLMETA_CHANGED", "changed"),
            debug=resolve_bool(debug, "DDLMETA_DEBUG", "debug"),
        )

    def validate(self) -> None:
        """Validate that the settings needed to generate output are present.

        Raises:
            ConfigError: If the schema path is missing or the format is unknown.
        """
        problems = []
        if not self.schema_path:
            problems.append("schema path (use SCHEMA argument or DDLMETA_SCHEMA)")
        if self.output_format not in OUTPUT_FORMATS:
            problems.append(
                f"output format '{self.output_format}' "
                f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
            )
        if not self.file_kind:
            problems.append("file kind (use --kind or DDLMETA_FILE_KIND)")

        if problems:
            raise ConfigError(
                "Invalid configuration:\n  - " + "\n  - ".join(problems)
            )

    @property
    def writes_stdout(self) -> bool:
        return self.output == STDOUT

    def resolve_output_path(self) -> Optional[Path]:
        """Output file path, or None when writing to stdout.

        Defaults to the schema path with its suffix replaced by the format,
        or ``<stem>.meta.<format>`` when that would overwrite the schema file.
        """
        if self.writes_stdout:
            return None
        if self.output:
            return Path(self.output)
        if not self.schema_path:
            raise ConfigError("Cannot derive output path without a schema path")
        schema = Path(self.schema_path)
        if schema.name in ("", ".."):
            schema = schema.resolve()
        if not schema.name:
            raise ConfigError(
                f"Cannot derive output path from '{self.schema_path}'; use -o/--output"
            )
        derived = schema.with_suffix(f".{self.output_format}")
        if derived == schema:
            derived = schema.with_name(f"{schema.stem}.meta.{self.output_format}")
        return derived
