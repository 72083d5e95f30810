"""Exception classes for ddlmeta."""

__all__ = [
    "DdlmetaError",
    "SchemaLoadError",
    "SchemaModelError",
    "DuplicateTableError",
    "ExportError",
    "ConfigError",
]


class DdlmetaError(Exception):
    """Base exception for ddlmeta."""


class SchemaLoadError(DdlmetaError):
    """Error loading schema declaration files."""


class SchemaModelError(DdlmetaError):
    """Schema declarations do not form a consistent model."""


class DuplicateTableError(SchemaModelError):
    """Two declarations resolve to the same table key or name."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(message)


class ExportError(DdlmetaError):
    """Error rendering the output document."""


class ConfigError(DdlmetaError):
    """Error in configuration."""
