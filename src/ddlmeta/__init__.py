"""Schema metadata enrichment for code generation templates."""

__version__ = "0.1.0"
