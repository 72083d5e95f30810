"""Command-line interface for ddlmeta."""

import argparse
import logging
import sys
from pathlib import Path

from ddlmeta.config import Config
from ddlmeta.exceptions import ConfigError, DdlmetaError
from ddlmeta.runner import generate, load_schema
from ddlmeta.schema.exporter import OUTPUT_FORMATS

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CHANGED = 2


def main() -> int:
    """Main entry point."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        prog="ddlmeta",
        description="Schema metadata generator for code generation templates",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Write the enriched schema document"
    )
    generate_parser.add_argument(
        "schema_path", nargs="?", help="Schema YAML file or directory"
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        help="Output file path, '-' for stdout (default: schema path with new suffix)",
    )
    generate_parser.add_argument(
        "--format", dest="output_format", choices=OUTPUT_FORMATS, default=None
    )
    generate_parser.add_argument("--kind", dest="file_kind", help="Document kind tag")
    generate_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        default=None,
        help="Regenerate even if the output is up to date",
    )
    generate_parser.add_argument(
        "--changed",
        action="store_true",
        default=None,
        help=f"Exit with code {EXIT_CHANGED} when the output was rewritten",
    )
    generate_parser.add_argument(
        "--debug", action="store_true", default=None, help="Verbose logging"
    )
    generate_parser.add_argument("--config", dest="config_file", help="Config file")

    validate_parser = subparsers.add_parser(
        "validate", help="Load the schema and list tables in dependency order"
    )
    validate_parser.add_argument("schema_path", type=Path)

    args = parser.parse_args()

    if args.command == "generate":
        return cmd_generate(args)
    elif args.command == "validate":
        return cmd_validate(args)
    else:
        print(f"Command '{args.command}' not yet implemented", file=sys.stderr)
        return EXIT_ERROR


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate the schema document."""
    try:
        config = Config.from_env(
            schema_path=args.schema_path,
            output=args.output,
            output_format=args.output_format,
            file_kind=args.file_kind,
            force=args.force,
            changed=args.changed,
            debug=args.debug,
            config_file=args.config_file,
        )
        if config.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        result = generate(config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except DdlmetaError as e:
        print(f"Generation error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if result.written and config.changed:
        return EXIT_CHANGED
    return EXIT_OK


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate schema files and show the dependency order."""
    try:
        schema = load_schema(args.schema_path)
    except DdlmetaError as e:
        print(f"Validation error: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(f"Validated {len(schema.tables)} tables:")
    for table in schema.tables:
        kind = " [change stream]" if table.is_change_stream else ""
        print(
            f"  {table.dependency_order}. {table.name}{kind} "
            f"({len(table.columns)} columns, {len(table.descendents)} descendents)"
        )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
