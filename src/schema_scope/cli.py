"""Command line interface for schema-scope."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import FilterConfig, filter_config_from_dict, load_filter_config
from .errors import SchemaScopeError
from .exporter import export_schema_pack, schema_to_dict
from .filter import FilterOption, filter_schema, separate_tables_included_or_not
from .graph_builder import build_graph_from_schema, summarize_graph
from .metadata_loader import load_schema

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--schema", type=Path, required=True, help="Path to the schema JSON document")
    parser.add_argument("--config", type=Path, help="JSON filter configuration file")
    parser.add_argument(
        "--include",
        action="append",
        default=None,
        help="Table name pattern to include (repeatable, '*' wildcard)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        help="Table name pattern to exclude (repeatable, '*' wildcard)",
    )
    parser.add_argument(
        "--include-label",
        dest="include_labels",
        action="append",
        default=None,
        help="Label pattern on tables or columns to include (repeatable)",
    )
    parser.add_argument(
        "--distance",
        type=int,
        help="Relation hops of neighbouring tables kept with each included table",
    )
    parser.add_argument(
        "--both-directions",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Follow relations towards child tables too when expanding (--no-both-directions: child to parent only)",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scope relational schemas down to relevant tables")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser("inspect", help="Inspect a schema document")
    inspect_parser.add_argument("--schema", type=Path, required=True, help="Path to the schema JSON document")

    separate_parser = subparsers.add_parser(
        "separate", help="Show which tables a filter keeps, without modifying anything"
    )
    _add_filter_arguments(separate_parser)
    separate_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    filter_parser = subparsers.add_parser("filter", help="Filter a schema and write the result")
    _add_filter_arguments(filter_parser)
    filter_parser.add_argument(
        "--output",
        type=Path,
        help="Where to write the filtered schema document (stdout when omitted)",
    )

    export_parser = subparsers.add_parser("export-pack", help="Filter a schema and export a schema pack")
    _add_filter_arguments(export_parser)
    export_parser.add_argument(
        "--output-dir",
        type=Path,
        required=True,
        help="Destination directory for the schema pack",
    )

    return parser.parse_args(argv)


def build_filter_option(args: argparse.Namespace) -> FilterOption:
    """Merge the config file (if any) with command line overrides."""

    config = load_filter_config(args.config) if args.config else FilterConfig()
    overrides = config.model_dump()
    if args.include is not None:
        overrides["include"] = args.include
    if args.exclude is not None:
        overrides["exclude"] = args.exclude
    if args.include_labels is not None:
        overrides["include_labels"] = args.include_labels
    if args.distance is not None:
        overrides["distance"] = args.distance
    if args.both_directions is not None:
        overrides["both_directions"] = args.both_directions
    return filter_config_from_dict(overrides).to_option()


def cmd_inspect(schema_path: Path) -> None:
    schema = load_schema(schema_path)
    graph = build_graph_from_schema(schema)
    labels = {label.name for table in schema.tables for label in table.labels}
    labels.update(label.name for table in schema.tables for column in table.columns for label in column.labels)
    print(f"Schema: {schema.name or schema_path.stem}")
    if schema.driver is not None:
        print(f"  Driver: {schema.driver.name} {schema.driver.database_version}".rstrip())
    print(f"  Tables: {schema.table_count}")
    print(f"  Columns: {schema.column_count}")
    print(f"  Relations: {len(schema.relations)}")
    print(f"  Labels: {', '.join(sorted(labels)) if labels else '-'}")
    print(json.dumps(summarize_graph(graph), indent=2))


def cmd_separate(args: argparse.Namespace) -> None:
    schema = load_schema(args.schema)
    opt = build_filter_option(args)
    includes, excludes = separate_tables_included_or_not(schema, opt)

    if args.json:
        print(
            json.dumps(
                {
                    "included": [t.name for t in includes],
                    "excluded": [t.name for t in excludes],
                },
                indent=2,
            )
        )
        return

    print(f"Included ({len(includes)}):")
    for table in includes:
        print(f"  + {table.name}")
    print(f"Excluded ({len(excludes)}):")
    for table in excludes:
        print(f"  - {table.name}")


def cmd_filter(args: argparse.Namespace) -> None:
    schema = load_schema(args.schema)
    opt = build_filter_option(args)
    filter_schema(schema, opt)

    document = json.dumps(schema_to_dict(schema), indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(document + "\n", encoding="utf-8")
        logger.info(f"Filtered schema saved to {args.output}")
    else:
        print(document)


def cmd_export_pack(args: argparse.Namespace) -> None:
    schema = load_schema(args.schema)
    opt = build_filter_option(args)
    separation = separate_tables_included_or_not(schema, opt)
    filter_schema(schema, opt)
    outputs = export_schema_pack(schema, args.output_dir, separation)
    print(f"Schema pack exported to {args.output_dir}")
    for kind, path in outputs.items():
        print(f"  - {kind}: {path}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "inspect":
            cmd_inspect(args.schema)
        elif args.command == "separate":
            cmd_separate(args)
        elif args.command == "filter":
            cmd_filter(args)
        elif args.command == "export-pack":
            cmd_export_pack(args)
        else:
            raise ValueError(f"Unknown command: {args.command}")
    except (SchemaScopeError, FileNotFoundError) as exc:
        logger.error(str(exc))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
