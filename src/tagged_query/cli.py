"""Command line harness: compile records declared in a schema file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from tagged_query.compiler import QueryCompiler
from tagged_query.errors import CompilationError
from tagged_query.parsing import RecordParser
from tagged_query.types import Record, RecordDescriptor

MODES = ("filter", "select", "count", "projection")


def load_values(raw: str) -> dict[str, Any]:
    """Parse a JSON object of field values."""
    values = json.loads(raw)
    if not isinstance(values, dict):
        raise ValueError("Field values must be a JSON object")
    return values


def run(args: argparse.Namespace) -> str:
    """Produce the fragment requested by parsed command line arguments."""
    schema_text = args.schema.read_text()
    registry = RecordParser().parse(schema_text)
    descriptor: RecordDescriptor = registry.get_or_raise(args.record)

    compiler = QueryCompiler()
    if args.mode == "select":
        return compiler.select_header(descriptor, args.alias)
    if args.mode == "count":
        return compiler.count_header(descriptor, args.alias)
    if args.mode == "projection":
        return compiler.projection_header(descriptor, args.follow_up)

    if args.values_file:
        values = load_values(args.values_file.read_text())
    else:
        values = load_values(args.values)
    return compiler.compile(Record(descriptor, values), args.prefix)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        prog="tagq",
        description="Compile tagged records into query fragments",
    )
    arg_parser.add_argument(
        "schema",
        type=Path,
        help="Path to a record schema file",
    )
    arg_parser.add_argument(
        "record",
        help="Simple or qualified name of the record to compile",
    )
    arg_parser.add_argument(
        "-m", "--mode",
        choices=MODES,
        default="filter",
        help="Fragment to produce (default: filter)",
    )
    values_group = arg_parser.add_mutually_exclusive_group()
    values_group.add_argument(
        "--values",
        default="{}",
        help="Field values as a JSON object (filter mode)",
    )
    values_group.add_argument(
        "--values-file",
        type=Path,
        help="Read field values from a JSON file (filter mode)",
    )
    arg_parser.add_argument(
        "-p", "--prefix",
        help="Text placed before the filter clause",
    )
    arg_parser.add_argument(
        "-a", "--alias",
        help="Entity alias for select and count headers",
    )
    arg_parser.add_argument(
        "--follow-up",
        help="Text appended after a projection header",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    args = arg_parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.schema.exists():
        print(f"Error: Schema file not found: {args.schema}", file=sys.stderr)
        return 1
    if args.values_file and not args.values_file.exists():
        print(f"Error: Values file not found: {args.values_file}", file=sys.stderr)
        return 1

    try:
        print(run(args))
    except (CompilationError, SyntaxError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
