"""CLI main module with subcommands for check, get, dump, and export.

Usage:
    python -m parfile.cli check --config run.par
    python -m parfile.cli get --config run.par mat 1 0 --type int
    python -m parfile.cli dump --config run.par --out normalized.par
    python -m parfile.cli export --config run.par --out run.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from parfile.core.config import export_store
from parfile.core.errors import ParameterError
from parfile.core.logging import setup_logging
from parfile.core.store import ParameterStore
from parfile.core.types import PyScalar

# Signature shared by the typed getters
Getter = Callable[..., PyScalar]


def cmd_check(args: argparse.Namespace) -> int:
    """Parse a parameter file and list its fields with their shapes."""
    store = ParameterStore(args.config)
    print(f"Parameter file: {args.config}")
    print("-" * 40)
    for field in store:
        shape = "x".join(str(s) for s in field.dim_sizes) if field.num_dim else "single"
        kinds = sorted({v.kind.value for v in field.values})
        print(f"  {field.name:24} {shape:12} {','.join(kinds)}")
    print("-" * 40)
    print(f"{len(store)} field(s) OK")
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Query one value with echo enabled, the way a driver would read it."""
    store = ParameterStore(args.config, echo=True, echo_stream=sys.stdout)
    getters: dict[str, Getter] = {
        "int": store.get_int,
        "double": store.get_double,
        "string": store.get_string,
    }
    getters[args.type](args.name, *args.indices)
    return 0


def cmd_dump(args: argparse.Namespace) -> int:
    """Rewrite a parameter file in normalized form."""
    store = ParameterStore(args.config)
    if args.out is None:
        store.dump(sys.stdout)
    else:
        store.dump_to_file(args.out)
        print("Wrote", args.out)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export the fields of a parameter file as YAML or JSON."""
    store = ParameterStore(args.config)
    print("Wrote", export_store(store, args.out))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parfile.cli",
        description="Parameter file inspection CLI",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Optional JSON lines log file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # Check subcommand
    parser_check = subparsers.add_parser(
        "check",
        help="Parse a parameter file and list its fields",
    )
    parser_check.add_argument(
        "--config",
        "-c",
        type=Path,
        required=True,
        help="Path to parameter file",
    )
    parser_check.set_defaults(func=cmd_check)

    # Get subcommand
    parser_get = subparsers.add_parser(
        "get",
        help="Print one value as 'name = value'",
    )
    parser_get.add_argument("--config", "-c", type=Path, required=True, help="Path to parameter file")
    parser_get.add_argument("name", help="Field name")
    parser_get.add_argument("indices", type=int, nargs="*", help="Indices into an array field")
    parser_get.add_argument(
        "--type",
        "-t",
        choices=["int", "double", "string"],
        default="string",
        help="Value type to request (default: string)",
    )
    parser_get.set_defaults(func=cmd_get)

    # Dump subcommand
    parser_dump = subparsers.add_parser(
        "dump",
        help="Rewrite a parameter file in normalized form",
    )
    parser_dump.add_argument("--config", "-c", type=Path, required=True, help="Path to parameter file")
    parser_dump.add_argument(
        "--out",
        "-o",
        type=Path,
        default=None,
        help="Output file (default: stdout)",
    )
    parser_dump.set_defaults(func=cmd_dump)

    # Export subcommand
    parser_export = subparsers.add_parser(
        "export",
        help="Export fields as YAML or JSON",
    )
    parser_export.add_argument("--config", "-c", type=Path, required=True, help="Path to parameter file")
    parser_export.add_argument(
        "--out",
        "-o",
        type=Path,
        required=True,
        help="Output file; .yaml/.yml writes YAML, anything else JSON",
    )
    parser_export.set_defaults(func=cmd_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_file, getattr(logging, args.log_level))
    try:
        return int(args.func(args) or 0)
    except ParameterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
