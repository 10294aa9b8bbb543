"""yolodb CLI entry points.

This module exposes inspection and maintenance commands for table files.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import YoloDbConfig
from core.errors import YoloDbError
from core.types import Record
from store.client import YoloDbClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="yolodb", description="yolodb table CLI")
    parser.add_argument("--data-root", help="Override YOLODB_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_tables_command(subparsers)
    _add_show_command(subparsers)
    _add_get_command(subparsers)
    _add_count_command(subparsers)
    _add_delete_command(subparsers)
    _add_truncate_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the yolodb CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    client = _build_client(args.data_root)
    try:
        if args.command == "tables":
            return _run_tables_command(client)
        if args.command == "show":
            return _run_show_command(client, args)
        if args.command == "get":
            return _run_get_command(client, args)
        if args.command == "count":
            return _run_count_command(client, args)
        if args.command == "delete":
            return _run_delete_command(client, args)
        if args.command == "truncate":
            return _run_truncate_command(client, args)
    except YoloDbError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> YoloDbClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = YoloDbConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return YoloDbClient(config)


def _run_tables_command(client: YoloDbClient) -> int:
    """Handle tables command."""
    for table_name in client.list_tables():
        print(table_name)
    return 0


def _run_show_command(client: YoloDbClient, args: argparse.Namespace) -> int:
    """Handle show command."""
    table = client.table(args.table, args.primary_key)
    for record in table.all():
        print(_render_record(record))
    return 0


def _run_get_command(client: YoloDbClient, args: argparse.Namespace) -> int:
    """Handle get command.

    Returns:
        Exit code; 1 when no record has the requested key.
    """
    table = client.table(args.table, args.primary_key)
    record = table.find_by_id(_convert_key(args.key, args.key_type))
    if record is None:
        print(f"not_found={args.key}")
        return 1
    print(_render_record(record))
    return 0


def _run_count_command(client: YoloDbClient, args: argparse.Namespace) -> int:
    """Handle count command."""
    table = client.table(args.table, args.primary_key)
    print(table.count())
    return 0


def _run_delete_command(client: YoloDbClient, args: argparse.Namespace) -> int:
    """Handle delete command."""
    table = client.table(args.table, args.primary_key)
    before = table.count()
    table.delete_many([_convert_key(key, args.key_type) for key in args.keys])
    print(f"deleted={before - table.count()}")
    return 0


def _run_truncate_command(client: YoloDbClient, args: argparse.Namespace) -> int:
    """Handle truncate command."""
    table = client.table(args.table, args.primary_key)
    table.truncate()
    print(f"truncated={table.table_name}")
    return 0


def _convert_key(raw_key: str, key_type: str) -> Any:
    """Convert a command-line key to the type stored in the table.

    Raises:
        YoloDbError: If the key cannot be parsed as ``key_type``.
    """
    if key_type == "str":
        return raw_key
    try:
        return int(raw_key)
    except ValueError as error:
        raise YoloDbError(
            f"Invalid key '{raw_key}' for --key-type int: expected an integer."
        ) from error


def _render_record(record: Record) -> str:
    # extended values (datetimes, sets, ...) are shown via str()
    return json.dumps(record, sort_keys=True, default=str, ensure_ascii=False)


def _add_tables_command(subparsers: Any) -> None:
    """Register tables subcommand."""
    subparsers.add_parser("tables", help="List table files under the data root")


def _add_show_command(subparsers: Any) -> None:
    """Register show subcommand."""
    parser = subparsers.add_parser("show", help="Print every record of a table")
    _add_table_arguments(parser)


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Print one record by primary key")
    _add_table_arguments(parser)
    parser.add_argument("key", help="Primary-key value")
    _add_key_type_argument(parser)


def _add_count_command(subparsers: Any) -> None:
    """Register count subcommand."""
    parser = subparsers.add_parser("count", help="Print the number of records")
    _add_table_arguments(parser)


def _add_delete_command(subparsers: Any) -> None:
    """Register delete subcommand."""
    parser = subparsers.add_parser("delete", help="Delete records by primary key")
    _add_table_arguments(parser)
    parser.add_argument("keys", nargs="+", help="Primary-key values to delete")
    _add_key_type_argument(parser)


def _add_truncate_command(subparsers: Any) -> None:
    """Register truncate subcommand."""
    parser = subparsers.add_parser("truncate", help="Remove every record from a table")
    _add_table_arguments(parser)


def _add_table_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("table", help="Table name under the data root, or a table file path")
    parser.add_argument(
        "--primary-key",
        help="Primary-key field; defaults to YOLODB_PRIMARY_KEY",
    )


def _add_key_type_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--key-type",
        choices=("str", "int"),
        default="str",
        help="Type of the stored primary-key values; keys are matched as strings by default",
    )
