"""Strata CLI entry points.

This module exposes read-only commands over an exported ledger bucket.
It maps argparse commands onto ledger backend calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Sequence

from core.config import StrataConfig
from core.errors import StrataError
from core.types import LedgerRange
from store.datastore import create_data_store
from store.latest_ledger import find_latest_ledger_sequence
from store.ledger_backend import LedgerBackend
from store.object_keys import object_key_for
from store.xdr_codec import XdrBatchDecoder


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="strata", description="Strata ledger reader CLI")
    parser.add_argument("--storage-url", help="Override STRATA_STORAGE_URL for this command")
    parser.add_argument(
        "--ledgers-per-file",
        type=int,
        help="Override STRATA_LEDGERS_PER_FILE for this command",
    )
    parser.add_argument(
        "--files-per-partition",
        type=int,
        help="Override STRATA_FILES_PER_PARTITION for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_object_key_command(subparsers)
    _add_latest_command(subparsers)
    _add_prepare_range_command(subparsers)
    _add_get_ledger_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Strata CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        if args.command == "object-key":
            return _run_object_key_command(config, args)
        if args.command == "latest":
            return _run_latest_command(config)
        if args.command == "prepare-range":
            return _run_prepare_range_command(config, args)
        if args.command == "get-ledger":
            return _run_get_ledger_command(config, args)
    except StrataError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> StrataConfig:
    """Build runtime config with command-line overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Config with overrides applied.
    """
    config = StrataConfig.from_env()
    if args.storage_url:
        config = replace(config, storage_url=args.storage_url)
    if args.ledgers_per_file is not None:
        config = replace(config, ledgers_per_file=args.ledgers_per_file)
    if args.files_per_partition is not None:
        config = replace(config, files_per_partition=args.files_per_partition)
    return config


def _run_object_key_command(config: StrataConfig, args: argparse.Namespace) -> int:
    """Handle object-key command."""
    print(object_key_for(args.sequence, config.partition))
    return 0


def _run_latest_command(config: StrataConfig) -> int:
    """Handle latest command.

    Args:
        config: Runtime config.

    Returns:
        Exit code.
    """
    partition = config.partition
    data_store = create_data_store(config.storage_url, config)
    try:
        print(find_latest_ledger_sequence(data_store, partition.file_suffix))
    finally:
        data_store.close()
    return 0


def _run_prepare_range_command(config: StrataConfig, args: argparse.Namespace) -> int:
    """Handle prepare-range command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    if args.to_sequence is None:
        ledger_range = LedgerRange.unbounded_range(args.from_sequence)
    else:
        ledger_range = LedgerRange.bounded_range(args.from_sequence, args.to_sequence)
    with LedgerBackend.from_config(config) as backend:
        backend.prepare_range(ledger_range)
    print("ok")
    return 0


def _run_get_ledger_command(config: StrataConfig, args: argparse.Namespace) -> int:
    """Handle get-ledger command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    decoder = XdrBatchDecoder()
    with LedgerBackend.from_config(config, decoder) as backend:
        record = backend.get_ledger(args.sequence)
    print(decoder.render_record(record))
    return 0


def _add_object_key_command(subparsers: Any) -> None:
    """Register object-key subcommand."""
    parser = subparsers.add_parser("object-key", help="Print the object key holding a ledger")
    parser.add_argument("sequence", type=int, help="Ledger sequence")


def _add_latest_command(subparsers: Any) -> None:
    """Register latest subcommand."""
    subparsers.add_parser("latest", help="Print the latest ledger sequence in the store")


def _add_prepare_range_command(subparsers: Any) -> None:
    """Register prepare-range subcommand."""
    parser = subparsers.add_parser(
        "prepare-range",
        help="Check that the boundary ledgers of a range exist",
    )
    parser.add_argument("from_sequence", type=int, help="First ledger of the range")
    parser.add_argument(
        "to_sequence",
        type=int,
        nargs="?",
        help="Last ledger; omit for an unbounded range",
    )


def _add_get_ledger_command(subparsers: Any) -> None:
    """Register get-ledger subcommand."""
    parser = subparsers.add_parser("get-ledger", help="Print one ledger as base64 XDR")
    parser.add_argument("sequence", type=int, help="Ledger sequence")
