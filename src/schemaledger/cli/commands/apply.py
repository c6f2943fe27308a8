"""Apply command for schemaledger CLI."""

import argparse
import sys
from pathlib import Path

from ...core.config import Config
from ...core.types import MigrationResult
from ...migrations import apply_migrations


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments selecting the database and migrations directory.

    Args:
        parser: Subcommand parser to extend.
    """
    parser.add_argument(
        "-d",
        "--dir",
        dest="migrations_dir",
        type=Path,
        default=None,
        help="Migrations directory (default: from config)",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: from config)",
    )
    parser.add_argument(
        "--ledger-table",
        default=None,
        help="Ledger table name (default: from config)",
    )


def resolve_config(args, config: Config) -> Config:
    """Overlay command-line values on the loaded configuration."""
    if args.migrations_dir is not None:
        config.migrations_dir = args.migrations_dir
    if args.database_url is not None:
        config.database_url = args.database_url
    if args.ledger_table is not None:
        config.ledger_table = args.ledger_table
    if getattr(args, "strict_order", None) is not None:
        config.strict_order = args.strict_order
    return config


def handle_apply(args, config: Config) -> int:
    """Handle apply command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Returns:
        Process exit code: 0 on success, 1 if a migration failed.
    """
    config = resolve_config(args, config)
    result = apply_migrations(
        config.database_url,
        config.migrations_dir,
        ledger_table=config.ledger_table,
        suffix=config.suffix,
        strict_order=config.strict_order,
        dry_run=args.dry_run,
    )
    _print_result(result)
    return 0 if result.success else 1


def _print_result(result: MigrationResult) -> None:
    if result.dry_run:
        if result.applied:
            print(f"{result.applied_count} pending migration(s):")
            for identifier in result.applied:
                print(f"  {identifier}")
        else:
            print("No pending migrations.")
        return

    print(f"Applied {result.applied_count} migration(s).")
    for identifier in result.applied:
        print(f"  {identifier}")

    if not result.success:
        print(f"Migration failed: {result.failed}", file=sys.stderr)
        print(f"  Error: {result.error}", file=sys.stderr)
        print(f"  Last applied: {result.last_applied or 'none'}", file=sys.stderr)
