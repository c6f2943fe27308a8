"""Status command for schemaledger CLI."""

from ...core.config import Config
from ...core.types import MigrationStatus
from ...migrations import get_migration_status
from .apply import resolve_config


def handle_status(args, config: Config) -> int:
    """Handle status command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    config = resolve_config(args, config)
    status = get_migration_status(
        config.database_url,
        config.migrations_dir,
        ledger_table=config.ledger_table,
        suffix=config.suffix,
    )
    _print_status(status, config)
    return 0


def _print_status(status: MigrationStatus, config: Config) -> None:
    """Print status information.

    Args:
        status: MigrationStatus to display.
        config: Configuration the status was read with.
    """
    print("Migration Status")
    print("=" * 50)
    print(f"Directory: {config.migrations_dir}")
    print(f"Applied: {len(status.applied)}")
    print(f"Pending: {len(status.pending)}")
    print()

    for entry in status.applied:
        print(f"  [x] {entry.identifier}  ({entry.applied_at})")
    for identifier in status.pending:
        note = "  (out of order)" if identifier in status.out_of_order else ""
        print(f"  [ ] {identifier}{note}")

    if status.unknown:
        print()
        print("Applied but missing from directory:")
        for identifier in status.unknown:
            print(f"  ? {identifier}")
