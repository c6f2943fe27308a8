"""Schema migrations for schemaledger.

This package discovers SQL migration scripts in a directory, splits them
into statements and applies the pending ones, recording each in the ledger
table of the target database.

Example:
    from schemaledger.migrations import MigrationRunner
    from schemaledger.store import connect

    with connect("sqlite:///app.db") as conn:
        result = MigrationRunner(conn, "migrations").run()
"""

from .executor import MigrationExecutor
from .runner import MigrationRunner, apply_migrations, get_migration_status
from .source import discover_migrations
from .splitter import BREAKPOINT_MARKER, split_statements

__all__ = [
    "BREAKPOINT_MARKER",
    "MigrationExecutor",
    "MigrationRunner",
    "apply_migrations",
    "discover_migrations",
    "get_migration_status",
    "split_statements",
]
