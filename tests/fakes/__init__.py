"""Test fakes and database inspection helpers.

Example:
    from tests.fakes import RecordingExecutor, table_names

    executor = RecordingExecutor(MigrationExecutor(ledger))
    runner = MigrationRunner(conn, migrations_dir, ledger=ledger, executor=executor)
    runner.run()
    assert executor.attempted == ["0000_init"]
"""

from .db import column_names, ledger_identifiers, table_names
from .migrations import FixedClock, RecordingExecutor, StaleLedger

__all__ = [
    "FixedClock",
    "RecordingExecutor",
    "StaleLedger",
    "column_names",
    "ledger_identifiers",
    "table_names",
]
