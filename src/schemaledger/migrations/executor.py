"""Apply a single migration atomically."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from loguru import logger
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from ..core.exceptions import (
    LedgerError,
    MigrationError,
    MigrationFailedError,
    StatementExecutionError,
)
from ..core.types import MigrationScript
from ..store.ledger import MigrationLedger
from .splitter import BREAKPOINT_MARKER, split_statements


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MigrationExecutor:
    """Runs a migration's statements and its ledger row in one transaction.

    Either every statement and the ledger row are committed, or the
    transaction is rolled back and nothing of the migration persists.
    """

    def __init__(
        self,
        ledger: MigrationLedger,
        marker: str = BREAKPOINT_MARKER,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize executor.

        Args:
            ledger: Ledger that records applied migrations.
            marker: Breakpoint marker separating statements.
            clock: Source of the applied_at timestamp.
        """
        self.ledger = ledger
        self.marker = marker
        self.clock = clock

    def execute(self, conn: Connection, script: MigrationScript) -> None:
        """Apply one migration.

        Args:
            conn: Connection with no transaction in progress.
            script: Migration to apply.

        Raises:
            MigrationFailedError: If any statement or the ledger write fails.
                The transaction has been rolled back.
            MigrationError: If the connection is already inside a transaction.
        """
        if conn.in_transaction():
            raise MigrationError(
                f"Cannot apply {script.identifier!r}: connection already has an open transaction"
            )

        statements = split_statements(script.raw_script, self.marker)
        if not statements:
            logger.debug(f"Migration {script.identifier} has no statements")

        try:
            with conn.begin():
                for index, statement in enumerate(statements):
                    self._execute_statement(conn, script.identifier, index, statement)
                self.ledger.record_applied(conn, script.identifier, self.clock())
        except (StatementExecutionError, LedgerError) as e:
            logger.error(f"Migration {script.identifier} rolled back: {e}")
            raise MigrationFailedError(script.identifier, e) from e
        except SQLAlchemyError as e:
            # Raised by COMMIT itself, e.g. deferred constraint violations
            logger.error(f"Migration {script.identifier} failed to commit: {e}")
            raise MigrationFailedError(script.identifier, e) from e

    def _execute_statement(
        self, conn: Connection, identifier: str, index: int, statement: str
    ) -> None:
        logger.debug(f"{identifier} [{index + 1}] {statement.splitlines()[0]}")
        try:
            conn.exec_driver_sql(
                statement, execution_options={"no_parameters": True}
            )
        except SQLAlchemyError as e:
            raise StatementExecutionError(identifier, index, statement, e) from e
