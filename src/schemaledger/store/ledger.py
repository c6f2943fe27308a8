"""Durable record of applied migrations.

The ledger is a table in the same database the migrations modify:

    sequence_id  INTEGER PRIMARY KEY AUTOINCREMENT
    identifier   VARCHAR UNIQUE NOT NULL
    applied_at   TIMESTAMP NOT NULL

Rows are only ever inserted. Uniqueness of ``identifier`` is enforced by the
table itself, so two runners racing to apply the same migration cannot both
record it.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger
from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    insert,
    select,
)
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..core.exceptions import (
    DuplicateApplicationError,
    LedgerError,
    LedgerInitError,
)
from ..core.types import LedgerEntry

DEFAULT_LEDGER_TABLE = "schema_migrations"


class MigrationLedger:
    """Reads and appends rows of the migration ledger table.

    Example:
        ledger = MigrationLedger()
        ledger.ensure_initialized(conn)
        applied = ledger.list_applied(conn)
    """

    def __init__(self, table_name: str = DEFAULT_LEDGER_TABLE):
        """Initialize with the ledger table name.

        Args:
            table_name: Name of the ledger table.
        """
        self.metadata = MetaData()
        self.table = Table(
            table_name,
            self.metadata,
            Column("sequence_id", Integer, primary_key=True, autoincrement=True),
            Column("identifier", String(255), nullable=False, unique=True),
            Column("applied_at", DateTime(timezone=True), nullable=False),
            sqlite_autoincrement=True,
        )

    @property
    def table_name(self) -> str:
        return self.table.name

    def ensure_initialized(self, conn: Connection) -> None:
        """Create the ledger table if it does not exist.

        Runs in its own transaction, so the connection must be idle.

        Raises:
            LedgerInitError: If the table cannot be created.
        """
        try:
            with conn.begin():
                self.metadata.create_all(conn, checkfirst=True)
        except SQLAlchemyError as e:
            raise LedgerInitError(
                f"Failed to initialize ledger table {self.table_name!r}: {e}"
            ) from e
        logger.debug(f"Ledger table {self.table_name!r} ready")

    def list_applied(self, conn: Connection) -> set[str]:
        """Get identifiers of all applied migrations."""
        return {entry.identifier for entry in self.list_entries(conn)}

    def list_entries(self, conn: Connection) -> list[LedgerEntry]:
        """Get all ledger rows ordered by sequence_id.

        Raises:
            LedgerError: If the ledger cannot be read.
        """
        query = select(
            self.table.c.sequence_id,
            self.table.c.identifier,
            self.table.c.applied_at,
        ).order_by(self.table.c.sequence_id)

        try:
            with conn.begin():
                rows = conn.execute(query).all()
        except SQLAlchemyError as e:
            raise LedgerError(f"Failed to read ledger {self.table_name!r}: {e}") from e

        return [
            LedgerEntry(
                sequence_id=row.sequence_id,
                identifier=row.identifier,
                applied_at=row.applied_at,
            )
            for row in rows
        ]

    def record_applied(
        self, conn: Connection, identifier: str, applied_at: datetime
    ) -> None:
        """Insert a ledger row inside the caller's transaction.

        The caller owns the transaction so the row commits or rolls back
        together with the migration's statements.

        Args:
            conn: Connection with a transaction in progress.
            identifier: Migration identifier to record.
            applied_at: Time the migration was applied.

        Raises:
            DuplicateApplicationError: If the identifier is already recorded.
            LedgerError: If there is no open transaction or the insert fails.
        """
        if not conn.in_transaction():
            raise LedgerError(
                f"Refusing to record {identifier!r} outside of a migration transaction"
            )

        try:
            conn.execute(
                insert(self.table).values(identifier=identifier, applied_at=applied_at)
            )
        except IntegrityError as e:
            raise DuplicateApplicationError(identifier) from e
        except SQLAlchemyError as e:
            raise LedgerError(f"Failed to record migration {identifier!r}: {e}") from e

        logger.debug(f"Recorded migration {identifier} in {self.table_name}")
