"""Migration runner for schemaledger.

Responsibilities:
1. Discover migration scripts in a directory
2. Create the ledger table if it does not exist
3. Determine which migrations are pending
4. Apply pending migrations in identifier order, stopping at the first failure
5. Report how far the run got
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from sqlalchemy.engine import Connection

from ..core.exceptions import MigrationError, OutOfOrderMigrationError
from ..core.types import (
    MigrationResult,
    MigrationScript,
    MigrationStatus,
    RunnerState,
)
from ..store.database import connect
from ..store.ledger import DEFAULT_LEDGER_TABLE, MigrationLedger
from .executor import MigrationExecutor
from .source import DEFAULT_SUFFIX, discover_migrations


class MigrationRunner:
    """Applies pending migration scripts to a database.

    A migration is pending when its identifier is absent from the ledger.
    Pending migrations run one at a time in identifier order, each in its
    own transaction, and the first failure ends the run.

    Example:
        with connect("sqlite:///app.db") as conn:
            runner = MigrationRunner(conn, Path("migrations"))
            result = runner.run()
            print(f"Applied {result.applied_count} migration(s)")
    """

    def __init__(
        self,
        connection: Connection,
        migrations_dir: Path | str,
        *,
        ledger: MigrationLedger | None = None,
        executor: MigrationExecutor | None = None,
        suffix: str = DEFAULT_SUFFIX,
        strict_order: bool = False,
    ):
        """Initialize runner.

        Args:
            connection: Open connection with no transaction in progress.
            migrations_dir: Directory holding migration scripts.
            ledger: Ledger to use (default: ``schema_migrations`` table).
            executor: Executor to use (default: one bound to ``ledger``).
            suffix: Migration script suffix.
            strict_order: Refuse to apply pending migrations that sort before
                the latest applied migration.
        """
        self.conn = connection
        self.migrations_dir = Path(migrations_dir)
        self.ledger = ledger or MigrationLedger()
        self.executor = executor or MigrationExecutor(self.ledger)
        self.suffix = suffix
        self.strict_order = strict_order
        self.state = RunnerState.IDLE
        self.current: MigrationScript | None = None  # Set while APPLYING

    def _discover(self) -> list[MigrationScript]:
        self.state = RunnerState.DISCOVERING
        return discover_migrations(self.migrations_dir, self.suffix)

    def _check_order(self, pending: list[MigrationScript], applied: set[str]) -> None:
        if not applied:
            return

        latest = max(applied)
        early = [m.identifier for m in pending if m.identifier < latest]
        if not early:
            return

        if self.strict_order:
            raise OutOfOrderMigrationError(early, latest)

        logger.warning(
            f"Applying {len(early)} migration(s) out of order "
            f"(before already-applied {latest}): {', '.join(early)}"
        )

    def run(self, dry_run: bool = False) -> MigrationResult:
        """Apply all pending migrations.

        Args:
            dry_run: Report pending migrations without applying them.

        Returns:
            Result naming the applied migrations and, on failure, the
            migration that stopped the run.

        Raises:
            DiscoveryError: If the scripts cannot be discovered.
            LedgerError: If the ledger cannot be initialized or read.
            OutOfOrderMigrationError: If strict ordering is violated.
        """
        try:
            migrations = self._discover()

            self.state = RunnerState.DIFFING
            self.ledger.ensure_initialized(self.conn)
            entries = self.ledger.list_entries(self.conn)
            applied_ids = {e.identifier for e in entries}
            pending = [m for m in migrations if m.identifier not in applied_ids]
            # Ledger rows are ordered by sequence_id, so the last one was committed last
            last_applied = entries[-1].identifier if entries else None

            if not pending:
                logger.info("All migrations up to date")
                self.state = RunnerState.DONE
                return MigrationResult(
                    success=True, last_applied=last_applied, dry_run=dry_run
                )

            self._check_order(pending, applied_ids)
        except Exception:
            self.state = RunnerState.FAILED
            raise

        logger.info(f"Found {len(pending)} pending migration(s)")

        if dry_run:
            for migration in pending:
                logger.info(f"[DRY-RUN] Would apply {migration.identifier}")
            self.state = RunnerState.DONE
            return MigrationResult(
                success=True,
                applied=[m.identifier for m in pending],
                last_applied=last_applied,
                dry_run=True,
            )

        applied: list[str] = []
        self.state = RunnerState.APPLYING
        for migration in pending:
            self.current = migration
            logger.info(f"Applying migration {migration.identifier}")
            try:
                self.executor.execute(self.conn, migration)
            except MigrationError as e:
                self.state = RunnerState.FAILED
                logger.error(
                    f"Stopped at {migration.identifier}; "
                    f"last applied: {last_applied or 'none'}"
                )
                return MigrationResult(
                    success=False,
                    applied=applied,
                    last_applied=last_applied,
                    failed=migration.identifier,
                    error=e,
                )

            applied.append(migration.identifier)
            last_applied = migration.identifier
            logger.info(f"Applied migration {migration.identifier}")

        self.current = None
        self.state = RunnerState.DONE
        logger.info(f"Successfully applied {len(applied)} migration(s)")
        return MigrationResult(success=True, applied=applied, last_applied=last_applied)

    def status(self) -> MigrationStatus:
        """Compare the ledger with the scripts on disk.

        Returns:
            Applied entries, pending identifiers, pending identifiers that
            are out of order, and ledger identifiers with no script on disk.
        """
        migrations = discover_migrations(self.migrations_dir, self.suffix)
        self.ledger.ensure_initialized(self.conn)
        entries = self.ledger.list_entries(self.conn)

        applied_ids = {e.identifier for e in entries}
        known_ids = {m.identifier for m in migrations}
        pending = [m.identifier for m in migrations if m.identifier not in applied_ids]
        latest = max(applied_ids) if applied_ids else None

        return MigrationStatus(
            applied=entries,
            pending=pending,
            out_of_order=[i for i in pending if latest is not None and i < latest],
            unknown=sorted(applied_ids - known_ids),
        )


def apply_migrations(
    database_url: str,
    migrations_dir: Path | str,
    *,
    ledger_table: str = DEFAULT_LEDGER_TABLE,
    suffix: str = DEFAULT_SUFFIX,
    strict_order: bool = False,
    dry_run: bool = False,
) -> MigrationResult:
    """Apply pending migrations to the database at ``database_url``.

    Args:
        database_url: SQLAlchemy database URL.
        migrations_dir: Directory holding migration scripts.
        ledger_table: Name of the ledger table.
        suffix: Migration script suffix.
        strict_order: Refuse out-of-order pending migrations.
        dry_run: Report pending migrations without applying them.

    Returns:
        Migration result.
    """
    with connect(database_url) as conn:
        runner = MigrationRunner(
            conn,
            migrations_dir,
            ledger=MigrationLedger(ledger_table),
            suffix=suffix,
            strict_order=strict_order,
        )
        return runner.run(dry_run=dry_run)


def get_migration_status(
    database_url: str,
    migrations_dir: Path | str,
    *,
    ledger_table: str = DEFAULT_LEDGER_TABLE,
    suffix: str = DEFAULT_SUFFIX,
) -> MigrationStatus:
    """Get migration status for the database at ``database_url``."""
    with connect(database_url) as conn:
        runner = MigrationRunner(
            conn,
            migrations_dir,
            ledger=MigrationLedger(ledger_table),
            suffix=suffix,
        )
        return runner.status()
