"""Custom exceptions for schemaledger."""


class SchemaLedgerError(Exception):
    """Base exception for all schemaledger errors."""

    pass


class ConfigError(SchemaLedgerError):
    """Configuration could not be loaded."""

    pass


class DiscoveryError(SchemaLedgerError):
    """Migration scripts could not be discovered."""

    pass


class DuplicateIdentifierError(DiscoveryError):
    """Two migration files normalize to the same identifier."""

    def __init__(self, identifier: str, paths: list):
        """Initialize exception with the clashing identifier and files.

        Args:
            identifier: Identifier shared by more than one file.
            paths: Files that produced the identifier.
        """
        self.identifier = identifier
        self.paths = list(paths)
        names = ", ".join(str(p) for p in self.paths)
        super().__init__(f"Duplicate migration identifier {identifier!r}: {names}")


class LedgerError(SchemaLedgerError):
    """Ledger operation failed."""

    pass


class LedgerInitError(LedgerError):
    """Ledger table could not be created or read."""

    pass


class DuplicateApplicationError(LedgerError):
    """Identifier is already recorded in the ledger."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Migration {identifier!r} is already recorded as applied")


class MigrationError(SchemaLedgerError):
    """Migration operation failed."""

    pass


class StatementExecutionError(MigrationError):
    """A statement inside a migration was rejected by the database."""

    def __init__(self, identifier: str, index: int, statement: str, cause: BaseException):
        """Initialize exception with statement context.

        Args:
            identifier: Migration the statement belongs to.
            index: Zero-based position of the statement in the migration.
            statement: Statement text that failed.
            cause: Underlying database error.
        """
        self.identifier = identifier
        self.index = index
        self.statement = statement
        self.cause = cause
        super().__init__(
            f"Statement {index + 1} of migration {identifier!r} failed: {cause}"
        )


class MigrationFailedError(MigrationError):
    """A migration was rolled back and the run must stop."""

    def __init__(self, identifier: str, cause: BaseException):
        self.identifier = identifier
        self.cause = cause
        super().__init__(f"Migration {identifier!r} failed: {cause}")


class OutOfOrderMigrationError(MigrationError):
    """Pending migrations sort before an already-applied migration."""

    def __init__(self, identifiers: list[str], latest_applied: str):
        self.identifiers = list(identifiers)
        self.latest_applied = latest_applied
        super().__init__(
            f"Pending migration(s) {', '.join(self.identifiers)} sort before "
            f"already-applied {latest_applied!r}"
        )
