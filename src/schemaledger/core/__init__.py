"""Core configuration, types and exceptions for schemaledger."""

from .config import Config
from .exceptions import (
    ConfigError,
    DiscoveryError,
    DuplicateApplicationError,
    DuplicateIdentifierError,
    LedgerError,
    LedgerInitError,
    MigrationError,
    MigrationFailedError,
    OutOfOrderMigrationError,
    SchemaLedgerError,
    StatementExecutionError,
)
from .types import (
    LedgerEntry,
    MigrationResult,
    MigrationScript,
    MigrationStatus,
    RunnerState,
)

__all__ = [
    "Config",
    "SchemaLedgerError",
    "ConfigError",
    "DiscoveryError",
    "DuplicateIdentifierError",
    "LedgerError",
    "LedgerInitError",
    "DuplicateApplicationError",
    "MigrationError",
    "StatementExecutionError",
    "MigrationFailedError",
    "OutOfOrderMigrationError",
    "RunnerState",
    "MigrationScript",
    "LedgerEntry",
    "MigrationResult",
    "MigrationStatus",
]
