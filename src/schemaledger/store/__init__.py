"""Data access layer for schemaledger.

This package provides:
- create_db_engine / connect: SQLAlchemy engine and connection setup
- MigrationLedger: the table recording applied migrations
"""

from .database import connect, create_db_engine
from .ledger import DEFAULT_LEDGER_TABLE, MigrationLedger

__all__ = [
    "connect",
    "create_db_engine",
    "DEFAULT_LEDGER_TABLE",
    "MigrationLedger",
]
