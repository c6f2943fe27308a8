"""Database engine and connection management for schemaledger."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from ..core.exceptions import SchemaLedgerError


def create_db_engine(database_url: str) -> Engine:
    """Create an engine suitable for running migrations.

    SQLite's Python driver opens transactions lazily and never before DDL,
    so schema changes would be autocommitted. The driver's own transaction
    handling is disabled and BEGIN is emitted explicitly instead, which makes
    CREATE/ALTER/DROP roll back with the rest of the transaction.

    Args:
        database_url: SQLAlchemy database URL (e.g., "sqlite:///app.db").

    Returns:
        Configured Engine.

    Raises:
        SchemaLedgerError: If the URL is invalid, the driver is unavailable,
            or the SQLite database directory cannot be created.
    """
    try:
        url = make_url(database_url)
        engine = create_engine(url)
    except (ArgumentError, SQLAlchemyError, ImportError) as e:
        raise SchemaLedgerError(f"Invalid database URL {database_url!r}: {e}") from e

    if engine.dialect.name == "sqlite":
        if url.database and url.database != ":memory:":
            try:
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SchemaLedgerError(
                    f"Cannot create directory for database {url.database!r}: {e}"
                ) from e
        _enable_sqlite_transactional_ddl(engine)

    safe_url = url.render_as_string(hide_password=True)
    logger.debug(f"Created {engine.dialect.name} engine for {safe_url}")
    return engine


def _enable_sqlite_transactional_ddl(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys = ON")

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


@contextmanager
def connect(database_url: str) -> Iterator[Connection]:
    """Open one connection for the lifetime of a migration run.

    Args:
        database_url: SQLAlchemy database URL.

    Yields:
        An open Connection with no transaction in progress.

    Raises:
        SchemaLedgerError: If the database cannot be reached.
    """
    engine = create_db_engine(database_url)
    try:
        try:
            connection = engine.connect()
        except SQLAlchemyError as e:
            raise SchemaLedgerError(f"Cannot connect to database: {e}") from e

        with connection:
            yield connection
    finally:
        engine.dispose()
