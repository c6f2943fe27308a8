"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest
from loguru import logger

from schemaledger.store.database import create_db_engine
from schemaledger.store.ledger import MigrationLedger


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host SCHEMALEDGER_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("SCHEMALEDGER_"):
            monkeypatch.delenv(name)


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for tests."""
    return tmp_path / "test.db"


@pytest.fixture
def database_url(test_db_path: Path) -> str:
    """Provide a SQLAlchemy URL for the temporary database."""
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def engine(database_url: str):
    """Provide an engine with transactional DDL enabled."""
    engine = create_db_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def conn(engine):
    """Provide an idle connection for a migration run."""
    with engine.connect() as connection:
        yield connection


@pytest.fixture
def ledger() -> MigrationLedger:
    """Provide a ledger using the default table name."""
    return MigrationLedger()


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Provide an empty migrations directory."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    return directory


@pytest.fixture
def write_migration(migrations_dir: Path):
    """Write a migration script into the migrations directory."""

    def _write(name: str, body: str) -> Path:
        path = migrations_dir / name
        path.write_text(body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def log_messages():
    """Capture loguru messages at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    yield messages
    logger.remove(handler_id)
