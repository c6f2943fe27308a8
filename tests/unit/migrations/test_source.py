"""Tests for migration script discovery."""

from pathlib import Path

import pytest

from schemaledger.core.exceptions import DiscoveryError, DuplicateIdentifierError
from schemaledger.migrations.source import discover_migrations, identifier_for


class TestIdentifierFor:
    """Tests for identifier_for()."""

    def test_strips_suffix(self):
        assert identifier_for(Path("0001_add_col.sql")) == "0001_add_col"

    def test_suffix_match_is_case_insensitive(self):
        assert identifier_for(Path("0001_add_col.SQL")) == "0001_add_col"

    def test_ignores_other_suffixes(self):
        assert identifier_for(Path("README.md")) is None
        assert identifier_for(Path("0001_add_col.sql.bak")) is None

    def test_ignores_hidden_and_private_files(self):
        assert identifier_for(Path(".0001_hidden.sql")) is None
        assert identifier_for(Path("_template.sql")) is None

    def test_ignores_bare_suffix(self):
        assert identifier_for(Path(".sql")) is None

    def test_custom_suffix(self):
        assert identifier_for(Path("0001_init.up.sql"), ".up.sql") == "0001_init"


class TestDiscoverMigrations:
    """Tests for discover_migrations()."""

    def test_empty_directory(self, migrations_dir: Path):
        """Empty directory yields no migrations."""
        assert discover_migrations(migrations_dir) == []

    def test_sorted_by_identifier(self, migrations_dir: Path, write_migration):
        """Migrations come back in identifier order regardless of creation order."""
        write_migration("0002_c.sql", "SELECT 3;")
        write_migration("0000_a.sql", "SELECT 1;")
        write_migration("0001_b.sql", "SELECT 2;")

        migrations = discover_migrations(migrations_dir)

        assert [m.identifier for m in migrations] == ["0000_a", "0001_b", "0002_c"]

    def test_reads_script_and_path(self, migrations_dir: Path, write_migration):
        """Descriptors carry the source path and raw text."""
        path = write_migration("0000_init.sql", "CREATE TABLE t (x INTEGER);\n")

        (migration,) = discover_migrations(migrations_dir)

        assert migration.identifier == "0000_init"
        assert migration.source_path == path
        assert migration.raw_script == "CREATE TABLE t (x INTEGER);\n"

    def test_reads_utf8(self, migrations_dir: Path, write_migration):
        """Scripts are decoded as UTF-8."""
        write_migration("0000_seed.sql", "INSERT INTO t (name) VALUES ('café');")

        (migration,) = discover_migrations(migrations_dir)

        assert "café" in migration.raw_script

    def test_skips_non_migration_entries(self, migrations_dir: Path, write_migration):
        """Other files, private files and subdirectories are ignored."""
        write_migration("0000_init.sql", "SELECT 1;")
        write_migration("notes.txt", "not a migration")
        write_migration("_draft.sql", "SELECT 2;")
        (migrations_dir / "meta").mkdir()
        (migrations_dir / "meta" / "0001_nested.sql").write_text("SELECT 3;")

        migrations = discover_migrations(migrations_dir)

        assert [m.identifier for m in migrations] == ["0000_init"]

    def test_accepts_string_path(self, migrations_dir: Path, write_migration):
        write_migration("0000_init.sql", "SELECT 1;")

        assert len(discover_migrations(str(migrations_dir))) == 1

    def test_missing_directory(self, tmp_path: Path):
        """Missing directory raises DiscoveryError."""
        with pytest.raises(DiscoveryError, match="not found"):
            discover_migrations(tmp_path / "nope")

    def test_path_is_a_file(self, tmp_path: Path):
        """A file instead of a directory raises DiscoveryError."""
        path = tmp_path / "migrations.sql"
        path.write_text("SELECT 1;")

        with pytest.raises(DiscoveryError, match="not a directory"):
            discover_migrations(path)

    def test_duplicate_identifier(self, migrations_dir: Path, write_migration):
        """Two files with the same identifier raise DuplicateIdentifierError."""
        write_migration("0001_init.sql", "SELECT 1;")
        write_migration("0001_init.SQL", "SELECT 2;")

        with pytest.raises(DuplicateIdentifierError) as exc_info:
            discover_migrations(migrations_dir)

        assert exc_info.value.identifier == "0001_init"
        assert len(exc_info.value.paths) == 2

    def test_duplicate_identifier_is_discovery_error(
        self, migrations_dir: Path, write_migration
    ):
        write_migration("0001_init.sql", "SELECT 1;")
        write_migration("0001_init.Sql", "SELECT 2;")

        with pytest.raises(DiscoveryError):
            discover_migrations(migrations_dir)

    def test_invalid_utf8(self, migrations_dir: Path):
        """Undecodable script raises DiscoveryError."""
        (migrations_dir / "0000_bad.sql").write_bytes(b"SELECT '\xff\xfe';")

        with pytest.raises(DiscoveryError, match="0000_bad.sql"):
            discover_migrations(migrations_dir)

    def test_does_not_modify_directory(self, migrations_dir: Path, write_migration):
        write_migration("0000_init.sql", "SELECT 1;")
        before = sorted(p.name for p in migrations_dir.iterdir())

        discover_migrations(migrations_dir)

        assert sorted(p.name for p in migrations_dir.iterdir()) == before
