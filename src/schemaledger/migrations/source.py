"""Discover migration scripts in a directory.

Migrations are plain UTF-8 SQL files named with a sortable prefix:

    migrations/
        0000_init.sql
        0001_add_col.sql

The identifier of a migration is its filename without the script suffix,
and identifiers sort in the order migrations must be applied.
"""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path

from loguru import logger

from ..core.exceptions import DiscoveryError, DuplicateIdentifierError
from ..core.types import MigrationScript

DEFAULT_SUFFIX = ".sql"


def identifier_for(path: Path, suffix: str = DEFAULT_SUFFIX) -> str | None:
    """Derive the migration identifier for a file.

    Args:
        path: Candidate migration file.
        suffix: Script suffix, matched case-insensitively.

    Returns:
        Identifier, or None if the file is not a migration script.
    """
    name = path.name
    if name.startswith((".", "_")):
        return None
    if not name.lower().endswith(suffix.lower()):
        return None

    identifier = name[: len(name) - len(suffix)].strip()
    return identifier or None


def discover_migrations(
    directory: Path | str, suffix: str = DEFAULT_SUFFIX
) -> list[MigrationScript]:
    """Read all migration scripts in a directory.

    Args:
        directory: Directory holding migration scripts.
        suffix: Script suffix, matched case-insensitively.

    Returns:
        Migration scripts sorted by identifier.

    Raises:
        DiscoveryError: If the directory is missing or unreadable, or a
            script is not valid UTF-8.
        DuplicateIdentifierError: If two files map to the same identifier.
    """
    directory = Path(directory)

    if not directory.exists():
        raise DiscoveryError(f"Migrations directory not found: {directory}")
    if not directory.is_dir():
        raise DiscoveryError(f"Migrations path is not a directory: {directory}")

    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise DiscoveryError(f"Cannot read migrations directory {directory}: {e}") from e

    by_identifier: dict[str, list[Path]] = defaultdict(list)
    for path in entries:
        if not path.is_file():
            continue
        identifier = identifier_for(path, suffix)
        if identifier is None:
            continue
        by_identifier[identifier].append(path)

    scripts = []
    for identifier in sorted(by_identifier):
        paths = by_identifier[identifier]
        if len(paths) > 1:
            raise DuplicateIdentifierError(identifier, paths)

        path = paths[0]
        try:
            raw_script = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DiscoveryError(f"Cannot read migration {path}: {e}") from e

        scripts.append(
            MigrationScript(identifier=identifier, source_path=path, raw_script=raw_script)
        )

    logger.debug(f"Discovered {len(scripts)} migration(s) in {directory}")
    return scripts
