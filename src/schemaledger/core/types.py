"""Type definitions for schemaledger."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from .exceptions import MigrationError


class RunnerState(Enum):
    """Lifecycle state of a migration run."""

    IDLE = "idle"
    DISCOVERING = "discovering"
    DIFFING = "diffing"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class MigrationScript:
    """A migration script discovered on disk."""

    identifier: str
    source_path: Path
    raw_script: str

    def __repr__(self) -> str:
        return f"MigrationScript({self.identifier!r})"


@dataclass(frozen=True)
class LedgerEntry:
    """A row of the migration ledger."""

    sequence_id: int
    identifier: str
    applied_at: datetime


@dataclass
class MigrationResult:
    """Outcome of a migration run.

    Attributes:
        success: True when every pending migration was applied.
        applied: Identifiers committed during this run, in order.
        last_applied: Last identifier committed in the database, including
            migrations applied by earlier runs. None if the ledger is empty.
        failed: Identifier of the migration that stopped the run.
        error: Error raised by the failed migration.
        dry_run: True when nothing was executed.
    """

    success: bool
    applied: list[str] = field(default_factory=list)
    last_applied: Optional[str] = None
    failed: Optional[str] = None
    error: Optional[MigrationError] = None
    dry_run: bool = False

    @property
    def applied_count(self) -> int:
        return len(self.applied)


@dataclass
class MigrationStatus:
    """Comparison of the ledger against the scripts on disk."""

    applied: list[LedgerEntry] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)
    out_of_order: list[str] = field(default_factory=list)
    unknown: list[str] = field(default_factory=list)  # In the ledger, missing on disk

    @property
    def is_up_to_date(self) -> bool:
        return not self.pending
