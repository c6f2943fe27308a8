"""Split a migration script into individually executable statements.

Some database drivers reject more than one statement per call, so a
migration script marks the boundaries between its statements with a
breakpoint marker. The marker is an SQL line comment and ends the line it
appears on; it may stand alone or trail a statement::

    CREATE TABLE t (x INTEGER);
    --> statement-breakpoint
    CREATE INDEX idx_t_x ON t (x);--> statement-breakpoint
    INSERT INTO t (x) VALUES (1);

Text between markers is trimmed and empty segments are dropped. A script
without markers is a single statement, and an empty script is a legal
no-op migration with no statements.
"""

from __future__ import annotations

import re

BREAKPOINT_MARKER = "--> statement-breakpoint"


def _marker_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(marker)}[ \t]*(?:\r?\n|\Z)")


_DEFAULT_PATTERN = _marker_pattern(BREAKPOINT_MARKER)


def split_statements(raw_script: str, marker: str = BREAKPOINT_MARKER) -> list[str]:
    """Split a script on breakpoint markers.

    Args:
        raw_script: Full text of a migration script.
        marker: Breakpoint marker separating statements.

    Returns:
        Ordered list of non-empty, trimmed statements.
    """
    if not raw_script.strip():
        return []

    pattern = _DEFAULT_PATTERN if marker == BREAKPOINT_MARKER else _marker_pattern(marker)
    segments = pattern.split(raw_script)
    return [segment.strip() for segment in segments if segment.strip()]
