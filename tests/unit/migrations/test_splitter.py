"""Tests for statement splitting."""

from schemaledger.migrations.splitter import BREAKPOINT_MARKER, split_statements


class TestSplitStatements:
    """Tests for split_statements()."""

    def test_script_without_marker_is_one_statement(self):
        """A script with no markers yields exactly one statement."""
        script = "CREATE TABLE t (\n    x INTEGER\n);\n"

        assert split_statements(script) == ["CREATE TABLE t (\n    x INTEGER\n);"]

    def test_empty_script_yields_no_statements(self):
        """Empty and whitespace-only scripts are no-op migrations."""
        assert split_statements("") == []
        assert split_statements("   \n\t\n") == []

    def test_marker_on_its_own_line(self):
        """Marker lines separate statements."""
        script = (
            "CREATE TABLE a (x INTEGER);\n"
            f"{BREAKPOINT_MARKER}\n"
            "CREATE TABLE b (y INTEGER);\n"
        )

        assert split_statements(script) == [
            "CREATE TABLE a (x INTEGER);",
            "CREATE TABLE b (y INTEGER);",
        ]

    def test_marker_trailing_a_statement(self):
        """Marker may end the line of the statement it terminates."""
        script = (
            f"CREATE TABLE a (x INTEGER);{BREAKPOINT_MARKER}\n"
            f"CREATE INDEX idx_a_x ON a (x);{BREAKPOINT_MARKER}\n"
            "INSERT INTO a (x) VALUES (1);"
        )

        assert split_statements(script) == [
            "CREATE TABLE a (x INTEGER);",
            "CREATE INDEX idx_a_x ON a (x);",
            "INSERT INTO a (x) VALUES (1);",
        ]

    def test_preserves_order(self):
        """Statements come back in script order."""
        parts = [f"INSERT INTO t VALUES ({i});" for i in range(5)]
        script = f"\n{BREAKPOINT_MARKER}\n".join(parts)

        assert split_statements(script) == parts

    def test_drops_empty_segments(self):
        """Consecutive and trailing markers do not produce empty statements."""
        script = (
            f"{BREAKPOINT_MARKER}\n"
            "SELECT 1;\n"
            f"{BREAKPOINT_MARKER}\n"
            f"   {BREAKPOINT_MARKER}\n"
            "SELECT 2;\n"
            f"{BREAKPOINT_MARKER}"
        )

        assert split_statements(script) == ["SELECT 1;", "SELECT 2;"]

    def test_marker_with_crlf_line_endings(self):
        """Windows line endings are accepted after the marker."""
        script = f"SELECT 1;\r\n{BREAKPOINT_MARKER}\r\nSELECT 2;\r\n"

        assert split_statements(script) == ["SELECT 1;", "SELECT 2;"]

    def test_marker_mid_line_does_not_split(self):
        """Marker text followed by more text on the same line is not a boundary."""
        script = f"SELECT '{BREAKPOINT_MARKER} inside a literal';"

        assert split_statements(script) == [script]

    def test_custom_marker(self):
        """A different marker can be supplied."""
        script = "SELECT 1;\n-- split\nSELECT 2;"

        assert split_statements(script, marker="-- split") == ["SELECT 1;", "SELECT 2;"]
