"""SQLite driver backed by the ``sqlite3`` command-line tool."""

from __future__ import annotations

from livecode.execution.base import ExecutionConfig, Row
from livecode.execution.database import DatabaseDriver
from livecode.execution.parsers import parse_column_output

IN_MEMORY_DATABASE = ":memory:"


class SQLiteDriver(DatabaseDriver):
    """Execute SQL with ``sqlite3 -header -column``.

    Supported config keys:
        database: Database file, relative to the working directory, or
            ``:memory:`` (the default). ``path`` is accepted as a fallback.
        timeout: Execution timeout in seconds.
        workdir: Working directory used to resolve relative database paths.
    """

    exit_label = "sqlite3"

    @property
    def name(self) -> str:
        return "sqlite"

    def build_command(self, config: ExecutionConfig) -> list[str]:
        database = config.get("database") or config.get("path") or IN_MEMORY_DATABASE
        return ["sqlite3", "-header", "-column", database]

    def parse_rows(self, stdout: str) -> list[Row] | None:
        return parse_column_output(stdout)
