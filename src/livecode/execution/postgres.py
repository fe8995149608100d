"""PostgreSQL driver backed by the ``psql`` command-line client."""

from __future__ import annotations

from livecode.execution.base import ExecutionConfig, Row, resolve_port
from livecode.execution.database import NetworkDatabaseDriver
from livecode.execution.parsers import parse_postgres_table

DEFAULT_POSTGRES_PORT = 5432


class PostgresDriver(NetworkDatabaseDriver):
    """Execute SQL with ``psql`` in bordered aligned mode.

    Supported config keys: ``host`` (default localhost), ``port`` (default
    5432), ``user``, ``password``, ``database``, ``timeout`` and ``workdir``.
    The password is handed over through ``PGPASSWORD``.
    """

    exit_label = "psql"

    @property
    def name(self) -> str:
        return "postgres"

    def build_command(self, config: ExecutionConfig) -> list[str]:
        # Ignore ~/.psqlrc so user settings cannot change the table layout.
        command = [
            "psql",
            "--no-psqlrc",
            "--pset=border=2",
            "--pset=format=aligned",
            "-h",
            config.get("host") or self.default_host,
            "-p",
            str(resolve_port(config, DEFAULT_POSTGRES_PORT)),
        ]
        if config.get("user"):
            command.extend(["-U", config["user"]])
        if config.get("database"):
            command.extend(["-d", config["database"]])
        return command

    def build_env(self, config: ExecutionConfig) -> dict[str, str] | None:
        if config.get("password"):
            return {"PGPASSWORD": config["password"]}
        return None

    def parse_rows(self, stdout: str) -> list[Row] | None:
        return parse_postgres_table(stdout)
