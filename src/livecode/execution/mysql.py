"""MySQL driver backed by the ``mysql`` command-line client."""

from __future__ import annotations

from livecode.execution.base import ExecutionConfig, Row, resolve_port
from livecode.execution.database import NetworkDatabaseDriver
from livecode.execution.parsers import parse_mysql_table

DEFAULT_MYSQL_PORT = 3306


class MySQLDriver(NetworkDatabaseDriver):
    """Execute SQL with ``mysql --table``.

    Supported config keys: ``host`` (default localhost), ``port`` (default
    3306), ``user``, ``password``, ``database``, ``timeout`` and ``workdir``.
    The password is handed over through ``MYSQL_PWD`` so it never shows up
    in process listings.
    """

    exit_label = "mysql"

    @property
    def name(self) -> str:
        return "mysql"

    def build_command(self, config: ExecutionConfig) -> list[str]:
        command = [
            "mysql",
            "--table",
            "-h",
            config.get("host") or self.default_host,
            "-P",
            str(resolve_port(config, DEFAULT_MYSQL_PORT)),
        ]
        if config.get("user"):
            command.extend(["-u", config["user"]])
        if config.get("database"):
            command.append(config["database"])
        return command

    def build_env(self, config: ExecutionConfig) -> dict[str, str] | None:
        if config.get("password"):
            return {"MYSQL_PWD": config["password"]}
        return None

    def parse_rows(self, stdout: str) -> list[Row] | None:
        return parse_mysql_table(stdout)
