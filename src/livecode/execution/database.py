"""Shared behaviour of drivers that shell out to database command-line clients."""

from __future__ import annotations

from livecode.execution.base import ExecutionConfig
from livecode.execution.masking import mask_credentials
from livecode.execution.process import ProcessDriver


class DatabaseDriver(ProcessDriver):
    """Process driver for SQL clients that read queries from stdin."""

    timeout_message = "query execution timed out"
    canceled_message = "query execution canceled"


class NetworkDatabaseDriver(DatabaseDriver):
    """Database driver for clients that connect to a server with credentials.

    Error messages are masked so the configured user and password never
    reach the slide.
    """

    default_host = "localhost"

    def format_error(self, message: str, config: ExecutionConfig) -> str:
        return mask_credentials(message, config)
