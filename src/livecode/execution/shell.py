"""Shell driver that runs scripts through the platform command interpreter."""

from __future__ import annotations

import os

from livecode.execution.base import ExecutionConfig
from livecode.execution.process import ProcessDriver


class ShellDriver(ProcessDriver):
    """Execute a script by piping it into ``sh`` (``cmd.exe`` on Windows).

    The script travels over standard input, so multi-line scripts and
    embedded quoting reach the interpreter unmodified.
    """

    @property
    def name(self) -> str:
        return "shell"

    def build_command(self, config: ExecutionConfig) -> list[str]:
        if os.name == "nt":
            return ["cmd.exe", "/Q"]
        return ["sh"]
