"""Execution driver base types and interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from livecode.execution.context import ExecutionContext

DEFAULT_TIMEOUT_S = 30

Row = dict[str, str | None]
ExecutionConfig = Mapping[str, str]


@dataclass(frozen=True)
class ExecutionResult:
    """Result of executing a code block through a driver.

    Attributes:
        success: Whether the process exited cleanly within its deadline.
        output: Captured standard output (plus standard error on success).
        error: Human-readable diagnostic; empty when execution succeeded.
        data: Rows parsed from tabular database output, if any were found.
    """

    success: bool
    output: str = ""
    error: str = ""
    data: list[Row] | None = None

    def __post_init__(self) -> None:
        if self.success and self.error:
            raise ValueError("A successful result cannot carry an error message.")
        if not self.success and self.data is not None:
            raise ValueError("A failed result cannot carry structured data.")

    @classmethod
    def failure(cls, error: str, output: str = "") -> ExecutionResult:
        """Build a failed result."""

        return cls(success=False, output=output, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result into a JSON-compatible dictionary.

        Empty ``output``/``error`` and absent ``data`` are omitted; an empty
        row list is kept so callers can render an empty table.
        """

        payload: dict[str, Any] = {"success": self.success}
        if self.output:
            payload["output"] = self.output
        if self.error:
            payload["error"] = self.error
        if self.data is not None:
            payload["data"] = [dict(row) for row in self.data]
        return payload


class Driver(ABC):
    """Abstract base class for code execution drivers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique identifier used as registry key and slide metadata."""

    @abstractmethod
    def execute(
        self,
        code: str,
        config: ExecutionConfig | None = None,
        ctx: ExecutionContext | None = None,
    ) -> ExecutionResult:
        """Run code and return its result.

        Args:
            code: Source text taken from the slide's code block.
            config: Per-execution settings such as ``timeout`` and ``workdir``.
            ctx: Optional caller context used to cancel the execution.

        Returns:
            ExecutionResult describing the outcome. Ordinary failures are
            reported through ``success``/``error`` and never raised.
        """


def resolve_timeout(config: ExecutionConfig, default_s: float) -> float:
    """Return ``config["timeout"]`` when it is a positive integer, else the default."""

    raw = config.get("timeout")
    if raw:
        try:
            seconds = int(raw)
        except ValueError:
            return default_s
        if seconds > 0:
            return float(seconds)
    return default_s


def resolve_workdir(config: ExecutionConfig, default: Path | None) -> Path | None:
    """Return the per-call working directory override, else the driver default."""

    override = config.get("workdir")
    if override:
        return Path(override)
    return default


def resolve_port(config: ExecutionConfig, default: int) -> int:
    """Return ``config["port"]`` when it is a positive integer, else the default."""

    raw = config.get("port")
    if raw:
        try:
            port = int(raw)
        except ValueError:
            return default
        if port > 0:
            return port
    return default
