"""User-defined drivers backed by an arbitrary command."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Sequence

from livecode.execution.base import DEFAULT_TIMEOUT_S, ExecutionConfig
from livecode.execution.process import ProcessDriver
from livecode.util.logging import get_logger

if TYPE_CHECKING:
    from livecode.execution.registry import DriverRegistry

RESERVED_DRIVER_NAMES: frozenset[str] = frozenset({"shell", "sqlite", "mysql", "postgres"})

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class CustomDriverSpec:
    """Definition of a custom driver taken from presentation configuration.

    Attributes:
        command: Executable to run (e.g. ``python3``, ``node``).
        args: Fixed arguments passed before the code is piped to stdin.
        timeout: Timeout in seconds; zero or negative means the default.
    """

    command: str
    args: list[str] = field(default_factory=list)
    timeout: int = 0


class CustomDriver(ProcessDriver):
    """Execute code with a user-chosen interpreter reading from stdin."""

    def __init__(
        self,
        name: str,
        command: str,
        args: Sequence[str] = (),
        timeout_s: float | None = None,
        workdir: Path | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            name: Driver identifier used in slide metadata.
            command: Executable to run.
            args: Fixed arguments placed after the command.
            timeout_s: Default timeout in seconds; missing or non-positive
                values fall back to 30 seconds.
            workdir: Default working directory for executions.
        """

        if timeout_s is None or timeout_s <= 0:
            timeout_s = DEFAULT_TIMEOUT_S
        super().__init__(workdir=workdir, timeout_s=timeout_s)
        self._name = name
        self.command = command
        self.args = tuple(args)

    @property
    def name(self) -> str:
        return self._name

    def build_command(self, config: ExecutionConfig) -> list[str]:
        return [self.command, *self.args]


def register_custom_drivers(
    registry: DriverRegistry,
    drivers: Mapping[str, CustomDriverSpec],
    *,
    workdir: Path | None = None,
) -> None:
    """Register one CustomDriver per configured entry.

    Entries named after a built-in driver or lacking a command are skipped
    without error, so configuration can never shadow a built-in.

    Args:
        registry: Registry to add the drivers to.
        drivers: Mapping of driver name to its definition.
        workdir: Default working directory given to every custom driver.
    """

    for name, definition in drivers.items():
        if name in RESERVED_DRIVER_NAMES:
            _LOGGER.debug("Skipping custom driver '%s': reserved name.", name)
            continue
        if not definition.command:
            _LOGGER.debug("Skipping custom driver '%s': no command.", name)
            continue
        registry.register(
            CustomDriver(
                name=name,
                command=definition.command,
                args=definition.args,
                timeout_s=definition.timeout,
                workdir=workdir,
            )
        )
