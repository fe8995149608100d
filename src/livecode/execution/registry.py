"""Registry mapping driver names to driver instances."""

from __future__ import annotations

from livecode.execution.base import Driver, ExecutionConfig, ExecutionResult
from livecode.execution.context import ExecutionContext
from livecode.util.logging import get_logger
from livecode.util.rwlock import RWLock

_LOGGER = get_logger(__name__)


class DriverRegistry:
    """Thread-safe directory of drivers keyed by name.

    Registration may race with lookups while custom drivers are added at
    startup; a read/write lock keeps lookups concurrent and writes exclusive.
    """

    def __init__(self) -> None:
        self._drivers: dict[str, Driver] = {}
        self._lock = RWLock()

    def register(self, driver: Driver) -> None:
        """Register a driver, replacing any existing driver with the same name."""

        with self._lock.write():
            replaced = driver.name in self._drivers
            self._drivers[driver.name] = driver
        if replaced:
            _LOGGER.debug("Replaced driver '%s'.", driver.name)

    def get(self, name: str) -> Driver | None:
        """Return the driver registered under ``name``, or None."""

        with self._lock.read():
            return self._drivers.get(name)

    def has(self, name: str) -> bool:
        with self._lock.read():
            return name in self._drivers

    def list(self) -> list[str]:
        """Return the registered driver names in sorted order."""

        with self._lock.read():
            return sorted(self._drivers)

    def execute(
        self,
        name: str,
        code: str,
        config: ExecutionConfig | None = None,
        ctx: ExecutionContext | None = None,
    ) -> ExecutionResult:
        """Execute code with the named driver.

        Args:
            name: Driver name to execute with.
            code: Source text to run.
            config: Per-execution driver configuration.
            ctx: Optional caller context used for cancellation.

        Returns:
            The driver's ExecutionResult, or a failed result when no driver
            is registered under ``name``.
        """

        driver = self.get(name)
        if driver is None:
            return ExecutionResult.failure(f"driver not found: {name}")
        return driver.execute(code, config, ctx)
