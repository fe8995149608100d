"""Construction of the default driver registry."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from livecode.execution.custom import CustomDriverSpec, register_custom_drivers
from livecode.execution.mysql import MySQLDriver
from livecode.execution.postgres import PostgresDriver
from livecode.execution.registry import DriverRegistry
from livecode.execution.shell import ShellDriver
from livecode.execution.sqlite import SQLiteDriver


def build_default_registry(
    workdir: Path | None = None,
    custom_drivers: Mapping[str, CustomDriverSpec] | None = None,
) -> DriverRegistry:
    """Create a registry with the built-in drivers and any custom drivers.

    Args:
        workdir: Default working directory for every driver.
        custom_drivers: Custom driver definitions keyed by name.

    Returns:
        DriverRegistry populated with shell, sqlite, mysql, postgres and the
        custom drivers whose names do not collide with those.
    """

    registry = DriverRegistry()
    registry.register(ShellDriver(workdir=workdir))
    registry.register(SQLiteDriver(workdir=workdir))
    registry.register(MySQLDriver(workdir=workdir))
    registry.register(PostgresDriver(workdir=workdir))
    if custom_drivers:
        register_custom_drivers(registry, custom_drivers, workdir=workdir)
    return registry
