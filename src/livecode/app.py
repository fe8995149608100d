"""Application wiring for CLI-friendly code execution."""

from __future__ import annotations

from pathlib import Path

from livecode.config import (
    AppConfig,
    ConfigError,
    build_execution_config,
    custom_driver_specs,
    driver_timeout,
    load_config,
)
from livecode.execution.base import ExecutionResult
from livecode.execution.builtins import build_default_registry
from livecode.execution.context import ExecutionContext
from livecode.execution.registry import DriverRegistry
from livecode.util.logging import get_logger

_LOGGER = get_logger("livecode.app")


class AppError(RuntimeError):
    """Raised when configuration or runtime setup fails."""


def load_app_config(config_path: Path | None) -> AppConfig:
    """Load configuration, converting parse failures into AppError."""

    try:
        return load_config(config_path)
    except ConfigError as exc:
        raise AppError(str(exc)) from exc


def build_registry(config: AppConfig, workdir: Path | None = None) -> DriverRegistry:
    """Build the driver registry for a configuration.

    Args:
        config: Loaded application configuration.
        workdir: Working directory overriding the configured one.

    Returns:
        Registry holding the built-in drivers and configured custom drivers.
    """

    effective_workdir = workdir if workdir is not None else config.workdir
    registry = build_default_registry(effective_workdir, custom_driver_specs(config))
    _LOGGER.debug("Registered drivers: %s", ", ".join(registry.list()))
    return registry


def run_code(
    *,
    driver: str,
    code: str,
    connection: str | None = None,
    config_path: Path | None = None,
    workdir: Path | None = None,
    ctx: ExecutionContext | None = None,
) -> ExecutionResult:
    """Execute a code block the way a presentation would.

    Args:
        driver: Driver name from the code block metadata.
        code: Code block text.
        connection: Named connection from the driver configuration.
        config_path: Presentation or configuration file to read drivers from.
        workdir: Working directory overriding the configured one.
        ctx: Optional caller context used for cancellation.

    Returns:
        ExecutionResult produced by the driver.

    Raises:
        AppError: If the configuration cannot be loaded.
    """

    config = load_app_config(config_path)
    registry = build_registry(config, workdir)
    execution_config = build_execution_config(config, driver, connection)
    parent = (ctx or ExecutionContext.background()).with_timeout(driver_timeout(config, driver))
    _LOGGER.info("Executing code block with driver '%s'.", driver)
    return registry.execute(driver, code, execution_config, parent)
