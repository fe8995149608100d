"""Configuration models and loaders for livecode."""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from livecode.execution.base import DEFAULT_TIMEOUT_S
from livecode.execution.custom import CustomDriverSpec

FRONTMATTER_DELIMITER = "---"
_ENV_VAR_PATTERN = re.compile(r"\$\{?([A-Za-z_][A-Za-z0-9_]*)\}?")
_MARKDOWN_SUFFIXES = {".md", ".markdown"}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or is invalid."""


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection details for a database driver.

    Attributes:
        host: Server hostname.
        port: Server port; zero means the driver default.
        user: Login name.
        password: Login password, possibly an environment variable reference.
        database: Database name (or file for SQLite).
        path: Database file path for file-based drivers.
    """

    host: str = ""
    port: int = 0
    user: str = ""
    password: str = ""
    database: str = ""
    path: str = ""


@dataclass(frozen=True)
class DriverConfig:
    """Configuration for a code execution driver.

    Attributes:
        command: Executable for a custom driver; empty for built-ins.
        args: Arguments passed to the custom driver command.
        timeout: Execution timeout in seconds; zero means the default.
        connections: Named connection settings usable from code blocks.
    """

    command: str = ""
    args: list[str] = field(default_factory=list)
    timeout: int = 0
    connections: dict[str, ConnectionConfig] = field(default_factory=dict)


@dataclass(frozen=True)
class AppConfig:
    """Top-level configuration for code execution.

    Attributes:
        workdir: Default working directory for drivers.
        drivers: Driver configuration keyed by driver name.
    """

    workdir: Path | None = None
    drivers: dict[str, DriverConfig] = field(default_factory=dict)


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from disk.

    Args:
        path: Optional path to a presentation, a configuration file, or a
            directory to search.

    Returns:
        Parsed AppConfig with defaults applied when no config exists.

    Raises:
        ConfigError: If the file cannot be parsed.
    """

    config_path = _resolve_config_path(path)
    if config_path is None:
        return AppConfig()

    if config_path.suffix in _MARKDOWN_SUFFIXES:
        raw_data = _load_frontmatter(config_path)
    elif config_path.suffix in {".yaml", ".yml", ".json"}:
        raw_data = _load_yaml(config_path.read_text(encoding="utf-8"), config_path)
    elif config_path.suffix == ".toml":
        raw_data = _load_toml(config_path)
    else:
        raise ConfigError(f"Unsupported config file type: {config_path}")

    load_env_file(config_path.parent)
    config = _parse_app_config(raw_data, base_path=config_path.parent)
    return resolve_env_vars(config)


def load_env_file(directory: Path) -> bool:
    """Load ``directory/.env`` into the environment without overriding variables.

    Returns:
        True when a ``.env`` file was found and loaded.
    """

    env_path = directory / ".env"
    if not env_path.is_file():
        return False
    return load_dotenv(env_path, override=False)


def expand_env_vars(value: str) -> str:
    """Replace ``$VAR`` and ``${VAR}`` with environment values.

    References to unset variables are left untouched.
    """

    def _substitute(match: re.Match[str]) -> str:
        return os.environ.get(match.group(1), match.group(0))

    return _ENV_VAR_PATTERN.sub(_substitute, value)


def resolve_env_vars(config: AppConfig) -> AppConfig:
    """Return a config copy with environment references in connections expanded."""

    drivers: dict[str, DriverConfig] = {}
    for name, driver in config.drivers.items():
        connections = {
            conn_name: replace(
                conn,
                host=expand_env_vars(conn.host),
                user=expand_env_vars(conn.user),
                password=expand_env_vars(conn.password),
                database=expand_env_vars(conn.database),
                path=expand_env_vars(conn.path),
            )
            for conn_name, conn in driver.connections.items()
        }
        drivers[name] = replace(driver, connections=connections)
    return replace(config, drivers=drivers)


def build_execution_config(
    config: AppConfig, driver_name: str, connection_name: str | None = None
) -> dict[str, str]:
    """Build the per-execution driver configuration for a code block.

    Args:
        config: Loaded application configuration.
        driver_name: Driver the code block runs with.
        connection_name: Named connection referenced by the code block.

    Returns:
        String mapping with the connection fields and timeout that are set.
    """

    driver = config.drivers.get(driver_name)
    if driver is None:
        return {}

    execution_config: dict[str, str] = {}
    connection = driver.connections.get(connection_name) if connection_name else None
    if connection is not None:
        if connection.host:
            execution_config["host"] = connection.host
        if connection.port:
            execution_config["port"] = str(connection.port)
        if connection.user:
            execution_config["user"] = connection.user
        if connection.password:
            execution_config["password"] = connection.password
        if connection.database:
            execution_config["database"] = connection.database
        if connection.path:
            execution_config["path"] = connection.path
    if driver.timeout > 0:
        execution_config["timeout"] = str(driver.timeout)
    return execution_config


def driver_timeout(config: AppConfig, driver_name: str) -> int:
    """Return the configured timeout for a driver, or the default."""

    driver = config.drivers.get(driver_name)
    if driver is not None and driver.timeout > 0:
        return driver.timeout
    return DEFAULT_TIMEOUT_S


def custom_driver_specs(config: AppConfig) -> dict[str, CustomDriverSpec]:
    """Return custom driver definitions for every driver with a command."""

    return {
        name: CustomDriverSpec(command=driver.command, args=list(driver.args), timeout=driver.timeout)
        for name, driver in config.drivers.items()
        if driver.command
    }


def config_to_dict(config: AppConfig, *, redact: bool = True) -> dict[str, Any]:
    """Serialize an AppConfig into a JSON-compatible dictionary.

    Args:
        config: Configuration to serialize.
        redact: Replace connection passwords with a placeholder.
    """

    return {
        "workdir": str(config.workdir) if config.workdir is not None else None,
        "drivers": {
            name: {
                "command": driver.command,
                "args": list(driver.args),
                "timeout": driver.timeout,
                "connections": {
                    conn_name: {
                        "host": conn.host,
                        "port": conn.port,
                        "user": conn.user,
                        "password": "[REDACTED]" if redact and conn.password else conn.password,
                        "database": conn.database,
                        "path": conn.path,
                    }
                    for conn_name, conn in driver.connections.items()
                },
            }
            for name, driver in config.drivers.items()
        },
    }


def _resolve_config_path(path: Path | None) -> Path | None:
    candidate_paths: list[Path] = []
    if path is None:
        candidate_paths.append(Path("livecode.yaml"))
        candidate_paths.append(Path("livecode.yml"))
        candidate_paths.append(Path("pyproject.toml"))
    elif path.is_dir():
        candidate_paths.append(path / "livecode.yaml")
        candidate_paths.append(path / "livecode.yml")
        candidate_paths.append(path / "pyproject.toml")
    else:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        candidate_paths.append(path)

    for candidate in candidate_paths:
        if candidate.exists():
            return candidate
    return None


def _load_frontmatter(path: Path) -> dict[str, Any]:
    lines = path.read_text(encoding="utf-8").splitlines()
    if not lines:
        raise ConfigError(f"Presentation is empty: {path}")
    if lines[0].strip() != FRONTMATTER_DELIMITER:
        return {}
    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONTMATTER_DELIMITER:
            return _load_yaml("\n".join(lines[1:index]), path)
    raise ConfigError(f"Frontmatter not closed: missing closing --- in {path}")


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    if path.name == "pyproject.toml":
        tool_config = data.get("tool", {}).get("livecode", {})
        if not isinstance(tool_config, dict):
            raise ConfigError("tool.livecode must be a mapping.")
        return tool_config
    return data


def _load_yaml(text: str, path: Path) -> dict[str, Any]:
    # JSON documents are valid YAML, so one loader covers both.
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping.")
    return data


def _parse_app_config(raw_data: dict[str, Any], base_path: Path) -> AppConfig:
    drivers = _parse_drivers(raw_data.get("drivers", {}))

    workdir: Path | None = None
    raw_workdir = _optional_str(raw_data.get("workdir"))
    if raw_workdir is not None:
        workdir = Path(raw_workdir)
        if not workdir.is_absolute():
            workdir = (base_path / workdir).resolve()

    return AppConfig(workdir=workdir, drivers=drivers)


def _parse_drivers(raw: Any) -> dict[str, DriverConfig]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("drivers must be a mapping of driver name to settings.")
    drivers: dict[str, DriverConfig] = {}
    for name, item in raw.items():
        if item is None:
            item = {}
        if not isinstance(item, dict):
            raise ConfigError(f"Driver '{name}' must be a mapping.")
        args = item.get("args") or []
        if not isinstance(args, list):
            raise ConfigError(f"Driver '{name}' args must be a list.")
        drivers[str(name)] = DriverConfig(
            command=str(item.get("command") or ""),
            args=[str(arg) for arg in args],
            timeout=_int_field(item.get("timeout"), f"drivers.{name}.timeout"),
            connections=_parse_connections(item.get("connections"), str(name)),
        )
    return drivers


def _parse_connections(raw: Any, driver_name: str) -> dict[str, ConnectionConfig]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Driver '{driver_name}' connections must be a mapping.")
    connections: dict[str, ConnectionConfig] = {}
    for name, item in raw.items():
        if not isinstance(item, dict):
            raise ConfigError(f"Connection '{driver_name}.{name}' must be a mapping.")
        connections[str(name)] = ConnectionConfig(
            host=_optional_str(item.get("host")) or "",
            port=_int_field(item.get("port"), f"{driver_name}.{name}.port"),
            user=_optional_str(item.get("user")) or "",
            password=str(item.get("password") or ""),
            database=_optional_str(item.get("database")) or "",
            path=_optional_str(item.get("path")) or "",
        )
    return connections


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int_field(value: Any, label: str) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{label} must be an integer, got {value!r}.") from exc
