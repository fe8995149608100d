"""Code execution drivers package."""

from livecode.execution.base import Driver, ExecutionResult
from livecode.execution.builtins import build_default_registry
from livecode.execution.context import ContextState, ExecutionContext
from livecode.execution.custom import CustomDriver, CustomDriverSpec, register_custom_drivers
from livecode.execution.masking import mask_credentials
from livecode.execution.mysql import MySQLDriver
from livecode.execution.postgres import PostgresDriver
from livecode.execution.registry import DriverRegistry
from livecode.execution.shell import ShellDriver
from livecode.execution.sqlite import SQLiteDriver

__all__ = [
    "ContextState",
    "CustomDriver",
    "CustomDriverSpec",
    "Driver",
    "DriverRegistry",
    "ExecutionContext",
    "ExecutionResult",
    "MySQLDriver",
    "PostgresDriver",
    "SQLiteDriver",
    "ShellDriver",
    "build_default_registry",
    "mask_credentials",
    "register_custom_drivers",
]
