from __future__ import annotations

import shutil

import pytest

from livecode.execution.custom import (
    CustomDriver,
    CustomDriverSpec,
    register_custom_drivers,
)
from livecode.execution.registry import DriverRegistry
from livecode.execution.shell import ShellDriver


@pytest.mark.skipif(shutil.which("sed") is None, reason="sed not available")
def test_custom_driver_pipes_code_to_command() -> None:
    driver = CustomDriver(name="sed", command="sed", args=["s/hello/goodbye/"])

    result = driver.execute("hello world")

    assert result.success is True
    assert result.output == "goodbye world"


def test_custom_driver_defaults() -> None:
    driver = CustomDriver(name="py", command="python3", args=["-"], timeout_s=0)

    assert driver.name == "py"
    assert driver.timeout_s == 30
    assert driver.build_command({}) == ["python3", "-"]


def test_custom_driver_missing_command_is_launch_failure() -> None:
    driver = CustomDriver(name="ghost", command="livecode-definitely-missing-binary")

    result = driver.execute("anything")

    assert result.success is False
    assert "livecode-definitely-missing-binary" in result.error
    assert result.output == ""


def test_register_custom_drivers_skips_reserved_and_empty() -> None:
    registry = DriverRegistry()
    builtin_shell = ShellDriver()
    registry.register(builtin_shell)

    register_custom_drivers(
        registry,
        {
            "shell": CustomDriverSpec(command="bash"),
            "sqlite": CustomDriverSpec(command="sqlite3"),
            "empty": CustomDriverSpec(command=""),
            "python": CustomDriverSpec(command="python3", args=["-"], timeout=5),
        },
    )

    assert registry.list() == ["python", "shell"]
    assert registry.get("shell") is builtin_shell
    python_driver = registry.get("python")
    assert isinstance(python_driver, CustomDriver)
    assert python_driver.args == ("-",)
    assert python_driver.timeout_s == 5
