from __future__ import annotations

import os
import threading
import time
from pathlib import Path

import pytest

from livecode.execution.base import ExecutionResult
from livecode.execution.context import ExecutionContext
from livecode.execution.registry import DriverRegistry
from livecode.execution.shell import ShellDriver

pytestmark = pytest.mark.skipif(os.name != "posix", reason="requires a POSIX shell")


def test_shell_driver_echo_hello() -> None:
    registry = DriverRegistry()
    registry.register(ShellDriver())

    result = registry.execute("shell", "echo hello", None)

    assert result == ExecutionResult(success=True, output="hello", error="")


def test_shell_driver_runs_multiline_scripts_from_stdin() -> None:
    script = 'greeting="it\'s fine"\nfor i in 1 2; do\n  echo "$greeting $i"\ndone\n'

    result = ShellDriver().execute(script)

    assert result.success is True
    assert result.output == "it's fine 1\nit's fine 2"


def test_shell_driver_appends_stderr_on_success() -> None:
    result = ShellDriver().execute("echo out; echo warning >&2")

    assert result.success is True
    assert result.output == "out\nwarning"
    assert result.error == ""


def test_shell_driver_stderr_only_output() -> None:
    result = ShellDriver().execute("echo notice >&2")

    assert result.output == "notice"


def test_shell_driver_reports_stderr_on_failure() -> None:
    result = ShellDriver().execute("echo partial; echo boom >&2; exit 3")

    assert result.success is False
    assert result.error == "boom"
    assert result.output == "partial"
    assert result.data is None


def test_shell_driver_synthesizes_exit_code_message() -> None:
    result = ShellDriver().execute("exit 4")

    assert result.success is False
    assert result.error == "command exited with code 4"


def test_shell_driver_timeout_override() -> None:
    driver = ShellDriver(timeout_s=30)

    start = time.monotonic()
    slow = driver.execute("sleep 2", {"timeout": "1"})
    elapsed = time.monotonic() - start
    fast = driver.execute("sleep 0.5", {"timeout": "1"})

    assert slow.success is False
    assert slow.error == "execution timed out"
    assert elapsed < 2
    assert fast.success is True


def test_shell_driver_timeout_keeps_partial_output() -> None:
    result = ShellDriver(timeout_s=1).execute("echo before; sleep 5; echo after")

    assert result.success is False
    assert result.error == "execution timed out"
    assert result.output == "before"


def test_shell_driver_ignores_invalid_timeout() -> None:
    result = ShellDriver().execute("echo ok", {"timeout": "soon"})

    assert result.success is True
    assert result.output == "ok"


def test_shell_driver_cancellation() -> None:
    ctx = ExecutionContext.background().with_cancel()
    timer = threading.Timer(0.2, ctx.cancel)
    timer.start()

    start = time.monotonic()
    result = ShellDriver().execute("sleep 5", ctx=ctx)
    elapsed = time.monotonic() - start
    timer.join()

    assert result.success is False
    assert result.error == "execution canceled"
    assert elapsed < 5


def test_shell_driver_parent_deadline_counts_as_timeout() -> None:
    ctx = ExecutionContext.background().with_timeout(0.3)

    result = ShellDriver().execute("sleep 5", ctx=ctx)

    assert result.error == "execution timed out"


def test_shell_driver_workdir_override(tmp_path: Path) -> None:
    default_dir = tmp_path / "default"
    override_dir = tmp_path / "override"
    default_dir.mkdir()
    override_dir.mkdir()
    driver = ShellDriver(workdir=default_dir)

    default_result = driver.execute("pwd")
    override_result = driver.execute("pwd", {"workdir": str(override_dir)})

    assert Path(default_result.output).resolve() == default_dir.resolve()
    assert Path(override_result.output).resolve() == override_dir.resolve()
    assert driver.workdir == default_dir


def test_shell_driver_missing_workdir_is_launch_failure(tmp_path: Path) -> None:
    result = ShellDriver().execute("pwd", {"workdir": str(tmp_path / "missing")})

    assert result.success is False
    assert result.error


def test_shell_driver_concurrent_executions_are_isolated() -> None:
    driver = ShellDriver()
    results: dict[int, ExecutionResult] = {}

    def run(index: int) -> None:
        results[index] = driver.execute(f"sleep 0.1; echo {index}")

    threads = [threading.Thread(target=run, args=(index,)) for index in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert {index: result.output for index, result in results.items()} == {
        index: str(index) for index in range(8)
    }
