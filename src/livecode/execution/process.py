"""Child process execution shared by every process-based driver."""

from __future__ import annotations

import os
import signal
import subprocess
import time
from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path

from livecode.execution.base import (
    DEFAULT_TIMEOUT_S,
    Driver,
    ExecutionConfig,
    ExecutionResult,
    Row,
    resolve_timeout,
    resolve_workdir,
)
from livecode.execution.context import ContextState, ExecutionContext
from livecode.util.logging import get_logger

POLL_INTERVAL_S = 0.05


@dataclass(frozen=True)
class ProcessOutcome:
    """Raw outcome of running a child process.

    Attributes:
        command: The command executed as a list of strings.
        stdout: Captured standard output.
        stderr: Captured standard error.
        exit_code: Exit code, or None when the process never started or was killed.
        duration_s: Duration of the execution in seconds.
        interrupted: Context state that stopped the process, ACTIVE if it ran to exit.
        launch_error: Message of the OSError raised while starting the process.
    """

    command: list[str]
    stdout: str
    stderr: str
    exit_code: int | None
    duration_s: float
    interrupted: ContextState = ContextState.ACTIVE
    launch_error: str | None = None


def run_process(
    command: list[str],
    *,
    ctx: ExecutionContext,
    stdin: str = "",
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> ProcessOutcome:
    """Run a command, feeding ``stdin`` and capturing both output streams.

    The process is killed as soon as ``ctx`` is done. Output already
    written by then is still returned.

    Args:
        command: The command to execute.
        ctx: Context whose deadline or cancellation stops the process.
        stdin: Text written to the process's standard input.
        cwd: Optional working directory.
        env: Optional environment variables added to the current environment.

    Returns:
        ProcessOutcome with captured output and how the process ended.
    """

    merged_env = os.environ.copy()
    if env:
        merged_env.update(env)

    start = time.monotonic()
    try:
        process = subprocess.Popen(
            command,
            cwd=str(cwd) if cwd is not None else None,
            env=merged_env,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            start_new_session=os.name == "posix",
        )
    except OSError as exc:
        return ProcessOutcome(
            command=list(command),
            stdout="",
            stderr="",
            exit_code=None,
            duration_s=time.monotonic() - start,
            launch_error=str(exc),
        )

    pending_input: str | None = stdin
    while True:
        state = ctx.state()
        if state is not ContextState.ACTIVE:
            stdout, stderr = _kill(process)
            return ProcessOutcome(
                command=list(command),
                stdout=stdout,
                stderr=stderr,
                exit_code=None,
                duration_s=time.monotonic() - start,
                interrupted=state,
            )
        wait_s = POLL_INTERVAL_S
        remaining = ctx.remaining()
        if remaining is not None:
            wait_s = min(wait_s, max(remaining, 0.001))
        try:
            stdout, stderr = process.communicate(input=pending_input, timeout=wait_s)
        except subprocess.TimeoutExpired:
            # communicate() keeps the input it was given; it must not be passed again.
            pending_input = None
            continue
        return ProcessOutcome(
            command=list(command),
            stdout=stdout,
            stderr=stderr,
            exit_code=process.returncode,
            duration_s=time.monotonic() - start,
        )


def _kill(process: subprocess.Popen[str]) -> tuple[str, str]:
    if os.name == "posix":
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        process.kill()
    stdout, stderr = process.communicate()
    return stdout or "", stderr or ""


def _trim_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


class ProcessDriver(Driver):
    """Driver that pipes code into an external program.

    Subclasses provide the command line and may customise the environment,
    the error wording and how successful output is turned into rows.
    """

    timeout_message = "execution timed out"
    canceled_message = "execution canceled"
    exit_label = "command"

    def __init__(self, workdir: Path | None = None, timeout_s: float = DEFAULT_TIMEOUT_S) -> None:
        """Initialize the driver.

        Args:
            workdir: Default working directory for executions.
            timeout_s: Default timeout in seconds.
        """

        self.workdir = workdir
        self.timeout_s = timeout_s
        self._logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def build_command(self, config: ExecutionConfig) -> list[str]:
        """Return the command line to launch for this execution."""

    def build_env(self, config: ExecutionConfig) -> dict[str, str] | None:
        """Return extra environment variables scoped to the child process."""

        return None

    def parse_rows(self, stdout: str) -> list[Row] | None:
        """Turn successful standard output into rows, or None when not tabular."""

        return None

    def format_error(self, message: str, config: ExecutionConfig) -> str:
        """Post-process an error message before it leaves the driver."""

        return message

    def execute(
        self,
        code: str,
        config: ExecutionConfig | None = None,
        ctx: ExecutionContext | None = None,
    ) -> ExecutionResult:
        config = config or {}
        parent = ctx or ExecutionContext.background()
        child = parent.with_timeout(resolve_timeout(config, self.timeout_s))
        command = self.build_command(config)

        self._logger.info("Running %s driver: %s", self.name, command)
        outcome = run_process(
            command,
            ctx=child,
            stdin=code,
            cwd=resolve_workdir(config, self.workdir),
            env=self.build_env(config),
        )
        return self._to_result(outcome, config)

    def _to_result(self, outcome: ProcessOutcome, config: ExecutionConfig) -> ExecutionResult:
        stdout = _trim_newline(outcome.stdout)
        stderr = _trim_newline(outcome.stderr)

        if outcome.launch_error is not None:
            self._logger.warning("Failed to start %s: %s", outcome.command[0], outcome.launch_error)
            return ExecutionResult.failure(self.format_error(outcome.launch_error, config))

        if outcome.interrupted is ContextState.DEADLINE_EXCEEDED:
            self._logger.warning("%s driver timed out after %.2fs.", self.name, outcome.duration_s)
            return ExecutionResult.failure(self.timeout_message, output=stdout)
        if outcome.interrupted is ContextState.CANCELED:
            self._logger.warning("%s driver canceled after %.2fs.", self.name, outcome.duration_s)
            return ExecutionResult.failure(self.canceled_message, output=stdout)

        self._logger.info(
            "%s driver finished with exit code %s in %.2fs.",
            self.name,
            outcome.exit_code,
            outcome.duration_s,
        )
        if outcome.exit_code != 0:
            message = stderr or f"{self.exit_label} exited with code {outcome.exit_code}"
            return ExecutionResult.failure(self.format_error(message, config), output=stdout)

        data = self.parse_rows(stdout) if stdout else None
        output = stdout
        if stderr:
            output = f"{stdout}\n{stderr}" if stdout else stderr
        return ExecutionResult(success=True, output=output, data=data)
