"""
Rewatch Process Primitives.

Thin wrappers around subprocess that report failures as results.
Requires Python 3.11+.
"""

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

from supervisor.models import ProcessAction, ProcessResult


class ChildProcess:
    """A spawned command. Standard streams are inherited from the parent."""

    def __init__(self, popen: subprocess.Popen, argv: Sequence[str]) -> None:
        self._popen = popen
        self._argv = tuple(argv)

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def argv(self) -> tuple[str, ...]:
        return self._argv

    @property
    def returncode(self) -> int | None:
        return self._popen.returncode

    def has_exited(self) -> bool:
        """Non-blocking check whether the process has terminated."""
        return self._popen.poll() is not None

    def kill(self) -> ProcessResult:
        """Send SIGKILL (TerminateProcess on Windows)."""
        try:
            self._popen.kill()
        except OSError as e:
            return ProcessResult.failure(ProcessAction.KILL, e)
        return ProcessResult.success(ProcessAction.KILL)

    def wait(self) -> ProcessResult:
        """Block until the process is gone and reap it."""
        try:
            self._popen.wait()
        except OSError as e:
            return ProcessResult.failure(ProcessAction.WAIT, e)
        return ProcessResult.success(ProcessAction.WAIT)

    def __repr__(self) -> str:
        return f"ChildProcess(pid={self.pid}, argv={list(self._argv)!r})"


@dataclass(frozen=True, slots=True)
class SpawnResult:
    """Outcome of a spawn attempt, carrying the process on success."""

    result: ProcessResult
    process: ChildProcess | None = None

    @property
    def ok(self) -> bool:
        return self.result.ok and self.process is not None


class ProcessLauncher:
    """Starts the configured command, one child per call."""

    def __init__(self, command: Sequence[str]) -> None:
        """
        Initialize the launcher.

        Args:
            command: Program followed by its arguments
        """
        if not command:
            raise ValueError("command must contain at least one token")
        self._command = tuple(command)

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def spawn(self) -> SpawnResult:
        """Start a new child; OS errors come back as a failed result."""
        try:
            popen = subprocess.Popen(list(self._command))
        except (OSError, ValueError) as e:
            return SpawnResult(result=ProcessResult.failure(ProcessAction.SPAWN, e))

        return SpawnResult(
            result=ProcessResult.success(ProcessAction.SPAWN),
            process=ChildProcess(popen, self._command),
        )
