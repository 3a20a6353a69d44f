"""
Rewatch Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import itertools
from collections.abc import Generator

import pytest

from supervisor.models import Policy, ProcessAction, ProcessResult
from supervisor.process import SpawnResult
from utils.logger import configure_logging

_pids = itertools.count(1000)


class ManualClock:
    """A monotonic clock advanced by hand."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def advance_ms(self, millis: int) -> None:
        self.now += millis / 1000.0


class FakeChild:
    """Stands in for ChildProcess and records what is done to it."""

    def __init__(self, calls: list[tuple[str, int]]) -> None:
        self.pid = next(_pids)
        self.returncode: int | None = None
        self.kill_error: str | None = None
        self.wait_error: str | None = None
        self._calls = calls

    def exit(self, code: int = 0) -> None:
        self.returncode = code

    def has_exited(self) -> bool:
        self._calls.append(("poll", self.pid))
        return self.returncode is not None

    def kill(self) -> ProcessResult:
        self._calls.append(("kill", self.pid))
        if self.kill_error:
            return ProcessResult.failure(ProcessAction.KILL, self.kill_error)
        return ProcessResult.success(ProcessAction.KILL)

    def wait(self) -> ProcessResult:
        self._calls.append(("wait", self.pid))
        if self.wait_error:
            return ProcessResult.failure(ProcessAction.WAIT, self.wait_error)
        self.returncode = -9
        return ProcessResult.success(ProcessAction.WAIT)


class FakeLauncher:
    """Stands in for ProcessLauncher; failures can be queued."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []
        self.children: list[FakeChild] = []
        self.fail_next: list[str] = []

    def spawn(self) -> SpawnResult:
        if self.fail_next:
            error = self.fail_next.pop(0)
            self.calls.append(("spawn_failed", 0))
            return SpawnResult(result=ProcessResult.failure(ProcessAction.SPAWN, error))

        child = FakeChild(self.calls)
        self.children.append(child)
        self.calls.append(("spawn", child.pid))
        return SpawnResult(result=ProcessResult.success(ProcessAction.SPAWN), process=child)

    @property
    def spawn_count(self) -> int:
        return len(self.children)

    def actions(self) -> list[str]:
        """Recorded call names without pids."""
        return [name for name, _ in self.calls]


@pytest.fixture(autouse=True)
def logging_configured() -> Generator[None, None, None]:
    """Start every test with verbose console logging."""
    configure_logging(quiet=False)
    yield
    configure_logging(quiet=False)


@pytest.fixture
def clock() -> ManualClock:
    """A manual clock starting at t=100s."""
    return ManualClock(start=100.0)


@pytest.fixture
def launcher() -> FakeLauncher:
    """A fake launcher."""
    return FakeLauncher()


@pytest.fixture
def command() -> tuple[str, ...]:
    return ("serve", "--port", "8000")


@pytest.fixture
def reexec_policy(command: tuple[str, ...]) -> Policy:
    return Policy(command=command, reexec=True)


@pytest.fixture
def plain_policy(command: tuple[str, ...]) -> Policy:
    return Policy(command=command)
