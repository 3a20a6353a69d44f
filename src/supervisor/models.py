"""
Rewatch Supervisor Data Models.

Run policy and the outcomes of process control operations.
Requires Python 3.11+.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class Policy:
    """
    Immutable configuration for one run.

    ``kill`` is forced on whenever ``reexec`` is set.
    """

    command: tuple[str, ...]
    interval_ms: int = 1000
    reexec: bool = False
    kill: bool = False
    quiet: bool = False

    def __post_init__(self) -> None:
        if not self.command:
            raise ValueError("command must contain at least one token")
        if self.interval_ms < 0:
            raise ValueError("interval must not be negative")
        object.__setattr__(self, "command", tuple(self.command))
        if self.reexec:
            object.__setattr__(self, "kill", True)

    @property
    def kill_before_restart(self) -> bool:
        """Running children are killed only when both flags are set."""
        return self.reexec and self.kill

    @property
    def interval_s(self) -> float:
        return self.interval_ms / 1000.0

    @property
    def program(self) -> str:
        return self.command[0]


class ProcessAction(str, Enum):
    """Process control operations."""

    SPAWN = "spawn"
    KILL = "kill"
    WAIT = "wait"


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of a single process control operation."""

    action: ProcessAction
    ok: bool
    error: str | None = None

    @classmethod
    def success(cls, action: ProcessAction) -> "ProcessResult":
        return cls(action=action, ok=True)

    @classmethod
    def failure(cls, action: ProcessAction, error: BaseException | str) -> "ProcessResult":
        return cls(action=action, ok=False, error=str(error))


class ReconcileOutcome(str, Enum):
    """What a reconcile step ended up doing."""

    RESTARTED = "restarted"
    RESTART_SKIPPED = "restart_skipped"
    LEFT_RUNNING = "left_running"
    SPAWNED = "spawned"
    SPAWN_FAILED = "spawn_failed"
