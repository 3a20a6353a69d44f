"""
Rewatch Process Supervisor.

Owns the single child process slot and reconciles it on every trigger.
Requires Python 3.11+.
"""

from supervisor.models import Policy, ReconcileOutcome
from supervisor.process import ChildProcess, ProcessLauncher
from utils.logger import LoggerMixin


class ProcessSupervisor(LoggerMixin):
    """
    Keeps at most one child process alive for the configured command.

    On each effective trigger exactly one of these happens:

    - kill and restart: with ``reexec`` (which implies ``kill``) a held
      child is killed and waited on, then a new one is spawned. If either
      step fails the slot is left empty and nothing is spawned until the
      next trigger.
    - leave running: without kill, a held child that is still alive is
      kept and no new process is started.
    - spawn: the slot is empty (never filled, killed, or the child exited
      on its own) and a new child is started.

    Failures are logged and never raised; the caller keeps looping.
    """

    def __init__(self, policy: Policy, launcher: ProcessLauncher | None = None) -> None:
        """
        Initialize the supervisor.

        Args:
            policy: Run policy
            launcher: Spawns the command, defaults to a ProcessLauncher for policy.command
        """
        self._policy = policy
        self._launcher = launcher or ProcessLauncher(policy.command)
        self._child: ChildProcess | None = None

    @property
    def policy(self) -> Policy:
        return self._policy

    @property
    def child(self) -> ChildProcess | None:
        """The currently held child, if any."""
        return self._child

    @property
    def is_occupied(self) -> bool:
        return self._child is not None

    def start(self) -> ChildProcess | None:
        """Initial spawn; only happens when ``reexec`` is set."""
        if self._policy.reexec and self._child is None:
            self._spawn()
        return self._child

    def reconcile(self) -> ReconcileOutcome:
        """
        React to one effective trigger.

        Returns:
            The action that was taken
        """
        restarting = False
        child, self._child = self._child, None

        if child is not None:
            if self._policy.kill_before_restart:
                if not self._terminate(child):
                    self.log.error("restart_skipped", reason="failed to kill child process")
                    return ReconcileOutcome.RESTART_SKIPPED
                restarting = True
            elif not child.has_exited():
                self._child = child
                return ReconcileOutcome.LEFT_RUNNING
            else:
                self.log.debug("child_exited", pid=child.pid, returncode=child.returncode)

        if not self._spawn():
            return ReconcileOutcome.SPAWN_FAILED
        return ReconcileOutcome.RESTARTED if restarting else ReconcileOutcome.SPAWNED

    def shutdown(self) -> None:
        """Best-effort kill of the held child."""
        child, self._child = self._child, None
        if child is not None and not child.has_exited():
            self._terminate(child)

    def _terminate(self, child: ChildProcess) -> bool:
        """Kill then wait; both must succeed."""
        killed = child.kill()
        if not killed.ok:
            self.log.error("kill_failed", pid=child.pid, error=killed.error)
            return False

        waited = child.wait()
        if not waited.ok:
            self.log.error("wait_failed", pid=child.pid, error=waited.error)
            return False

        self.log.info("child_terminated", pid=child.pid)
        return True

    def _spawn(self) -> bool:
        spawned = self._launcher.spawn()
        if not spawned.ok:
            self.log.error(
                "spawn_failed",
                command=self._policy.program,
                error=spawned.result.error,
            )
            return False

        self._child = spawned.process
        self.log.info("child_started", pid=self._child.pid, command=self._policy.program)
        return True
