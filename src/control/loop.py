"""
Rewatch Control Loop.

Pulls signals from the debouncer, filters them through the debounce
window and drives the process supervisor.
Requires Python 3.11+.
"""

from typing import NoReturn

from supervisor.models import ReconcileOutcome
from supervisor.supervisor import ProcessSupervisor
from utils.logger import LoggerMixin
from watcher.debouncer import DebounceWindow, Debouncer


class ControlLoop(LoggerMixin):
    """
    Single consumer of the debouncer queue.

    Each cycle is WAIT -> FILTER -> RECONCILE -> WAIT, or
    WAIT -> FILTER -> WAIT when the signal falls inside the window.
    Reconciliation runs synchronously, so no new signal is looked at
    while a child is being killed or spawned.
    """

    def __init__(
        self,
        debouncer: Debouncer,
        supervisor: ProcessSupervisor,
        window: DebounceWindow,
    ) -> None:
        self._debouncer = debouncer
        self._supervisor = supervisor
        self._window = window
        self._cycles = 0
        self._triggers = 0
        self._last_outcome: ReconcileOutcome | None = None

    def step(self, timeout: float | None = None) -> bool:
        """
        Run one cycle.

        Args:
            timeout: Seconds to wait for a signal, None waits forever

        Returns:
            True if a signal arrived and passed the debounce window
        """
        signal = self._debouncer.next_signal(timeout=timeout)
        if signal is None:
            return False

        self._cycles += 1
        if not self._window.fire():
            return False

        self._triggers += 1
        self.log.info(
            "change_detected",
            path=str(signal.path) if signal.path else None,
        )
        self._last_outcome = self._supervisor.reconcile()
        return True

    def run(self) -> NoReturn:
        """Loop forever; only process termination ends it."""
        while True:
            self.step()

    @property
    def cycles(self) -> int:
        """Signals received so far."""
        return self._cycles

    @property
    def triggers(self) -> int:
        """Signals that passed the debounce window."""
        return self._triggers

    @property
    def last_outcome(self) -> ReconcileOutcome | None:
        return self._last_outcome
