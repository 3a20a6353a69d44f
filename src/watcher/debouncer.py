"""
Rewatch Debouncer.

Collapses bursts of file modifications into single triggers.
Requires Python 3.11+.
"""

import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from utils.logger import LoggerMixin
from watcher.events import RawEvent


@dataclass
class DebounceWindow:
    """
    Minimum delay between two effective triggers.

    ``last_fired`` starts at construction time and only moves when a
    signal is accepted. Suppressed signals leave it untouched, so a
    burst cannot extend the window.
    """

    interval_s: float
    clock: Callable[[], float] = time.monotonic
    last_fired: float = field(default=-1.0)

    def __post_init__(self) -> None:
        if self.interval_s < 0:
            raise ValueError("interval must not be negative")
        if self.last_fired < 0:
            self.last_fired = self.clock()

    @classmethod
    def from_millis(
        cls, interval_ms: int, clock: Callable[[], float] = time.monotonic
    ) -> "DebounceWindow":
        return cls(interval_s=interval_ms / 1000.0, clock=clock)

    def fire(self, now: float | None = None) -> bool:
        """
        Accept a signal if the window has elapsed.

        Args:
            now: Timestamp of the signal, defaults to the clock

        Returns:
            True when the signal is an effective trigger
        """
        t = self.clock() if now is None else now
        if t - self.last_fired > self.interval_s:
            self.last_fired = t
            return True
        return False


class Debouncer(LoggerMixin):
    """
    Intake for raw events, consumed by a single control loop.

    Producers (watchdog emitter threads) call ``submit`` concurrently and
    never block. Only modifications are queued; everything else is dropped
    here. The time window itself is applied by the consumer through a
    DebounceWindow.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[RawEvent] = queue.SimpleQueue()
        self._dropped = 0
        self._lock = threading.Lock()

    def submit(self, event: RawEvent) -> bool:
        """
        Offer a raw event.

        Args:
            event: Event reported by the event source

        Returns:
            True if the event was queued as a signal
        """
        if not event.is_modify:
            with self._lock:
                self._dropped += 1
            return False

        self._queue.put(event)
        return True

    def next_signal(self, timeout: float | None = None) -> RawEvent | None:
        """
        Block until the next modification signal is available.

        Args:
            timeout: Seconds to wait, None waits forever

        Returns:
            The queued event, or None if the timeout expired
        """
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> int:
        """Discard every queued signal and return how many were dropped."""
        count = 0
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
            count += 1

        if count:
            self.log.debug("signals_drained", count=count)
        return count

    @property
    def pending_count(self) -> int:
        """Approximate number of queued signals."""
        return self._queue.qsize()

    @property
    def dropped_count(self) -> int:
        """Number of non-modify events discarded so far."""
        return self._dropped
