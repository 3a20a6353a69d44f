"""
Rewatch Event Source.

Cross-platform file system monitoring using watchdog.
Requires Python 3.11+.
"""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from utils.errors import WatchRegistrationError
from utils.logger import LoggerMixin
from watcher.events import RawEvent, WatchTarget, kind_from_watchdog

EventSink = Callable[[RawEvent], None]


class ChangeEventHandler(FileSystemEventHandler, LoggerMixin):
    """
    Forwards every watchdog event to a sink as a RawEvent.

    Runs on watchdog's emitter threads. Sink failures are logged and
    never stop the observer.
    """

    def __init__(self, sink: EventSink) -> None:
        """
        Initialize the handler.

        Args:
            sink: Callable receiving translated events
        """
        super().__init__()
        self._sink = sink

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Translate and forward a single watchdog event."""
        raw = RawEvent(
            kind=kind_from_watchdog(event.event_type),
            path=Path(str(event.src_path)) if event.src_path else None,
        )
        try:
            self._sink(raw)
        except Exception as e:
            self.log.error("event_dispatch_failed", kind=raw.kind.value, error=str(e))


class EventSource(LoggerMixin):
    """
    Owns the watchdog observer and the registrations made on it.

    The observer is started before any path is scheduled, so a bad
    path is reported by ``watch`` itself rather than later on the
    observer thread.
    """

    def __init__(self, sink: EventSink) -> None:
        self._handler = ChangeEventHandler(sink)
        self._observer: Observer | None = None
        self._targets: list[WatchTarget] = []

    def start(self) -> None:
        """Start the observer thread."""
        if self._observer is not None:
            return

        self._observer = Observer()
        self._observer.daemon = True
        self._observer.start()
        self.log.debug("event_source_started")

    def watch(self, target: WatchTarget) -> None:
        """
        Register a path for change notification.

        Raises:
            WatchRegistrationError: the path is missing or the backend refused it
        """
        if self._observer is None:
            self.start()

        if not target.path.exists():
            raise WatchRegistrationError(str(target), "No such file or directory")

        try:
            self._observer.schedule(
                self._handler,
                str(target.path),
                recursive=target.recursive,
            )
        except OSError as e:
            raise WatchRegistrationError(str(target), e.strerror or str(e)) from e

        self._targets.append(target)

    def watch_all(
        self,
        targets: Iterable[WatchTarget],
        on_watch: Callable[[WatchTarget], None] | None = None,
    ) -> None:
        """Register targets in order, stopping at the first failure."""
        for target in targets:
            if on_watch is not None:
                on_watch(target)
            self.watch(target)

    def stop(self) -> None:
        """Stop watching and join the observer thread."""
        if self._observer is None:
            return

        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None
        self._targets.clear()
        self.log.debug("event_source_stopped")

    @property
    def targets(self) -> list[WatchTarget]:
        """Paths registered so far."""
        return list(self._targets)

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def __enter__(self) -> "EventSource":
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()
