"""
Rewatch File Watcher Package.

File system monitoring and debouncing of change notifications.
Requires Python 3.11+.
"""

from watcher.debouncer import DebounceWindow, Debouncer
from watcher.event_source import EventSource
from watcher.events import EventKind, RawEvent, WatchTarget

__all__ = [
    "DebounceWindow",
    "Debouncer",
    "EventSource",
    "EventKind",
    "RawEvent",
    "WatchTarget",
]
