"""
Rewatch Watcher Data Models.

Raw change notifications and the paths they are reported for.
Requires Python 3.11+.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EventKind(str, Enum):
    """Kinds of raw file system notifications."""

    MODIFY = "modify"
    CREATE = "create"
    REMOVE = "remove"
    ACCESS = "access"
    OTHER = "other"
    ANY = "any"


# watchdog event_type -> EventKind. A move is a name modification.
_WATCHDOG_KINDS: dict[str, EventKind] = {
    "modified": EventKind.MODIFY,
    "moved": EventKind.MODIFY,
    "created": EventKind.CREATE,
    "deleted": EventKind.REMOVE,
    "opened": EventKind.ACCESS,
    "closed": EventKind.ACCESS,
    "closed_no_write": EventKind.ACCESS,
}


def kind_from_watchdog(event_type: str | None) -> EventKind:
    """Translate a watchdog ``event_type`` string into an EventKind."""
    if not event_type:
        return EventKind.ANY
    return _WATCHDOG_KINDS.get(event_type, EventKind.OTHER)


@dataclass(frozen=True, slots=True)
class RawEvent:
    """A single notification reported by the event source."""

    kind: EventKind
    path: Path | None = None
    timestamp: float = field(default_factory=time.monotonic)

    @property
    def is_modify(self) -> bool:
        """Only modifications are relevant for triggering."""
        return self.kind is EventKind.MODIFY


@dataclass(frozen=True, slots=True)
class WatchTarget:
    """A file system path registered for change notification."""

    path: Path

    @classmethod
    def from_string(cls, value: str) -> "WatchTarget":
        return cls(path=Path(value))

    @property
    def recursive(self) -> bool:
        """Directories are watched recursively, plain files are not."""
        return self.path.is_dir()

    def __str__(self) -> str:
        return str(self.path)
