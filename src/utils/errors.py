"""
Rewatch Error Types.

Only setup failures are raised; steady-state process control failures
are reported as results instead.
Requires Python 3.11+.
"""


class RewatchError(Exception):
    """Base class for all rewatch errors."""


class ConfigurationError(RewatchError):
    """Invalid or missing configuration (empty file list, unreadable list file)."""


class WatchRegistrationError(RewatchError):
    """A path could not be registered with the event source."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to watch {path}: {reason}")
        self.path = path
        self.reason = reason
