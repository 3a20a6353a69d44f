"""
Rewatch Utilities Package.

Common utilities shared across all modules.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.errors import ConfigurationError, RewatchError, WatchRegistrationError
from utils.logger import configure_logging, get_logger, logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "ConfigurationError",
    "RewatchError",
    "WatchRegistrationError",
    "configure_logging",
    "get_logger",
    "logger",
    "LoggerMixin",
]
