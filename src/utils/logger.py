"""
Rewatch Structured Logging Module.

Provides consistent, structured logging throughout the application.
Informational lines go to stdout, warnings and errors to stderr.
Requires Python 3.11+.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from utils.config import get_settings


def _add_app_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add application context to all log entries."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["version"] = settings.app_version
    return event_dict


class ConsoleLogger:
    """
    Print rendered log lines to the right standard stream.

    The stream is looked up on every call so that redirections made after
    configuration (pytest's capsys, for instance) are honoured.
    """

    def _write(self, stream: Any, message: str) -> None:
        print(message, file=stream, flush=True)

    def msg(self, message: str) -> None:
        self._write(sys.stdout, message)

    def err(self, message: str) -> None:
        self._write(sys.stderr, message)

    log = debug = info = msg
    warn = warning = error = critical = fatal = exception = err


class ConsoleLoggerFactory:
    """Produce ConsoleLogger instances for structlog."""

    def __call__(self, *args: Any) -> ConsoleLogger:
        return ConsoleLogger()


def configure_logging(quiet: bool = False) -> None:
    """
    Configure structured logging for the application.

    Call this once at application startup. When ``quiet`` is set only
    error lines are emitted.
    """
    settings = get_settings()
    level_name = "ERROR" if quiet else settings.logging.level
    level = getattr(logging, level_name)

    # Common processors for all output formats
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors: list[Processor] = [
            *shared_processors,
            _add_app_context,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=ConsoleLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # Library loggers (watchdog) still go through the standard library
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=level,
    )
    logging.getLogger("watchdog").setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


# Pre-configured logger for quick imports
logger = get_logger("rewatch")


class LoggerMixin:
    """
    Mixin class to add logging capability to any class.

    Usage:
        class MyClass(LoggerMixin):
            def my_method(self):
                self.log.info("doing something", key="value")
    """

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        """Get logger bound to this class name."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
