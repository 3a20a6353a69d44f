"""
Rewatch Command Line Interface.

Watches files and (re)starts a command when they change.
Requires Python 3.11+.

Usage:
    rewatch -f src -f config.toml -r python app.py --port 8000
    rewatch -l watched.txt -i 500 -- make test
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from control.loop import ControlLoop
from supervisor.models import Policy
from supervisor.supervisor import ProcessSupervisor
from utils.config import get_settings
from utils.errors import ConfigurationError, RewatchError
from utils.logger import configure_logging, logger
from watcher.debouncer import DebounceWindow, Debouncer
from watcher.event_source import EventSource
from watcher.events import WatchTarget


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError("interval must not be negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog=settings.app_name,
        description="Run a command and react to changes in watched files",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {settings.app_version}",
    )
    parser.add_argument(
        "-f", "--files",
        action="append",
        default=[],
        metavar="PATH",
        help="File or directory to watch (repeatable)",
    )
    parser.add_argument(
        "-l", "--list",
        type=Path,
        default=None,
        metavar="PATH",
        help="File containing the paths to watch, one per line (replaces --files)",
    )
    parser.add_argument(
        "-i", "--interval",
        type=_non_negative_int,
        default=settings.watcher.interval_ms,
        metavar="MS",
        help="Minimum delay between two reactions, in milliseconds (default: %(default)s)",
    )
    parser.add_argument(
        "-r", "--reexec",
        action="store_true",
        help="Start the command right away and restart it on change",
    )
    parser.add_argument(
        "-k", "--kill",
        action="store_true",
        help="Kill the previous child before restarting (implied by --reexec)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print anything except errors",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run, followed by its arguments",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse arguments, requiring at least one command token."""
    parser = build_parser()
    args = parser.parse_args(argv)

    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        parser.error("the following arguments are required: command")
    args.command = command
    return args


def read_file_list(list_path: Path) -> list[str]:
    """
    Read paths to watch from a file.

    Lines are stripped; blank lines are skipped.

    Raises:
        ConfigurationError: the file cannot be read
    """
    try:
        content = list_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to open file list {list_path}: {e}") from e

    return [line.strip() for line in content.splitlines() if line.strip()]


def resolve_files(files: Sequence[str], list_path: Path | None) -> list[WatchTarget]:
    """
    Work out the paths to watch.

    A list file, when given, replaces the paths passed with --files.

    Raises:
        ConfigurationError: nothing to watch or unreadable list file
    """
    paths = read_file_list(list_path) if list_path is not None else list(files)
    if not paths:
        raise ConfigurationError("No files to watch")
    return [WatchTarget.from_string(p) for p in paths]


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def run(args: argparse.Namespace) -> NoReturn:
    """Set everything up and hand control to the loop."""
    try:
        targets = resolve_files(args.files, args.list)
        policy = Policy(
            command=tuple(args.command),
            interval_ms=args.interval,
            reexec=args.reexec,
            kill=args.kill,
            quiet=args.quiet,
        )
    except (RewatchError, ValueError) as e:
        _fail(str(e))

    configure_logging(quiet=policy.quiet)

    debouncer = Debouncer()
    source = EventSource(debouncer.submit)
    supervisor = ProcessSupervisor(policy)
    try:
        try:
            source.watch_all(
                targets,
                on_watch=lambda target: logger.info("watching_path", path=str(target)),
            )
        except RewatchError as e:
            source.stop()
            _fail(str(e))

        window = DebounceWindow.from_millis(policy.interval_ms)
        supervisor.start()
        ControlLoop(debouncer, supervisor, window).run()
    except KeyboardInterrupt:
        supervisor.shutdown()
        source.stop()
        debouncer.drain()
        sys.exit(130)


def main(argv: Sequence[str] | None = None) -> NoReturn:
    """Main entry point."""
    run(parse_args(argv))


if __name__ == "__main__":
    main()
