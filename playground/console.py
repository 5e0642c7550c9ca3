#!/usr/bin/env python3
"""
Redis Playground Console

An interactive console that owns the current store, feeds each typed
line to the interpreter and sweeps expired keys between commands.

Usage:
    python -m playground.console                       # Default settings
    python -m playground.console --sweep-interval 500  # Sweep cadence in ms
    python -m playground.console --debug               # Enable debug logging

Environment Variables:
    PLAYGROUND_SWEEP_INTERVAL_MS  - Sweep cadence in milliseconds
    PLAYGROUND_DEBUG              - Enable debug mode (true/false)
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Callable, List

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default

from .cache.expiration import ExpirationSweeper, current_millis
from .cache.store import Store
from .config.settings import settings
from .protocol.commands import COMMAND_USAGE, usage_hint
from .protocol.interpreter import CommandInterpreter
from .protocol.parser import is_error_reply

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """
    One submitted command and its outcome.

    Attributes:
        command: The line as typed
        output: The rendered reply
        status: "success" or "error", decided by the error marker
    """
    command: str
    output: str
    status: str

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class PlaygroundSession:
    """
    Holds the current store and threads it through the interpreter.

    The session is the only place where a store snapshot is replaced.
    It reads the clock once per call and hands the instant to the
    interpreter and the sweeper.

    Usage:
        session = PlaygroundSession()
        entry = session.submit("SET greeting hello")
        entry.output   # 'OK'
    """

    def __init__(
            self,
            clock: Callable[[], int] = current_millis,
            interpreter: CommandInterpreter = None,
            sweeper: ExpirationSweeper = None,
    ):
        self.clock = clock
        self.interpreter = interpreter if interpreter is not None else CommandInterpreter()
        self.sweeper = sweeper if sweeper is not None else ExpirationSweeper()
        self.store = Store.empty()
        self.history: List[HistoryEntry] = []

    def submit(self, line: str) -> HistoryEntry:
        """
        Execute a command line against the current store.

        Expired keys are swept first if a sweep is due.

        Returns:
            The HistoryEntry recorded for this line
        """
        self.tick()

        result = self.interpreter.execute(line, self.store, self.clock())
        if result.changed:
            self.store = result.new_store

        status = "error" if is_error_reply(result.reply) else "success"
        entry = HistoryEntry(command=line, output=result.reply, status=status)
        self.history.append(entry)
        return entry

    def tick(self) -> bool:
        """
        Run the sweeper once.

        Returns:
            True if expired keys were removed
        """
        swept = self.sweeper.tick(self.store, self.clock())
        if swept is None:
            return False
        self.store = swept
        return True

    def reset(self) -> None:
        """Drop all keys and the command history."""
        self.store = Store.empty()
        self.history.clear()
        self.sweeper.reset()


def print_help() -> None:
    """Print the list of supported commands."""
    print("\nCommands:")
    print("---------")
    for command_type, usage in COMMAND_USAGE.items():
        print(f"  {command_type.name:<10} {usage}")
    print("\nConsole commands:")
    print("-----------------")
    print("  help       Show this help message")
    print("  clear      Drop all keys and history")
    print("  exit       Exit the console\n")


def parse_args(argv: List[str] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Redis Playground: an interactive Redis command console",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--sweep-interval",
        type=int,
        default=settings.SWEEP_INTERVAL_MS,
        help="Milliseconds between expiration sweeps",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def main(argv: List[str] = None) -> None:
    """Main entry point for the console."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    session = PlaygroundSession(sweeper=ExpirationSweeper(interval_ms=args.sweep_interval))
    logger.debug(f"Console started, sweep interval {args.sweep_interval}ms")

    print(f"Welcome to Redis Playground v{settings.VERSION}")
    print("Type 'help' for commands.\n")

    try:
        while True:
            try:
                line = input(settings.PROMPT).strip()
            except EOFError:
                print("\nGoodbye!")
                break

            if not line:
                continue

            lower_line = line.lower()
            if lower_line == "help":
                print_help()
                continue
            if lower_line in ("exit", "quit"):
                print("Goodbye!")
                break
            if lower_line == "clear":
                session.reset()
                print("Store cleared.")
                continue

            entry = session.submit(line)
            print(entry.output)

            if not entry.succeeded and "wrong number of arguments" in entry.output:
                hint = usage_hint(line)
                if hint is not None:
                    print(f"Usage: {line.split()[0].upper()} {hint}".rstrip())

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")


if __name__ == "__main__":
    main()
