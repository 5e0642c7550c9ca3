"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import pytest

from playground.cache.entry import Entry
from playground.cache.expiration import ExpirationSweeper
from playground.cache.store import Store
from playground.console import PlaygroundSession
from playground.protocol.interpreter import CommandInterpreter
from playground.protocol.parser import ProtocolParser

# Fixed instant used as "now" throughout the tests (epoch milliseconds)
NOW = 1_700_000_000_000


class FakeClock:
    """
    Manually advanced clock for deterministic expiry tests.

    Usage:
        clock = FakeClock()
        clock.advance(1500)
        clock()  # NOW + 1500
    """

    def __init__(self, start: int = NOW):
        self.now = start

    def advance(self, ms: int) -> None:
        self.now += ms

    def __call__(self) -> int:
        return self.now


class Runner:
    """
    Threads a store through a sequence of commands, like a real caller.

    Usage:
        runner = Runner(interpreter)
        runner.run("SET k v")  # 'OK'
    """

    def __init__(self, interpreter: CommandInterpreter, now: int = NOW):
        self.interpreter = interpreter
        self.now = now
        self.store = Store.empty()

    def run(self, line: str) -> str:
        result = self.interpreter.execute(line, self.store, self.now)
        if result.changed:
            self.store = result.new_store
        return result.reply


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def store() -> Store:
    """Create an empty Store."""
    return Store.empty()


@pytest.fixture
def populated_store() -> Store:
    """Create a Store holding one key of every kind plus one volatile key."""
    return Store({
        "greeting": Entry.string("hello"),
        "queue": Entry.list(["a", "b", "c"]),
        "tags": Entry.set(["red", "blue"]),
        "user": Entry.hash({"name": "Alice", "age": "30"}),
        "session": Entry.string("abc").with_expiry(NOW + 5000),
    })


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


@pytest.fixture
def interpreter() -> CommandInterpreter:
    """Create a CommandInterpreter instance."""
    return CommandInterpreter()


@pytest.fixture
def runner(interpreter: CommandInterpreter) -> Runner:
    """Create a Runner that threads an empty store through commands at NOW."""
    return Runner(interpreter)


# ============================================================================
# Expiration Fixtures
# ============================================================================

@pytest.fixture
def sweeper() -> ExpirationSweeper:
    """Create a sweeper with a 100ms cadence."""
    return ExpirationSweeper(interval_ms=100)


@pytest.fixture
def clock() -> FakeClock:
    """Create a manually advanced clock starting at NOW."""
    return FakeClock()


@pytest.fixture
def session(clock: FakeClock) -> PlaygroundSession:
    """Create a console session driven by the fake clock."""
    return PlaygroundSession(clock=clock, sweeper=ExpirationSweeper(interval_ms=100))


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
