"""
Tests for the Playground Console

These tests verify the caller side of the interpreter:
- PlaygroundSession threads the store between commands
- history entries are classified by the error marker
- expired keys are swept on the session's cadence
- the interactive loop in main()

Run with: python -m pytest tests/test_console.py -v
"""

import pytest

from playground.cache.entry import Kind
from playground.console import HistoryEntry, PlaygroundSession, main, parse_args
from playground.config.settings import settings
from tests.conftest import FakeClock


class TestSession:
    """Test submitting commands through a session."""

    def test_submit_updates_store(self, session: PlaygroundSession):
        entry = session.submit("SET greeting hello")

        assert entry == HistoryEntry(command="SET greeting hello", output="OK", status="success")
        assert session.store["greeting"].kind is Kind.STRING

    def test_submit_error_status(self, session: PlaygroundSession):
        entry = session.submit("NOPE")

        assert entry.status == "error"
        assert entry.succeeded is False
        assert entry.output.startswith("(error)")

    def test_nil_is_success(self, session: PlaygroundSession):
        """Test a nil reply still counts as a successful interaction."""
        assert session.submit("GET missing").status == "success"

    def test_history_order(self, session: PlaygroundSession):
        session.submit("LPUSH k a")
        session.submit("LPUSH k b")
        session.submit("LRANGE k 0 -1")

        assert [entry.command for entry in session.history] == [
            "LPUSH k a", "LPUSH k b", "LRANGE k 0 -1",
        ]
        assert session.history[-1].output == '1) "b"\n2) "a"'

    def test_failed_command_keeps_store(self, session: PlaygroundSession):
        session.submit("SET k v")
        before = session.store
        session.submit("LPUSH k x")

        assert session.store is before

    def test_reset(self, session: PlaygroundSession):
        session.submit("SET k v")
        session.reset()

        assert len(session.store) == 0
        assert session.history == []


class TestSessionExpiry:
    """Test time-based behaviour with an injected clock."""

    def test_key_expires(self, session: PlaygroundSession, clock: FakeClock):
        session.submit("SET k v")
        session.submit("EXPIRE k 1")

        clock.advance(500)
        assert session.submit("GET k").output == '"v"'

        clock.advance(501)
        assert session.submit("GET k").output == "(nil)"
        assert "k" not in session.store

    def test_tick_removes_expired(self, session: PlaygroundSession, clock: FakeClock):
        session.submit("SET k v EX 1")

        clock.advance(1000)
        assert session.tick() is True
        assert "k" not in session.store
        assert session.tick() is False

    def test_tick_respects_interval(self, session: PlaygroundSession, clock: FakeClock):
        session.submit("SET k v PX 50")

        clock.advance(50)
        # The submit above swept less than 100ms ago
        assert session.tick() is False
        assert "k" in session.store

        clock.advance(50)
        assert session.tick() is True

    def test_ttl_counts_down(self, session: PlaygroundSession, clock: FakeClock):
        session.submit("SET k v EX 10")
        clock.advance(3000)
        assert session.submit("TTL k").output == "(integer) 7"


class TestMain:
    """Test the interactive loop."""

    def feed(self, monkeypatch, lines):
        remaining = iter(lines)

        def fake_input(prompt=""):
            try:
                return next(remaining)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)

    def test_parse_args_defaults(self):
        args = parse_args([])
        assert args.sweep_interval == settings.SWEEP_INTERVAL_MS
        assert args.debug is settings.DEBUG

    def test_parse_args_overrides(self):
        args = parse_args(["--sweep-interval", "250", "--debug"])
        assert args.sweep_interval == 250
        assert args.debug is True

    def test_commands_and_exit(self, monkeypatch, capsys):
        self.feed(monkeypatch, ["SET k v", "", "GET k", "exit", "GET k"])
        main([])

        out = capsys.readouterr().out
        assert "OK" in out
        assert '"v"' in out
        assert out.rstrip().endswith("Goodbye!")

    def test_usage_hint_on_arity_error(self, monkeypatch, capsys):
        self.feed(monkeypatch, ["lpush k"])
        main([])

        out = capsys.readouterr().out
        assert "(error) ERR wrong number of arguments for 'lpush' command" in out
        assert "Usage: LPUSH key value [value ...]" in out

    def test_help(self, monkeypatch, capsys):
        self.feed(monkeypatch, ["help"])
        main([])

        out = capsys.readouterr().out
        assert "HGETALL" in out
        assert "FLUSHALL" in out

    def test_clear(self, monkeypatch, capsys):
        self.feed(monkeypatch, ["SET k v", "clear", "EXISTS k"])
        main([])

        out = capsys.readouterr().out
        assert "Store cleared." in out
        assert "(integer) 0" in out

    @pytest.mark.parametrize("word", ["exit", "QUIT"])
    def test_exit_words(self, monkeypatch, capsys, word: str):
        self.feed(monkeypatch, [word])
        main([])
        assert "Goodbye!" in capsys.readouterr().out
