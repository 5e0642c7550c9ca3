"""
Command Interpreter Module

This module turns one command line plus a Store snapshot into a reply
and, for mutating commands, a replacement snapshot.

The interpreter is a pure function of (line, store, now):
- it never mutates the store it is given
- it keeps no state between calls
- it never raises for malformed input; every failure becomes an
  error reply and leaves the store untouched

Every command treats an entry whose expiry has passed as absent, even
if the sweeper has not removed it yet. A write to such a key starts
from scratch and drops the stale entry from the returned store.
"""

import logging
import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Callable, Dict, List, Optional, Tuple

from .commands import Command, CommandError, CommandType, ErrorKind, Response
from .parser import ProtocolParser, is_error_reply
from ..cache.entry import Entry, Kind
from ..cache.store import Store
from ..config.settings import settings

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?\d+")

# A handler receives (args, store, now) and returns the reply plus the
# replacement store, or None when the store is unchanged.
Handler = Callable[[List[str], Store, int], Tuple[Response, Optional[Store]]]


@dataclass(frozen=True)
class CommandInfo:
    """Arity contract and handler for one command."""
    type: CommandType
    handler: Handler
    min_args: int
    max_args: Optional[int] = None  # None means variadic

    def accepts(self, count: int) -> bool:
        """Check whether `count` arguments satisfy the arity contract."""
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args


COMMAND_TABLE: Dict[CommandType, CommandInfo] = {}


def command(command_type: CommandType, min_args: int, max_args: Optional[int] = None):
    """Register a handler in the dispatch table."""
    def decorator(func: Handler) -> Handler:
        COMMAND_TABLE[command_type] = CommandInfo(command_type, func, min_args, max_args)
        return func
    return decorator


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of executing one command line.

    Attributes:
        reply: Rendered reply text; failures start with "(error)"
        new_store: Replacement snapshot, or None if the store is unchanged
        response: The structured reply the text was rendered from
    """
    reply: str
    new_store: Optional[Store] = None
    response: Optional[Response] = None

    @property
    def changed(self) -> bool:
        """Check if the caller should adopt new_store."""
        return self.new_store is not None

    @property
    def is_error(self) -> bool:
        """Check if the command failed."""
        return is_error_reply(self.reply)


# ============================================================================
# Helpers
# ============================================================================

def _lookup(store: Store, key: str, now: int, kind: Kind) -> Optional[Entry]:
    """
    Fetch a live entry and enforce its kind.

    Raises:
        CommandError: If the key holds a different kind
    """
    entry = store.lookup(key, now)
    if entry is not None and entry.kind is not kind:
        logger.debug(f"Type mismatch on '{key}': holds {entry.kind.label}, expected {kind.label}")
        raise CommandError.wrong_type()
    return entry


def _parse_int(text: str) -> int:
    """
    Parse a decimal integer argument.

    Raises:
        CommandError: If the text is not a plain integer
    """
    if not _INTEGER.fullmatch(text):
        raise CommandError.not_an_integer()
    return int(text)


def _store_values(store: Store, key: str, entry: Optional[Entry], fresh: Entry) -> Store:
    """Write a new payload, keeping the existing entry's expiry if there is one."""
    if entry is None:
        return store.put(key, fresh)
    return store.put(key, entry.with_value(fresh.value))


# ============================================================================
# Keys
# ============================================================================

@command(CommandType.SET, min_args=2, max_args=4)
def set_command(args, store, now):
    key, value = args[0], args[1]
    expires_at = None

    if len(args) > 2:
        if len(args) != 4:
            raise CommandError.syntax()
        option = args[2].upper()
        amount = _parse_int(args[3])
        if option not in ("EX", "PX"):
            raise CommandError.syntax()
        if amount <= 0:
            raise CommandError(ErrorKind.RANGE, "ERR invalid expire time in 'set' command")
        expires_at = now + (amount * 1000 if option == "EX" else amount)

    return Response.ok(), store.put(key, Entry.string(value).with_expiry(expires_at))


@command(CommandType.GET, min_args=1, max_args=1)
def get_command(args, store, now):
    entry = _lookup(store, args[0], now, Kind.STRING)
    if entry is None:
        return Response.nil(), None
    return Response.bulk(entry.value), None


@command(CommandType.DEL, min_args=1)
def del_command(args, store, now):
    live = [key for key in dict.fromkeys(args) if store.lookup(key, now) is not None]
    if not live:
        return Response.integer(0), None
    return Response.integer(len(live)), store.remove(*live)


@command(CommandType.EXISTS, min_args=1)
def exists_command(args, store, now):
    count = sum(1 for key in args if store.lookup(key, now) is not None)
    return Response.integer(count), None


@command(CommandType.EXPIRE, min_args=2, max_args=2)
def expire_command(args, store, now):
    key = args[0]
    seconds = _parse_int(args[1])

    entry = store.lookup(key, now)
    if entry is None:
        return Response.integer(0), None

    if seconds <= 0:
        return Response.integer(1), store.remove(key)
    return Response.integer(1), store.put(key, entry.with_expiry(now + seconds * 1000))


@command(CommandType.TTL, min_args=1, max_args=1)
def ttl_command(args, store, now):
    entry = store.lookup(args[0], now)
    if entry is None:
        return Response.integer(-2), None

    remaining = entry.ttl_ms(now)
    if remaining is None:
        return Response.integer(-1), None
    # Round up so a fresh EXPIRE k 10 reports 10
    return Response.integer(-(-remaining // 1000)), None


@command(CommandType.PERSIST, min_args=1, max_args=1)
def persist_command(args, store, now):
    key = args[0]
    entry = store.lookup(key, now)
    if entry is None or entry.expires_at is None:
        return Response.integer(0), None
    return Response.integer(1), store.put(key, entry.with_expiry(None))


@command(CommandType.KEYS, min_args=1, max_args=1)
def keys_command(args, store, now):
    # fnmatch negates classes with [!...], Redis with [^...]
    pattern = args[0].replace("[^", "[!")
    return Response.array([key for key in store.live_keys(now) if fnmatchcase(key, pattern)]), None


@command(CommandType.FLUSHALL, min_args=0, max_args=0)
def flushall_command(args, store, now):
    if not len(store):
        return Response.ok(), None
    return Response.ok(), store.clear()


@command(CommandType.INFO, min_args=0, max_args=1)
def info_command(args, store, now):
    stats = store.get_stats(now)
    sections = {
        "server": [
            "# Server",
            f"redis_version:{settings.VERSION}",
            f"redis_mode:{settings.REDIS_MODE}",
            "tcp_port:6379",
        ],
        "keyspace": ["# Keyspace"],
    }
    if stats["active_keys"]:
        sections["keyspace"].append(
            f"db0:keys={stats['active_keys']},expires={stats['volatile_keys']}"
        )

    wanted = args[0].lower() if args else "default"
    if wanted in ("default", "all", "everything"):
        chosen = list(sections.values())
    elif wanted in sections:
        chosen = [sections[wanted]]
    else:
        chosen = []

    return Response.text("\n\n".join("\n".join(lines) for lines in chosen)), None


# ============================================================================
# Lists
# ============================================================================

@command(CommandType.LPUSH, min_args=2)
def lpush_command(args, store, now):
    key = args[0]
    entry = _lookup(store, key, now, Kind.LIST)
    current = entry.value if entry is not None else ()

    # Each value becomes the new head in turn
    items = tuple(reversed(args[1:])) + current
    return Response.integer(len(items)), _store_values(store, key, entry, Entry.list(items))


@command(CommandType.RPUSH, min_args=2)
def rpush_command(args, store, now):
    key = args[0]
    entry = _lookup(store, key, now, Kind.LIST)
    current = entry.value if entry is not None else ()

    items = current + tuple(args[1:])
    return Response.integer(len(items)), _store_values(store, key, entry, Entry.list(items))


@command(CommandType.LPOP, min_args=1, max_args=1)
def lpop_command(args, store, now):
    key = args[0]
    entry = _lookup(store, key, now, Kind.LIST)
    if entry is None or not entry.value:
        return Response.nil(), None

    head, rest = entry.value[0], entry.value[1:]
    if not rest:
        # Empty lists are never kept
        return Response.bulk(head), store.remove(key)
    return Response.bulk(head), store.put(key, entry.with_value(rest))


@command(CommandType.LRANGE, min_args=3, max_args=3)
def lrange_command(args, store, now):
    key = args[0]
    start = _parse_int(args[1])
    stop = _parse_int(args[2])

    entry = _lookup(store, key, now, Kind.LIST)
    if entry is None:
        return Response.array([]), None

    items = entry.value
    length = len(items)
    if start < 0:
        start += length
    if stop < 0:
        stop += length
    start = max(start, 0)

    if start > stop or start >= length:
        return Response.array([]), None
    stop = min(stop, length - 1)
    return Response.array(items[start:stop + 1]), None


# ============================================================================
# Sets
# ============================================================================

@command(CommandType.SADD, min_args=2)
def sadd_command(args, store, now):
    key = args[0]
    entry = _lookup(store, key, now, Kind.SET)
    members = entry.value if entry is not None else frozenset()

    added = [member for member in dict.fromkeys(args[1:]) if member not in members]
    if not added:
        return Response.integer(0), None
    return Response.integer(len(added)), _store_values(store, key, entry, Entry.set(members.union(added)))


@command(CommandType.SMEMBERS, min_args=1, max_args=1)
def smembers_command(args, store, now):
    entry = _lookup(store, args[0], now, Kind.SET)
    if entry is None:
        return Response.array([]), None
    return Response.array(sorted(entry.value)), None


@command(CommandType.SISMEMBER, min_args=2, max_args=2)
def sismember_command(args, store, now):
    entry = _lookup(store, args[0], now, Kind.SET)
    found = entry is not None and args[1] in entry.value
    return Response.integer(1 if found else 0), None


# ============================================================================
# Hashes
# ============================================================================

@command(CommandType.HSET, min_args=3)
def hset_command(args, store, now):
    key, pairs = args[0], args[1:]
    if len(pairs) % 2:
        raise CommandError.wrong_arity("hset")

    entry = _lookup(store, key, now, Kind.HASH)
    fields = dict(entry.value) if entry is not None else {}

    added = 0
    for index in range(0, len(pairs), 2):
        field, value = pairs[index], pairs[index + 1]
        if field not in fields:
            added += 1
        fields[field] = value

    return Response.integer(added), _store_values(store, key, entry, Entry.hash(fields))


@command(CommandType.HGET, min_args=2, max_args=2)
def hget_command(args, store, now):
    entry = _lookup(store, args[0], now, Kind.HASH)
    if entry is None or args[1] not in entry.value:
        return Response.nil(), None
    return Response.bulk(entry.value[args[1]]), None


@command(CommandType.HGETALL, min_args=1, max_args=1)
def hgetall_command(args, store, now):
    entry = _lookup(store, args[0], now, Kind.HASH)
    if entry is None:
        return Response.array([]), None

    flat = []
    for field, value in entry.value.items():
        flat.extend((field, value))
    return Response.array(flat), None


# ============================================================================
# Interpreter
# ============================================================================

class CommandInterpreter:
    """
    Executes command lines against Store snapshots.

    Usage:
        interpreter = CommandInterpreter()
        result = interpreter.execute("LPUSH queue a", store, now=current_millis())
        print(result.reply)          # (integer) 1
        if result.changed:
            store = result.new_store

    Attributes:
        parser: The ProtocolParser used to tokenise lines and render replies
    """

    def __init__(self, parser: ProtocolParser = None):
        self.parser = parser if parser is not None else ProtocolParser()

    def execute(self, line: str, store: Store, now: int) -> CommandResult:
        """
        Execute one command line.

        Args:
            line: The raw command line
            store: The current snapshot (never modified)
            now: Current instant in epoch milliseconds

        Returns:
            CommandResult with the rendered reply and, if the command
            changed anything, the replacement store
        """
        command = self.parser.parse_request(line)

        try:
            response, new_store = self._dispatch(command, store, now)
        except CommandError as exc:
            logger.debug(f"{command.name or '<empty>'} failed: {exc.message}")
            response, new_store = Response.from_error(exc), None

        return CommandResult(
            reply=self.parser.format_response(response),
            new_store=new_store,
            response=response,
        )

    def _dispatch(self, command: Command, store: Store, now: int) -> Tuple[Response, Optional[Store]]:
        """Validate a parsed command and run its handler."""
        if not command.name:
            raise CommandError(ErrorKind.SYNTAX, "ERR empty command")

        info = COMMAND_TABLE.get(command.type)
        if info is None:
            raise CommandError.unknown_command(command.name)

        if not info.accepts(len(command.args)):
            raise CommandError.wrong_arity(command.name)

        if not self.parser.check_lengths(command):
            raise CommandError(ErrorKind.RANGE, "ERR argument exceeds the maximum length")

        logger.debug(f"Executing {command.name} with {len(command.args)} argument(s)")
        return info.handler(command.args, store, now)

    @staticmethod
    def supported_commands() -> List[str]:
        """Names of all registered commands, alphabetically."""
        return sorted(command_type.name for command_type in COMMAND_TABLE)


_default_interpreter = CommandInterpreter()


def execute(line: str, store: Store, now: int) -> CommandResult:
    """Execute a command line with a shared default interpreter."""
    return _default_interpreter.execute(line, store, now)
