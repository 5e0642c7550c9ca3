"""
Protocol Command and Response Definitions

This module defines the data structures for commands, internal errors
and replies.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Sequence


class CommandType(Enum):
    """Enumeration of supported command types."""
    SET = auto()
    GET = auto()
    DEL = auto()
    EXISTS = auto()
    EXPIRE = auto()
    TTL = auto()
    PERSIST = auto()
    LPUSH = auto()
    RPUSH = auto()
    LPOP = auto()
    LRANGE = auto()
    SADD = auto()
    SMEMBERS = auto()
    SISMEMBER = auto()
    HSET = auto()
    HGET = auto()
    HGETALL = auto()
    KEYS = auto()
    INFO = auto()
    FLUSHALL = auto()
    UNKNOWN = auto()

    @classmethod
    def from_name(cls, name: str) -> "CommandType":
        """Look up a command type by name (case-insensitive)."""
        member = cls.__members__.get(name.upper())
        if member is None:
            return cls.UNKNOWN
        return member


# Argument hints shown to learners while typing
COMMAND_USAGE = {
    CommandType.SET: "key value [EX seconds|PX milliseconds]",
    CommandType.GET: "key",
    CommandType.DEL: "key [key ...]",
    CommandType.EXISTS: "key [key ...]",
    CommandType.EXPIRE: "key seconds",
    CommandType.TTL: "key",
    CommandType.PERSIST: "key",
    CommandType.LPUSH: "key value [value ...]",
    CommandType.RPUSH: "key value [value ...]",
    CommandType.LPOP: "key",
    CommandType.LRANGE: "key start stop",
    CommandType.SADD: "key member [member ...]",
    CommandType.SMEMBERS: "key",
    CommandType.SISMEMBER: "key member",
    CommandType.HSET: "key field value [field value ...]",
    CommandType.HGET: "key field",
    CommandType.HGETALL: "key",
    CommandType.KEYS: "pattern",
    CommandType.INFO: "[section]",
    CommandType.FLUSHALL: "",
}


def usage_hint(line: str) -> Optional[str]:
    """
    Get the usage hint for the command a line starts with.

    Args:
        line: A complete or partially typed command line

    Returns:
        The argument hint (possibly empty for commands without
        arguments), or None if the first token is not a known command

    Examples:
        >>> usage_hint("lpush mylist")
        'key value [value ...]'
        >>> usage_hint("nope") is None
        True
    """
    parts = line.split()
    if not parts:
        return None
    command_type = CommandType.from_name(parts[0])
    if command_type is CommandType.UNKNOWN:
        return None
    return COMMAND_USAGE[command_type]


@dataclass
class Command:
    """
    Represents a parsed command line.

    Attributes:
        type: The command type (UNKNOWN for unrecognised names)
        name: The command name as typed, upper-cased
        args: Positional arguments following the name
        raw: The original line, stripped
    """
    type: CommandType
    name: str = ""
    args: List[str] = field(default_factory=list)
    raw: str = ""

    @property
    def key(self) -> str:
        """The first argument, which is the key for most commands."""
        return self.args[0] if self.args else ""


class ErrorKind(Enum):
    """Internal taxonomy of command failures."""
    SYNTAX = auto()
    TYPE = auto()
    RANGE = auto()


class CommandError(Exception):
    """
    Raised inside command handlers to abort with an error reply.

    Never escapes the interpreter; it is converted into an error
    Response at the dispatch boundary.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def unknown_command(cls, name: str) -> "CommandError":
        return cls(ErrorKind.SYNTAX, f"ERR unknown command '{name.lower()}'")

    @classmethod
    def wrong_arity(cls, name: str) -> "CommandError":
        return cls(ErrorKind.SYNTAX, f"ERR wrong number of arguments for '{name.lower()}' command")

    @classmethod
    def syntax(cls) -> "CommandError":
        return cls(ErrorKind.SYNTAX, "ERR syntax error")

    @classmethod
    def wrong_type(cls) -> "CommandError":
        return cls(ErrorKind.TYPE, "WRONGTYPE Operation against a key holding the wrong kind of value")

    @classmethod
    def not_an_integer(cls) -> "CommandError":
        return cls(ErrorKind.RANGE, "ERR value is not an integer or out of range")


class ReplyType(Enum):
    """Enumeration of reply shapes."""
    STATUS = auto()
    INTEGER = auto()
    BULK = auto()
    NIL = auto()
    ARRAY = auto()
    TEXT = auto()
    ERROR = auto()


@dataclass
class Response:
    """
    Represents a command reply before rendering.

    Attributes:
        type: The reply shape
        message: Status text, error text or free text (INFO)
        value: Integer or string payload
        items: Elements of an ARRAY reply
        error_kind: Failure category for ERROR replies
    """
    type: ReplyType
    message: str = ""
    value: Optional[object] = None
    items: List[str] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None

    @property
    def is_error(self) -> bool:
        """Check if this reply reports a failure."""
        return self.type is ReplyType.ERROR

    @classmethod
    def ok(cls, message: str = "OK") -> "Response":
        """Create a status reply."""
        return cls(type=ReplyType.STATUS, message=message)

    @classmethod
    def integer(cls, value: int) -> "Response":
        """Create an integer reply (counts and booleans)."""
        return cls(type=ReplyType.INTEGER, value=int(value))

    @classmethod
    def bulk(cls, value: str) -> "Response":
        """Create a string reply."""
        return cls(type=ReplyType.BULK, value=value)

    @classmethod
    def nil(cls) -> "Response":
        """Create a nil reply for missing values."""
        return cls(type=ReplyType.NIL)

    @classmethod
    def array(cls, items: Sequence[str]) -> "Response":
        """Create a list reply."""
        return cls(type=ReplyType.ARRAY, items=list(items))

    @classmethod
    def text(cls, message: str) -> "Response":
        """Create a free-form text reply, rendered verbatim."""
        return cls(type=ReplyType.TEXT, message=message)

    @classmethod
    def error(cls, message: str, kind: ErrorKind = ErrorKind.SYNTAX) -> "Response":
        """Create an error reply."""
        return cls(type=ReplyType.ERROR, message=message, error_kind=kind)

    @classmethod
    def from_error(cls, exc: CommandError) -> "Response":
        """Create an error reply from a CommandError."""
        return cls.error(exc.message, kind=exc.kind)
