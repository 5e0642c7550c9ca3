"""Protocol module for Redis Playground."""

from .commands import (
    COMMAND_USAGE,
    Command,
    CommandError,
    CommandType,
    ErrorKind,
    ReplyType,
    Response,
    usage_hint,
)
from .interpreter import CommandInterpreter, CommandResult, execute
from .parser import ERROR_MARKER, ProtocolParser, is_error_reply

__all__ = [
    "COMMAND_USAGE",
    "Command",
    "CommandError",
    "CommandType",
    "ErrorKind",
    "ReplyType",
    "Response",
    "usage_hint",
    "CommandInterpreter",
    "CommandResult",
    "execute",
    "ERROR_MARKER",
    "ProtocolParser",
    "is_error_reply",
]
