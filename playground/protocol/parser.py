"""
Protocol Parser Module

This module handles tokenising command lines and rendering replies in
the style of redis-cli.

The error marker `(error)` is a compatibility contract: callers decide
whether an interaction failed by checking the reply prefix alone.
"""

from typing import List

from .commands import Command, CommandType, ReplyType, Response
from ..config.settings import settings

ERROR_MARKER = "(error)"

_QUOTES = ('"', "'")


def is_error_reply(reply: str) -> bool:
    """Check whether a rendered reply reports a failure."""
    return reply.startswith(ERROR_MARKER)


class ProtocolParser:
    """
    Parser for the playground command language.

    Request format:
        <COMMAND> [ARGS...]

    Arguments are separated by whitespace. One pair of matching
    surrounding quotes is stripped from each argument, so
    `SET name "Alice"` stores Alice. Quoted arguments cannot contain
    whitespace.

    Reply rendering:
        status   -> OK
        integer  -> (integer) 1
        string   -> "value"
        nil      -> (nil)
        array    -> 1) "a" / 2) "b" on separate lines, or (empty array)
        text     -> rendered verbatim
        error    -> (error) ERR ...
    """

    def __init__(self):
        """Initialize the parser with constraints from settings."""
        self.max_key_length = settings.MAX_KEY_LENGTH
        self.max_value_length = settings.MAX_VALUE_LENGTH

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw command line into a Command object.

        Args:
            data: Raw command line (may include trailing newline)

        Returns:
            Command object. Empty lines and unrecognised names yield
            type=UNKNOWN; the name is kept so the caller can report it.

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request("lpush queue a b")
            >>> cmd.type == CommandType.LPUSH
            True
            >>> cmd.args
            ['queue', 'a', 'b']
        """
        raw = data.strip()
        if not raw:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        parts = raw.split()
        name = parts[0].upper()
        args = [self._unquote(part) for part in parts[1:]]

        return Command(
            type=CommandType.from_name(name),
            name=name,
            args=args,
            raw=raw,
        )

    def _unquote(self, token: str) -> str:
        """Strip one pair of matching surrounding quotes."""
        if len(token) >= 2 and token[0] in _QUOTES and token[-1] == token[0]:
            return token[1:-1]
        return token

    def check_lengths(self, command: Command) -> bool:
        """
        Check the key and value length limits.

        The first argument is measured against max_key_length and every
        other argument against max_value_length.
        """
        if not command.args:
            return True
        if len(command.args[0]) > self.max_key_length:
            return False
        return all(len(arg) <= self.max_value_length for arg in command.args[1:])

    def format_response(self, response: Response) -> str:
        """
        Render a Response as reply text, without a trailing newline.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.integer(2))
            '(integer) 2'
            >>> parser.format_response(Response.array(["b", "a"]))
            '1) "b"\\n2) "a"'
        """
        if response.type is ReplyType.STATUS:
            return response.message
        if response.type is ReplyType.INTEGER:
            return f"(integer) {response.value}"
        if response.type is ReplyType.BULK:
            return f'"{response.value}"'
        if response.type is ReplyType.NIL:
            return "(nil)"
        if response.type is ReplyType.ARRAY:
            return self._format_array(response.items)
        if response.type is ReplyType.TEXT:
            return response.message
        return f"{ERROR_MARKER} {response.message}"

    def _format_array(self, items: List[str]) -> str:
        if not items:
            return "(empty array)"
        return "\n".join(f'{index}) "{item}"' for index, item in enumerate(items, start=1))
