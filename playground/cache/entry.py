"""
Store Entry Module

An Entry is one stored value plus its type tag and optional expiry.

Value shapes by kind:
    STRING -> str
    LIST   -> tuple of str (head is index 0)
    SET    -> frozenset of str
    HASH   -> read-only mapping of field -> str

Expiry is an absolute instant in milliseconds since the epoch.
None means the entry never expires.
"""

from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional


class Kind(Enum):
    """Enumeration of value kinds an entry can hold."""
    STRING = "string"
    LIST = "list"
    SET = "set"
    HASH = "hash"

    @property
    def label(self) -> str:
        """Lowercase type name, as reported to users."""
        return self.value


@dataclass(frozen=True)
class Entry:
    """
    Represents a single stored value.

    Entries are immutable. Every change produces a new Entry through
    with_value() or with_expiry(), so a Store snapshot holding the old
    entry is never affected.

    Attributes:
        kind: The value kind, fixed for the life of the key
        value: Payload matching kind (see module docstring)
        expires_at: Absolute expiry in epoch milliseconds, or None
    """
    kind: Kind
    value: Any
    expires_at: Optional[int] = None

    @classmethod
    def string(cls, value: str) -> "Entry":
        """Create a String entry."""
        return cls(kind=Kind.STRING, value=str(value))

    @classmethod
    def list(cls, items: Iterable[str]) -> "Entry":
        """Create a List entry."""
        return cls(kind=Kind.LIST, value=tuple(items))

    @classmethod
    def set(cls, members: Iterable[str]) -> "Entry":
        """Create a Set entry."""
        return cls(kind=Kind.SET, value=frozenset(members))

    @classmethod
    def hash(cls, fields: Mapping[str, str]) -> "Entry":
        """Create a Hash entry."""
        return cls(kind=Kind.HASH, value=MappingProxyType(dict(fields)))

    def is_expired(self, now: int) -> bool:
        """Check whether the entry's expiry has passed at instant `now`."""
        return self.expires_at is not None and self.expires_at <= now

    def ttl_ms(self, now: int) -> Optional[int]:
        """
        Remaining lifetime in milliseconds.

        Returns:
            None if the entry has no expiry, otherwise a value that is
            zero or negative once the entry has expired
        """
        if self.expires_at is None:
            return None
        return self.expires_at - now

    def with_value(self, value: Any) -> "Entry":
        """
        Return a copy holding a new payload of the same kind.

        The expiry is carried over unchanged.
        """
        if self.kind is Kind.STRING:
            value = str(value)
        elif self.kind is Kind.LIST:
            value = tuple(value)
        elif self.kind is Kind.SET:
            value = frozenset(value)
        elif self.kind is Kind.HASH:
            value = MappingProxyType(dict(value))
        return replace(self, value=value)

    def with_expiry(self, expires_at: Optional[int]) -> "Entry":
        """Return a copy with a new absolute expiry (None clears it)."""
        return replace(self, expires_at=expires_at)
