"""
Key-Value Store Module

This module implements the store snapshot the interpreter and the
sweeper operate on.

A Store is an immutable mapping of key -> Entry. Every change (put,
remove, clear) returns a brand-new Store and leaves the original
untouched, so a caller can keep rendering an old snapshot while a new
one is being computed.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional

from .entry import Entry, Kind


class Store(Mapping):
    """
    Immutable snapshot of the key space.

    Reads follow the Mapping protocol (store[key], key in store,
    len(store), iteration in insertion order). Those raw reads include
    entries whose expiry has passed; use lookup() and live_keys() to
    get the logical view at a given instant.

    Usage:
        store = Store.empty()
        store = store.put("greeting", Entry.string("hello"))
        entry = store.lookup("greeting", now=current_millis())
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping] = None):
        """
        Create a snapshot.

        Args:
            entries: Initial key -> Entry mapping. It is copied, so later
                changes to the argument do not leak into the snapshot.
        """
        self._entries: Dict[str, Entry] = dict(entries) if entries else {}

    @classmethod
    def empty(cls) -> "Store":
        """Create a store with no keys."""
        return cls()

    def __getitem__(self, key: str) -> Entry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Store({self._entries!r})"

    def lookup(self, key: str, now: int) -> Optional[Entry]:
        """
        Retrieve the live entry for a key.

        Args:
            key: The key to look up
            now: Current instant in epoch milliseconds

        Returns:
            The entry if present and not expired, None otherwise
        """
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(now):
            return None
        return entry

    def put(self, key: str, entry: Entry) -> "Store":
        """
        Insert or replace a key.

        Replacing a key keeps its position in insertion order.

        Returns:
            A new Store containing the change
        """
        entries = dict(self._entries)
        entries[key] = entry
        return Store(entries)

    def remove(self, *keys: str) -> "Store":
        """
        Remove keys; missing keys are ignored.

        Returns:
            A new Store without the given keys, or this store if none
            of them were present
        """
        present = [key for key in keys if key in self._entries]
        if not present:
            return self

        entries = dict(self._entries)
        for key in present:
            del entries[key]
        return Store(entries)

    def clear(self) -> "Store":
        """Return an empty store."""
        return Store.empty()

    def expired_keys(self, now: int) -> List[str]:
        """Keys whose expiry has passed at instant `now`."""
        return [key for key, entry in self._entries.items() if entry.is_expired(now)]

    def live_keys(self, now: int) -> List[str]:
        """Keys that are logically present at instant `now`, in insertion order."""
        return [key for key, entry in self._entries.items() if not entry.is_expired(now)]

    def get_stats(self, now: int) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing:
            - total_keys: Total keys in store
            - expired_keys: Count of expired (but not yet swept) keys
            - active_keys: Count of non-expired keys
            - volatile_keys: Count of active keys with an expiry set
            - kinds: Active key count per kind label
        """
        total = len(self._entries)
        expired = 0
        volatile = 0
        kinds = {kind.label: 0 for kind in Kind}

        for entry in self._entries.values():
            if entry.is_expired(now):
                expired += 1
                continue
            if entry.expires_at is not None:
                volatile += 1
            kinds[entry.kind.label] += 1

        return {
            "total_keys": total,
            "expired_keys": expired,
            "active_keys": total - expired,
            "volatile_keys": volatile,
            "kinds": kinds,
        }
