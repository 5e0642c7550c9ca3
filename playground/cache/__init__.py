"""Cache module for Redis Playground."""

from .entry import Entry, Kind
from .expiration import ExpirationSweeper, current_millis, sweep
from .store import Store

__all__ = ["Entry", "Kind", "Store", "ExpirationSweeper", "current_millis", "sweep"]
