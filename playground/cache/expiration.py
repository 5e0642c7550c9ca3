"""
Expiration Sweeper Module

Passive expiration for Store snapshots.

sweep() is the pure operation: it removes every entry whose expiry has
passed and returns a new Store, or None when nothing expired so the
caller can skip a state update.

ExpirationSweeper wraps sweep() with a fixed cadence. It still owns no
clock and no background loop; the caller supplies `now` on every tick.
"""

import logging
import time
from typing import Any, Dict, Optional

from .store import Store
from ..config.settings import settings

logger = logging.getLogger(__name__)


def current_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def sweep(store: Store, now: int) -> Optional[Store]:
    """
    Remove all expired entries.

    Args:
        store: The snapshot to scan
        now: Current instant in epoch milliseconds

    Returns:
        A new Store without the expired keys, or None if no key had
        expired (the unchanged signal)

    Running sweep() again on its own result with the same `now` always
    returns None.
    """
    expired = store.expired_keys(now)
    if not expired:
        return None

    logger.debug(f"Expired {len(expired)} key(s): {', '.join(expired)}")
    return store.remove(*expired)


class ExpirationSweeper:
    """
    Runs sweep() at most once per interval.

    Usage:
        sweeper = ExpirationSweeper(interval_ms=100)
        new_store = sweeper.tick(store, now=current_millis())
        if new_store is not None:
            store = new_store

    Attributes:
        interval_ms: Minimum milliseconds between two sweeps
    """

    def __init__(self, interval_ms: int = None):
        """
        Initialize the sweeper.

        Args:
            interval_ms: Sweep cadence (default from settings.SWEEP_INTERVAL_MS)

        Raises:
            ValueError: If interval_ms is negative
        """
        interval_ms = interval_ms if interval_ms is not None else settings.SWEEP_INTERVAL_MS
        if interval_ms < 0:
            raise ValueError("interval_ms must not be negative")
        self.interval_ms = interval_ms

        self._last_run: Optional[int] = None
        self._total_sweeps = 0
        self._total_expired = 0

    def is_due(self, now: int) -> bool:
        """Check whether a sweep should run at instant `now`."""
        if self._last_run is None:
            return True
        return now - self._last_run >= self.interval_ms

    def tick(self, store: Store, now: int) -> Optional[Store]:
        """
        Sweep the store if the interval has elapsed.

        Returns:
            A new Store if keys were removed, None otherwise (including
            when the sweep was skipped because it was not yet due)
        """
        if not self.is_due(now):
            return None

        self._last_run = now
        self._total_sweeps += 1

        swept = sweep(store, now)
        if swept is not None:
            self._total_expired += len(store) - len(swept)
        return swept

    def reset(self) -> None:
        """Forget the previous run so the next tick sweeps immediately."""
        self._last_run = None

    def get_stats(self) -> Dict[str, Any]:
        """Get sweeper statistics."""
        return {
            "interval_ms": self.interval_ms,
            "last_run": self._last_run,
            "total_sweeps": self._total_sweeps,
            "total_expired": self._total_expired,
        }
