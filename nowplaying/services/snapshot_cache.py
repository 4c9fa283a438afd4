"""
Snapshot Cache

Keeps the most recent payload for each response mode for its cache lifetime.
Concurrent requests for a stale mode share a single refresh instead of each
fanning out to the source site.
"""
import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Snapshot:
    value: Any
    stored_at: float


class SnapshotCache:
    """
    Per-key cache of collected payloads.

    Uses one asyncio.Lock per key so only one refresh of a key runs at a time.
    Requests arriving during a refresh wait for it and reuse its result.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize an empty cache."""
        self._clock = clock
        self._snapshots: dict[str, Snapshot] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, key: str, max_age: float) -> Any | None:
        """
        Get a cached value if it is younger than max_age seconds

        Returns:
            The cached value, or None if missing or stale
        """
        snapshot = self._snapshots.get(key)
        if snapshot is None:
            return None
        if self._clock() - snapshot.stored_at >= max_age:
            return None
        return snapshot.value

    def put(self, key: str, value: Any) -> None:
        """Store a value for key."""
        self._snapshots[key] = Snapshot(value=value, stored_at=self._clock())

    async def get_or_refresh(
        self,
        key: str,
        max_age: float,
        producer: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Return a fresh cached value or produce, store and return a new one

        Args:
            key: Cache key (response mode)
            max_age: Lifetime of a cached value in seconds
            producer: Async callable building the value

        Returns:
            Cached or freshly produced value

        Raises:
            Any exception raised by producer (nothing is cached in that case)
        """
        cached = self.get(key, max_age)
        if cached is not None:
            logger.debug("Serving cached %s snapshot", key)
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another request may have refreshed while we waited
            cached = self.get(key, max_age)
            if cached is not None:
                return cached

            value = await producer()
            self.put(key, value)
            return value

    async def refresh(self, key: str, producer: Callable[[], Awaitable[Any]]) -> Any:
        """Produce and store a value regardless of the cached one's age."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            value = await producer()
            self.put(key, value)
            return value

    def invalidate(self, key: str | None = None) -> None:
        """Drop one cached value, or all of them."""
        if key is None:
            self._snapshots.clear()
        else:
            self._snapshots.pop(key, None)
