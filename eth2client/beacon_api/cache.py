"""Per-client cache for rarely-changing beacon node values."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Hashable, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300.0


@dataclass
class _Entry:
    value: Any
    fetched_at: float


class StaticValueCache:
    """Read-through cache with a fixed time-to-live per entry.

    Values such as genesis, spec, fork schedule, node version and deposit
    contract are fetched on first use and reused until `ttl` seconds have
    passed, after which the next access fetches again. Each key has its own
    lock: concurrent first accesses to one key share a single fetch, and a
    fetch for one key never blocks reads of another.

    `clock` returns seconds and is injectable for tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[Hashable, _Entry] = {}
        self._locks: dict[Hashable, asyncio.Lock] = {}

    def _fresh(self, key: Hashable) -> Optional[_Entry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at >= self.ttl:
            return None
        return entry

    def _lock(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def get(self, key: Hashable, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """Cached value for `key`, calling `fetch` when missing or stale.

        Errors from `fetch` propagate and leave nothing cached.
        """
        entry = self._fresh(key)
        if entry is not None:
            return entry.value

        async with self._lock(key):
            # Another task may have fetched while we waited.
            entry = self._fresh(key)
            if entry is not None:
                return entry.value

            logger.debug(f"Fetching static value {key}")
            value = await fetch()
            self._entries[key] = _Entry(value=value, fetched_at=self._clock())
            return value

    def peek(self, key: Hashable) -> Optional[Any]:
        """Cached value for `key` if fresh, without fetching."""
        entry = self._fresh(key)
        return entry.value if entry is not None else None

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    async def refresh(self, key: Hashable, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """Drop any cached value for `key` and fetch it again."""
        async with self._lock(key):
            value = await fetch()
            self._entries[key] = _Entry(value=value, fetched_at=self._clock())
            return value

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self._fresh(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["StaticValueCache", "DEFAULT_TTL"]
