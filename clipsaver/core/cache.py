"""
Time-bounded result cache with in-flight request deduplication.

Entries expire after a fixed TTL and are evicted lazily on lookup. Concurrent
misses for the same key share one computation instead of each starting their
own tool invocations.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300.0


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    inserted_at: float


class ResultCache:
    """TTL cache keyed by request fingerprint, with single-flight misses."""

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Any | None:
        """Return the live value for ``key`` or None. Expired entries are dropped."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.inserted_at >= self.ttl:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, inserted_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def is_inflight(self, key: str) -> bool:
        return key in self._inflight

    async def get_or_compute(self, key: str, compute: Callable[[], Awaitable[Any]]) -> tuple[Any, bool]:
        """
        Return ``(value, hit)`` for ``key``.

        ``hit`` is True when the value came from the cache or from another
        caller's in-flight computation. Failed computations are not cached and
        their exception is raised to every waiter.
        """
        value = self.get(key)
        if value is not None:
            logger.info("Cache hit for %s", key)
            return value, True

        task = self._inflight.get(key)
        if task is not None:
            logger.info("Joining in-flight extraction for %s", key)
            return await asyncio.shield(task), True

        task = asyncio.ensure_future(compute())
        self._inflight[key] = task
        task.add_done_callback(lambda t: self._on_done(key, t))
        # Shielded so a cancelled caller does not cancel the work other callers wait on
        return await asyncio.shield(task), False

    def _on_done(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if task.cancelled():
            return
        if task.exception() is not None:
            logger.debug("Not caching failed computation for %s", key)
            return
        self.set(key, task.result())
