# src/cache/keyed_lock.py — v1
"""Per-key asyncio mutual exclusion.

One ``asyncio.Lock`` per live key, created on first use and dropped when
the last holder or waiter leaves.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyedLock:
    """Mutual exclusion keyed by string.

    Callers on the same key run one at a time; callers on different keys
    never block each other. Not shared across processes.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def locked(self, key: str) -> bool:
        """Whether ``key`` is currently held."""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def acquire(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block.

        Released on normal exit, exception and cancellation.
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1
        try:
            if lock.locked():
                logger.debug("Waiting for lock on %s", key)
            async with lock:
                yield
        finally:
            remaining = self._users[key] - 1
            if remaining:
                self._users[key] = remaining
            else:
                del self._users[key]
                del self._locks[key]

    async def run(
        self,
        key: str,
        fn: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Await ``fn(*args, **kwargs)`` while holding the lock for ``key``."""
        async with self.acquire(key):
            return await fn(*args, **kwargs)
