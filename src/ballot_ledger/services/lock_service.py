"""
Keyed Lock Service

Provides mutual exclusion between coroutines that work on the same key,
e.g. two casts by one voter in one election. Locks live in process memory
and are dropped as soon as nobody holds or waits for them.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Hashable

import structlog

logger = structlog.get_logger(__name__)


class KeyedLockService:
    """
    Service for per-key asyncio locks.

    Usage:
        locks = KeyedLockService()
        async with locks.acquire((election_id, voter)):
            # Only one coroutine per key gets here at a time
            pass
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._users: dict[Hashable, int] = {}

    @asynccontextmanager
    async def acquire(self, key: Hashable) -> AsyncGenerator[None, None]:
        """
        Context manager holding the lock for ``key``.

        Args:
            key: Any hashable value identifying the guarded resource
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        elif lock.locked():
            logger.debug("lock_contended", key=repr(key))
        self._users[key] = self._users.get(key, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def is_locked(self, key: Hashable) -> bool:
        """Check if a coroutine currently holds the lock for ``key``."""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def held_keys(self) -> list[Hashable]:
        """Get all keys whose lock is currently held."""
        return [key for key, lock in self._locks.items() if lock.locked()]
