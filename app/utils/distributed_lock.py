"""
Distributed lock.

Redis-backed mutual exclusion for jobs that may run on several
instances at once. Without a Redis client the lock degrades to a
process-local asyncio lock.
"""

import asyncio
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from loguru import logger

# Deletes the key only if it still holds our token
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

_local_locks: dict[str, asyncio.Lock] = {}


class DistributedLock:
    """
    Lock keyed by name.

    Usage:
        lock = DistributedLock(redis_client=redis_client)
        async with lock.lock("job_name", timeout=300, blocking=False) as acquired:
            if not acquired:
                return
            ...
    """

    KEY_PREFIX = "lock:"

    def __init__(self, redis_client: Any | None = None) -> None:
        """
        Initialize lock.

        Args:
            redis_client: redis.asyncio client, or None for a local lock
        """
        self.redis_client = redis_client

    @asynccontextmanager
    async def lock(
        self,
        key: str,
        timeout: int = 60,
        blocking: bool = True,
        retry_interval: float = 0.1,
    ) -> AsyncIterator[bool]:
        """
        Acquire lock for the duration of the block.

        Args:
            key: Lock name
            timeout: Lock TTL in seconds (Redis only)
            blocking: Wait for the lock instead of giving up
            retry_interval: Poll interval while waiting, in seconds

        Yields:
            True if the lock was acquired
        """
        if self.redis_client is None:
            async with self._local_lock(key, blocking) as acquired:
                yield acquired
            return

        full_key = f"{self.KEY_PREFIX}{key}"
        token = uuid.uuid4().hex
        acquired = await self._acquire(
            full_key, token, timeout, blocking, retry_interval
        )
        if not acquired:
            logger.debug(f"Lock {full_key} is held elsewhere")
            yield False
            return

        try:
            yield True
        finally:
            released = await self.redis_client.eval(
                _RELEASE_SCRIPT, 1, full_key, token
            )
            if not released:
                logger.warning(
                    f"Lock {full_key} expired before release "
                    f"(timeout={timeout}s)"
                )

    async def _acquire(
        self,
        key: str,
        token: str,
        timeout: int,
        blocking: bool,
        retry_interval: float,
    ) -> bool:
        while True:
            ok = await self.redis_client.set(
                key, token, nx=True, px=timeout * 1000
            )
            if ok:
                return True
            if not blocking:
                return False
            await asyncio.sleep(retry_interval)

    @asynccontextmanager
    async def _local_lock(
        self, key: str, blocking: bool
    ) -> AsyncIterator[bool]:
        local = _local_locks.setdefault(key, asyncio.Lock())
        if not blocking and local.locked():
            yield False
            return

        async with local:
            yield True
