"""
Mutual exclusion for the final re-check-and-insert of a booking.

Two backends share one interface:

- ``RedisLock``: ``SET key token NX PX`` with a token-checked release, safe
  across processes and hosts.
- ``LocalLock``: a registry of ``asyncio.Lock`` objects, correct only inside a
  single process (tests, single-worker deployments).
"""
import asyncio
import logging
import time
import uuid
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Dict, Iterable

from booking_api.config.settings import get_settings

logger = logging.getLogger(__name__)

# Delete the key only if it still holds our token
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class LockNotAcquired(Exception):
    """Raised when a lock could not be acquired within its timeout."""

    def __init__(self, key: str, timeout: float):
        self.key = key
        self.timeout = timeout
        super().__init__(f"Could not acquire lock {key} within {timeout}s")


class RedisLock:
    """A distributed lock backed by a single Redis key."""

    def __init__(self, redis_client, key: str, expires: int = 30, timeout: float = 10.0,
                 poll_interval: float = 0.05):
        self.redis = redis_client
        self.key = key
        self.expires = expires
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._token = str(uuid.uuid4())

    async def acquire(self) -> bool:
        logger.debug(f"Attempting to acquire lock for {self.key}")
        deadline = time.monotonic() + self.timeout

        while time.monotonic() < deadline:
            if await self.redis.set(self.key, self._token, nx=True, px=self.expires * 1000):
                logger.debug(f"Lock acquired for {self.key}")
                return True
            await asyncio.sleep(self.poll_interval)

        logger.warning(f"Failed to acquire lock for {self.key} after {self.timeout} seconds")
        return False

    async def release(self) -> bool:
        released = await self.redis.eval(_RELEASE_SCRIPT, 1, self.key, self._token)
        if not released:
            logger.warning(f"Lock {self.key} expired before release")
        return bool(released)


class LocalLock:
    """In-process lock keyed by name."""

    _locks: Dict[str, asyncio.Lock] = {}
    # Holders plus waiters per key; the entry is dropped when this reaches zero
    _users: Dict[str, int] = {}

    def __init__(self, key: str, timeout: float = 10.0):
        self.key = key
        self.timeout = timeout

    async def acquire(self) -> bool:
        lock = self._locks.setdefault(self.key, asyncio.Lock())
        self._users[self.key] = self._users.get(self.key, 0) + 1
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self.timeout)
        except asyncio.TimeoutError:
            self._forget()
            logger.warning(f"Failed to acquire lock for {self.key} after {self.timeout} seconds")
            return False
        except asyncio.CancelledError:
            self._forget()
            raise
        return True

    async def release(self) -> bool:
        self._locks[self.key].release()
        self._forget()
        return True

    def _forget(self):
        remaining = self._users[self.key] - 1
        if remaining:
            self._users[self.key] = remaining
        else:
            del self._users[self.key]
            del self._locks[self.key]

    @classmethod
    def reset(cls):
        """Forget all locks (each event loop needs fresh asyncio.Lock objects)."""
        cls._locks.clear()
        cls._users.clear()


@asynccontextmanager
async def distributed_lock(key: str):
    """
    Hold the named lock for the duration of the block.

    Raises:
        LockNotAcquired: if the lock is still held by someone else after
            BOOKING_LOCK_TIMEOUT_SECONDS.
    """
    settings = get_settings()
    redis_client = None

    if settings.BOOKING_LOCK_BACKEND == "redis":
        from booking_api.config.redis import get_redis

        redis_client = await get_redis()
        lock = RedisLock(
            redis_client,
            key,
            expires=settings.BOOKING_LOCK_EXPIRES_SECONDS,
            timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS,
        )
    elif settings.BOOKING_LOCK_BACKEND == "local":
        lock = LocalLock(key, timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS)
    else:
        raise ValueError(f"Unknown BOOKING_LOCK_BACKEND: {settings.BOOKING_LOCK_BACKEND}")

    try:
        if not await lock.acquire():
            raise LockNotAcquired(key, settings.BOOKING_LOCK_TIMEOUT_SECONDS)
        try:
            yield
        finally:
            await lock.release()
    finally:
        if redis_client is not None:
            await redis_client.close()


@asynccontextmanager
async def distributed_locks(keys: Iterable[str]):
    """
    Hold several named locks at once.

    Keys are taken in sorted order so two callers with overlapping key sets
    cannot deadlock. Raises LockNotAcquired as soon as one key times out;
    keys already held are released.
    """
    async with AsyncExitStack() as stack:
        for key in sorted(set(keys)):
            await stack.enter_async_context(distributed_lock(key))
        yield
