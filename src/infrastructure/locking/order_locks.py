# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-order mutual exclusion.

Two registries share one contract: ``acquire(order_id)`` suspends until no
other holder owns the order, ``release(order_id)`` hands it to the next
waiter. Different order ids never contend.

- InMemoryOrderLockRegistry serializes tasks of a single process.
- RedisOrderLockRegistry serializes every process sharing a Redis instance.

Example:
    locks = create_order_lock_registry(settings)
    await locks.acquire(order_id)
    try:
        ...
    finally:
        await locks.release(order_id)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Protocol

from redis.exceptions import LockNotOwnedError
from redis.exceptions import RedisError as BaseRedisError

if TYPE_CHECKING:
    from redis.asyncio.lock import Lock

    from src.core.config.settings import Settings
    from src.infrastructure.cache.redis_client import RedisClient

logger = logging.getLogger(__name__)


class LockError(Exception):
    """Exception raised when a lock backend fails.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying backend error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the lock error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class LockTimeoutError(LockError):
    """Raised when a lock could not be acquired within the configured timeout."""


class OrderLockRegistry(Protocol):
    """Contract shared by the lock backends."""

    async def acquire(self, order_id: str) -> None:
        """Suspend until the order lock is held by the caller."""
        ...

    async def release(self, order_id: str) -> None:
        """Release a lock previously acquired by the caller."""
        ...

    def is_held(self, order_id: str) -> bool:
        """Check whether this registry currently holds the order lock."""
        ...


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    owner: asyncio.Task | None = None
    # holders plus waiters; the entry is dropped when it reaches zero
    users: int = 0


class InMemoryOrderLockRegistry:
    """asyncio.Lock per order id, dropped once nobody holds or awaits it."""

    def __init__(self, acquire_timeout: float | None = None) -> None:
        """Initialize the registry.

        Args:
            acquire_timeout: Seconds to wait for a busy lock. None waits
                until the current holder releases it.
        """
        self._acquire_timeout = acquire_timeout
        self._entries: dict[str, _LockEntry] = {}

    async def acquire(self, order_id: str) -> None:
        """Acquire the lock for an order.

        Args:
            order_id: Order identifier.

        Raises:
            LockTimeoutError: If the lock stays busy past the timeout.
        """
        entry = self._entries.get(order_id)
        if entry is None:
            entry = self._entries[order_id] = _LockEntry()
        entry.users += 1

        try:
            if self._acquire_timeout is None:
                await entry.lock.acquire()
            else:
                await asyncio.wait_for(entry.lock.acquire(), self._acquire_timeout)
        except TimeoutError as e:
            self._forget(order_id, entry)
            raise LockTimeoutError(
                f"Timed out after {self._acquire_timeout}s waiting for order {order_id}"
            ) from e
        except BaseException:
            self._forget(order_id, entry)
            raise

        entry.owner = asyncio.current_task()
        logger.debug("Order lock acquired: order=%s", order_id)

    async def release(self, order_id: str) -> None:
        """Release the lock for an order.

        Releasing a lock the calling task does not hold is logged and
        ignored, so a stray release never frees another task's lock.

        Args:
            order_id: Order identifier.
        """
        entry = self._entries.get(order_id)
        if entry is None or not entry.lock.locked():
            logger.warning("Release of order lock that is not held: order=%s", order_id)
            return
        if entry.owner is not asyncio.current_task():
            logger.warning("Release of order lock held by another task: order=%s", order_id)
            return

        entry.owner = None
        entry.lock.release()
        self._forget(order_id, entry)
        logger.debug("Order lock released: order=%s", order_id)

    def is_held(self, order_id: str) -> bool:
        """Check whether some task holds the order lock."""
        entry = self._entries.get(order_id)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)

    def _forget(self, order_id: str, entry: _LockEntry) -> None:
        entry.users -= 1
        if entry.users == 0:
            self._entries.pop(order_id, None)


class RedisOrderLockRegistry:
    """Redis-backed order locks shared across processes.

    Every lock carries a lease so a crashed holder cannot block an order
    forever.
    """

    def __init__(
        self,
        client: "RedisClient",
        key_prefix: str = "lock:order",
        lease_timeout: float = 60.0,
        acquire_timeout: float | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            client: Connected Redis client.
            key_prefix: Prefix of the Redis lock keys.
            lease_timeout: Seconds before Redis drops an unreleased lock.
            acquire_timeout: Seconds to wait for a busy lock; None waits forever.
        """
        self._client = client
        self._key_prefix = key_prefix
        self._lease_timeout = lease_timeout
        self._acquire_timeout = acquire_timeout
        self._held: dict[str, "Lock"] = {}

    def _key(self, order_id: str) -> str:
        return f"{self._key_prefix}:{order_id}"

    async def acquire(self, order_id: str) -> None:
        """Acquire the lock for an order.

        Args:
            order_id: Order identifier.

        Raises:
            LockTimeoutError: If the lock stays busy past the timeout.
            LockError: If Redis fails.
        """
        lock = self._client.lock(
            self._key(order_id),
            timeout=self._lease_timeout,
            blocking_timeout=self._acquire_timeout,
        )
        try:
            acquired = await lock.acquire()
        except BaseRedisError as e:
            raise LockError(f"Failed to acquire lock for order {order_id}", e) from e

        if not acquired:
            raise LockTimeoutError(
                f"Timed out after {self._acquire_timeout}s waiting for order {order_id}"
            )

        self._held[order_id] = lock
        logger.debug("Order lock acquired: order=%s, key=%s", order_id, self._key(order_id))

    async def release(self, order_id: str) -> None:
        """Release the lock for an order.

        Releasing a lock that is not held is logged and ignored. A lock
        whose lease already expired is logged as an error.

        Args:
            order_id: Order identifier.

        Raises:
            LockError: If Redis fails.
        """
        lock = self._held.pop(order_id, None)
        if lock is None:
            logger.warning("Release of order lock that is not held: order=%s", order_id)
            return

        try:
            await lock.release()
        except LockNotOwnedError:
            logger.error(
                "Order lock lease expired before release: order=%s, lease=%ss",
                order_id,
                self._lease_timeout,
            )
            return
        except BaseRedisError as e:
            raise LockError(f"Failed to release lock for order {order_id}", e) from e

        logger.debug("Order lock released: order=%s", order_id)

    def is_held(self, order_id: str) -> bool:
        """Check whether this process holds the order lock."""
        return order_id in self._held


def create_order_lock_registry(
    settings: "Settings",
    redis_client: "RedisClient | None" = None,
) -> OrderLockRegistry:
    """Build the lock registry selected by settings.

    Args:
        settings: Application settings.
        redis_client: Connected client, required for the redis backend.

    Returns:
        The configured lock registry.

    Raises:
        LockError: If the redis backend is selected without a client.
    """
    lock_settings = settings.order_lock
    if lock_settings.backend == "redis":
        if redis_client is None:
            raise LockError("Redis lock backend selected but no Redis client given")
        return RedisOrderLockRegistry(
            redis_client,
            key_prefix=lock_settings.key_prefix,
            lease_timeout=lock_settings.lease_timeout,
            acquire_timeout=lock_settings.acquire_timeout,
        )
    return InMemoryOrderLockRegistry(acquire_timeout=lock_settings.acquire_timeout)
