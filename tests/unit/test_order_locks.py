# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for order lock registries."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import LockNotOwnedError

from src.core.config.settings import LockSettings, Settings
from src.infrastructure.locking.order_locks import (
    InMemoryOrderLockRegistry,
    LockError,
    LockTimeoutError,
    RedisOrderLockRegistry,
    create_order_lock_registry,
)


class TestInMemoryOrderLockRegistry:
    """Tests for the in-process registry."""

    @pytest.mark.asyncio
    async def test_acquire_and_release(self):
        """Locks are held between acquire and release."""
        locks = InMemoryOrderLockRegistry()

        await locks.acquire("o1")
        assert locks.is_held("o1")

        await locks.release("o1")
        assert not locks.is_held("o1")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_same_order_is_exclusive(self):
        """A second acquire waits until the first holder releases."""
        locks = InMemoryOrderLockRegistry()
        done = asyncio.Event()

        async def second_holder():
            await locks.acquire("o1")
            await done.wait()
            await locks.release("o1")

        await locks.acquire("o1")
        waiter = asyncio.create_task(second_holder())
        await asyncio.sleep(0.01)
        assert len(locks) == 1
        assert locks.is_held("o1")

        await locks.release("o1")
        await asyncio.sleep(0.01)
        assert locks.is_held("o1")

        done.set()
        await asyncio.wait_for(waiter, timeout=1)
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_stray_release_keeps_next_holder(self):
        """A repeated release by a former holder does not free the new holder's lock."""
        locks = InMemoryOrderLockRegistry()
        second_acquired = asyncio.Event()
        done = asyncio.Event()

        async def second_holder():
            await locks.acquire("o1")
            second_acquired.set()
            await done.wait()
            await locks.release("o1")

        await locks.acquire("o1")
        holder = asyncio.create_task(second_holder())
        await asyncio.sleep(0)
        await locks.release("o1")
        await asyncio.wait_for(second_acquired.wait(), timeout=1)

        await locks.release("o1")

        third = asyncio.create_task(locks.acquire("o1"))
        await asyncio.sleep(0.01)
        assert not third.done()

        done.set()
        await asyncio.wait_for(holder, timeout=1)
        await asyncio.wait_for(third, timeout=1)
        assert locks.is_held("o1")

    @pytest.mark.asyncio
    async def test_different_orders_are_independent(self):
        """Locks on different orders never block each other."""
        locks = InMemoryOrderLockRegistry()
        await locks.acquire("o1")

        await asyncio.wait_for(locks.acquire("o2"), timeout=1)

        assert locks.is_held("o1")
        assert locks.is_held("o2")

    @pytest.mark.asyncio
    async def test_acquire_timeout(self):
        """A busy lock raises after the configured timeout."""
        locks = InMemoryOrderLockRegistry(acquire_timeout=0.01)
        await locks.acquire("o1")

        with pytest.raises(LockTimeoutError):
            await locks.acquire("o1")

        # the timed-out waiter no longer pins the entry
        await locks.release("o1")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_is_forgotten(self):
        """Cancelling a waiting acquire cleans up its bookkeeping."""
        locks = InMemoryOrderLockRegistry()
        await locks.acquire("o1")

        waiter = asyncio.create_task(locks.acquire("o1"))
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        await locks.release("o1")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_release_without_acquire_is_ignored(self):
        """Releasing a lock that is not held does nothing."""
        locks = InMemoryOrderLockRegistry()

        await locks.release("o1")

        assert not locks.is_held("o1")


@pytest.fixture
def redis_lock():
    """Create a mock redis-py lock."""
    lock = MagicMock()
    lock.acquire = AsyncMock(return_value=True)
    lock.release = AsyncMock()
    return lock


@pytest.fixture
def redis_client(redis_lock):
    """Create a mock Redis client handing out the mock lock."""
    client = MagicMock()
    client.lock = MagicMock(return_value=redis_lock)
    return client


class TestRedisOrderLockRegistry:
    """Tests for the Redis-backed registry."""

    @pytest.mark.asyncio
    async def test_acquire_uses_prefixed_key_and_lease(self, redis_client, redis_lock):
        """Locks are created per order key with the configured lease."""
        locks = RedisOrderLockRegistry(
            redis_client, key_prefix="lock:order", lease_timeout=30, acquire_timeout=5
        )

        await locks.acquire("o1")

        redis_client.lock.assert_called_once_with("lock:order:o1", timeout=30, blocking_timeout=5)
        redis_lock.acquire.assert_awaited_once()
        assert locks.is_held("o1")

    @pytest.mark.asyncio
    async def test_release(self, redis_client, redis_lock):
        """Release frees the Redis lock and forgets it."""
        locks = RedisOrderLockRegistry(redis_client)
        await locks.acquire("o1")

        await locks.release("o1")

        redis_lock.release.assert_awaited_once()
        assert not locks.is_held("o1")

    @pytest.mark.asyncio
    async def test_acquire_timeout(self, redis_client, redis_lock):
        """A lock not obtained within the blocking timeout raises."""
        redis_lock.acquire.return_value = False
        locks = RedisOrderLockRegistry(redis_client, acquire_timeout=1)

        with pytest.raises(LockTimeoutError):
            await locks.acquire("o1")

        assert not locks.is_held("o1")

    @pytest.mark.asyncio
    async def test_acquire_redis_failure(self, redis_client, redis_lock):
        """Redis errors are wrapped in LockError."""
        redis_lock.acquire.side_effect = RedisConnectionError("down")
        locks = RedisOrderLockRegistry(redis_client)

        with pytest.raises(LockError) as exc_info:
            await locks.acquire("o1")

        assert not isinstance(exc_info.value, LockTimeoutError)

    @pytest.mark.asyncio
    async def test_release_after_lease_expired(self, redis_client, redis_lock):
        """An expired lease is logged, not raised."""
        redis_lock.release.side_effect = LockNotOwnedError("expired")
        locks = RedisOrderLockRegistry(redis_client)
        await locks.acquire("o1")

        await locks.release("o1")

        assert not locks.is_held("o1")

    @pytest.mark.asyncio
    async def test_release_without_acquire_is_ignored(self, redis_client, redis_lock):
        """Releasing an unknown order does not call Redis."""
        locks = RedisOrderLockRegistry(redis_client)

        await locks.release("o1")

        redis_lock.release.assert_not_awaited()


class TestCreateOrderLockRegistry:
    """Tests for backend selection."""

    def test_memory_backend(self):
        """The default backend is in-process."""
        settings = Settings(order_lock=LockSettings(acquire_timeout=2.5))

        locks = create_order_lock_registry(settings)

        assert isinstance(locks, InMemoryOrderLockRegistry)

    def test_redis_backend(self, redis_client):
        """The redis backend wraps the given client."""
        settings = Settings(order_lock=LockSettings(backend="redis"))

        locks = create_order_lock_registry(settings, redis_client)

        assert isinstance(locks, RedisOrderLockRegistry)

    def test_redis_backend_requires_client(self):
        """Selecting redis without a client is a configuration error."""
        settings = Settings(order_lock=LockSettings(backend="redis"))

        with pytest.raises(LockError):
            create_order_lock_registry(settings)
