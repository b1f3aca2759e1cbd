# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-order lock backends."""

from src.infrastructure.locking.order_locks import (
    InMemoryOrderLockRegistry,
    LockError,
    LockTimeoutError,
    OrderLockRegistry,
    RedisOrderLockRegistry,
    create_order_lock_registry,
)

__all__ = [
    "InMemoryOrderLockRegistry",
    "LockError",
    "LockTimeoutError",
    "OrderLockRegistry",
    "RedisOrderLockRegistry",
    "create_order_lock_registry",
]
