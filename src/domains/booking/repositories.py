# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Repositories for the booking aggregates.

OrderRepository pairs database access with a per-order lock registry:
``find_and_lock_by_id`` returns an order only while its lock is held, and
every such order must be handed back to ``unlock`` exactly once.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.booking.errors import OrderLockTimeoutError
from src.infrastructure.database.models.booking import Course, Order, Pack, Student
from src.infrastructure.locking.order_locks import LockTimeoutError, OrderLockRegistry

logger = logging.getLogger(__name__)


class CourseRepository:
    """Read access to the course catalog."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def pack_exists(self, pack_id: str) -> bool:
        """Check whether a pack exists."""
        result = await self.db.execute(select(Pack.id).where(Pack.id == pack_id))
        return result.scalar_one_or_none() is not None

    async def find_by_id(self, course_id: str) -> Course | None:
        """Get a course by ID, or None."""
        result = await self.db.execute(select(Course).where(Course.id == course_id))
        return result.scalar_one_or_none()


class OrderRepository:
    """Order persistence with per-order locking.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession, locks: OrderLockRegistry) -> None:
        """Initialize the repository.

        Args:
            db: Async database session for the booking database.
            locks: Registry providing per-order mutual exclusion.
        """
        self.db = db
        self._locks = locks

    async def find_and_lock_by_id(self, order_id: str) -> Order | None:
        """Lock an order and load its current state.

        Suspends while another operation holds the same order. The row is
        re-read after the lock is taken so changes committed by the
        previous holder are visible.

        Args:
            order_id: Order identifier.

        Returns:
            The locked order, or None if it does not exist. No lock is
            held when None is returned.

        Raises:
            OrderLockTimeoutError: If the lock could not be acquired in time.
        """
        try:
            await self._locks.acquire(order_id)
        except LockTimeoutError as e:
            logger.warning("Order lock timeout: order=%s", order_id)
            raise OrderLockTimeoutError(order_id) from e

        try:
            query = (
                select(Order)
                .where(Order.id == order_id)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            order = result.scalar_one_or_none()
        except BaseException:
            await self._locks.release(order_id)
            raise

        if order is None:
            await self._locks.release(order_id)
            return None

        return order

    async def save(self, order: Order) -> Order:
        """Persist an order and return the stored state."""
        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)
        return order

    async def unlock(self, order: Order) -> None:
        """Release the lock taken by find_and_lock_by_id."""
        await self._locks.release(order.id)


class StudentRepository:
    """Student persistence."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def save(self, student: Student) -> None:
        """Persist a student; it is committed when this returns."""
        self.db.add(student)
        await self.db.commit()

    async def find_by_id(self, student_id: str) -> Student | None:
        """Read a student from the database, bypassing cached instances."""
        query = (
            select(Student)
            .where(Student.id == student_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
