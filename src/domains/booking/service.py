# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adding students to a pending order.

The whole check-and-append sequence runs under the order lock: two
requests for the same order never both pass the pending check and both
append to ``student_ids``. The lock is released exactly once on every path
after it was taken, including unexpected errors.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, assert_never
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.actors import (
    Actor,
    AdminActor,
    CompanyActor,
    EmployeeActor,
    ManagerActor,
)
from src.domains.booking.errors import (
    AccessError,
    NotAllowedError,
    PackNotFoundError,
    StudentUnexpectedlyRemovedError,
)
from src.domains.booking.order_service import OrderService
from src.domains.booking.repositories import (
    CourseRepository,
    OrderRepository,
    StudentRepository,
)
from src.domains.booking.student_service import StudentService
from src.domains.company.service import CompanyAccessService
from src.infrastructure.database.models.booking import Course, Order, Student
from src.infrastructure.locking.order_locks import OrderLockRegistry
from src.infrastructure.payments.checkout_client import CheckoutClient
from src.models.booking import (
    OrderCreateStudentRequest,
    PaymentMethod,
    StudentResponse,
    StudentStatus,
    StudentTestResult,
)

logger = logging.getLogger(__name__)


class OrderStudentService:
    """Enrolls new students against existing orders.

    Attributes:
        orders: Order repository (locking).
        students: Student repository.
        courses: Course catalog.
    """

    def __init__(
        self,
        orders: OrderRepository,
        students: StudentRepository,
        courses: CourseRepository,
        order_service: OrderService,
        student_service: StudentService,
        access: CompanyAccessService,
    ) -> None:
        """Initialize the service with its collaborators."""
        self.orders = orders
        self.students = students
        self.courses = courses
        self._order_service = order_service
        self._student_service = student_service
        self._access = access

    async def create_student(
        self,
        order_id: str,
        request: OrderCreateStudentRequest,
        actor: Actor,
    ) -> StudentResponse:
        """Create a student and append it to a pending order.

        Args:
            order_id: Order identifier.
            request: Personal data and selected pack of the student.
            actor: Acting user.

        Returns:
            The student as stored.

        Raises:
            AccessError: If the actor is not an active company or the order
                belongs to another company.
            PackNotFoundError: If the selected pack does not exist.
            CompanyNotFoundError: If an employee actor has no company.
            NotAllowedError: If the order is missing, not pending, or its
                course is missing.
            OrderLockTimeoutError: If the order stayed locked too long.
            StudentUnexpectedlyRemovedError: If the saved student cannot be
                read back.
        """
        if not self._access.is_active_company(actor):
            logger.info("Create student rejected, inactive company: actor=%s", actor.id)
            raise AccessError("User not able to create student")

        if not await self.courses.pack_exists(request.pack_id):
            raise PackNotFoundError(request.pack_id)

        async with self._locked_order(order_id) as order:
            await self._check_order_company(order, actor)

            if not order.is_pending:
                logger.info(
                    "Create student rejected, order not pending: order=%s, status=%s",
                    order.id,
                    order.status,
                )
                raise NotAllowedError(
                    f"Could not add student to order {order.id}: order is not in pending state"
                )

            course = await self.courses.find_by_id(order.course_id)
            if course is None:
                raise NotAllowedError(
                    f"Could not add student to order {order.id}: related course does not exist"
                )

            if order.payment_session_id:
                order = await self._order_service.expire_order_payment_session(order)

            student = self._build_student(order, course, request)
            await self.students.save(student)

            try:
                await self._order_service.update_order_students(
                    order, [*order.student_ids, student.id]
                )
                order = await self.orders.save(order)
            except Exception:
                # TODO: decide with product whether to delete the orphan or keep flagging it
                logger.error(
                    "Student saved but order update failed, student is orphaned: "
                    "order=%s, student=%s",
                    order.id,
                    student.id,
                )
                raise

            booked = await self._student_service.find_by_id(student.id)
            if booked is None:
                raise StudentUnexpectedlyRemovedError(student.id)

        logger.info(
            "Student added to order: order=%s, student=%s, actor=%s, students=%d",
            order.id,
            booked.id,
            actor.id,
            len(order.student_ids),
        )
        return booked

    @asynccontextmanager
    async def _locked_order(self, order_id: str) -> AsyncIterator[Order]:
        """Hold the order lock for the duration of the block."""
        order = await self.orders.find_and_lock_by_id(order_id)
        if order is None:
            raise NotAllowedError(
                f"Could not add student to order {order_id}: order does not exist"
            )

        try:
            yield order
        finally:
            await self.orders.unlock(order)

    async def _check_order_company(self, order: Order, actor: Actor) -> None:
        """Ensure the order belongs to the company the actor acts for.

        Raises:
            AccessError: If it belongs to another company.
        """
        match actor:
            case CompanyActor(id=company_id):
                pass
            case EmployeeActor(id=employee_id):
                company = await self._access.find_company_by_employee(employee_id, actor)
                company_id = company.id
            case ManagerActor() | AdminActor():
                raise AccessError("User not able to create student")
            case _:
                assert_never(actor)

        if order.company_id != company_id:
            logger.info(
                "Create student rejected, foreign order: order=%s, actor=%s",
                order.id,
                actor.id,
            )
            raise AccessError(
                f"Could not add student to order {order.id}: it belongs to different company"
            )

    @staticmethod
    def _build_student(
        order: Order,
        course: Course,
        request: OrderCreateStudentRequest,
    ) -> Student:
        return Student(
            id=str(uuid4()),
            order_id=order.id,
            course_id=order.course_id,
            course_date=course.date,
            company_id=order.company_id,
            manager_id=order.manager_id,
            status=StudentStatus.PENDING.value,
            test_result=StudentTestResult.PENDING.value,
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            email=request.email or "",
            pack_id=request.pack_id,
            certificate_id=None,
            certificate_file_id=None,
            payment_method=PaymentMethod.START_VALUE.value,
            language=None,
        )


def build_order_student_service(
    db: AsyncSession,
    locks: OrderLockRegistry,
    checkout: CheckoutClient,
) -> OrderStudentService:
    """Wire an OrderStudentService for one request-scoped session.

    Args:
        db: Request-scoped database session.
        locks: Process-wide order lock registry.
        checkout: Process-wide checkout client.

    Returns:
        Ready-to-use service.
    """
    orders = OrderRepository(db, locks)
    students = StudentRepository(db)
    return OrderStudentService(
        orders=orders,
        students=students,
        courses=CourseRepository(db),
        order_service=OrderService(orders, checkout),
        student_service=StudentService(students),
        access=CompanyAccessService(db),
    )
