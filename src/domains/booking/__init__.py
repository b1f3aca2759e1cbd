# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Booking domain package.

This package provides:
- Adding students to pending orders under a per-order lock
- Order mutations (student list, payment session expiry)
- Repositories for orders, students and the course catalog
"""

from src.domains.booking.errors import (
    OrderLockTimeoutError,
    PackNotFoundError,
    StudentUnexpectedlyRemovedError,
)
from src.domains.booking.order_service import OrderService
from src.domains.booking.repositories import (
    CourseRepository,
    OrderRepository,
    StudentRepository,
)
from src.domains.booking.service import OrderStudentService, build_order_student_service
from src.domains.booking.student_service import StudentService

__all__ = [
    "OrderStudentService",
    "build_order_student_service",
    "OrderService",
    "StudentService",
    "CourseRepository",
    "OrderRepository",
    "StudentRepository",
    "OrderLockTimeoutError",
    "PackNotFoundError",
    "StudentUnexpectedlyRemovedError",
]
