# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Booking tables: companies, employees, courses, packs, orders, students.

Identifiers are UUID strings. Enum columns store the enum value string.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin
from src.models.booking import (
    OrderStatus,
    PaymentMethod,
    StudentStatus,
    StudentTestResult,
)


def _new_id() -> str:
    return str(uuid4())


class Company(Base, TimestampMixin):
    """A customer company buying seats for its staff."""

    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Employee(Base, TimestampMixin):
    """A user acting on behalf of a company."""

    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    company_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("companies.id"), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Course(Base, TimestampMixin):
    """A scheduled course offering."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Pack(Base, TimestampMixin):
    """A purchasable bundle selected per student."""

    __tablename__ = "packs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Order(Base, TimestampMixin):
    """A purchase of course seats awaiting fulfillment."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    company_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    manager_id: Mapped[str] = mapped_column(String(36), nullable=False)
    course_id: Mapped[str] = mapped_column(String(36), nullable=False)
    pack_id: Mapped[str] = mapped_column(String(36), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderStatus.PENDING.value
    )
    # Enrollment order; only ever reassigned with a new list.
    student_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    payment_session_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def is_pending(self) -> bool:
        """Check whether students may still be added."""
        return self.status == OrderStatus.PENDING.value


class Student(Base, TimestampMixin):
    """One enrollee booked against an order."""

    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    order_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    course_id: Mapped[str] = mapped_column(String(36), nullable=False)
    course_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    company_id: Mapped[str] = mapped_column(String(36), nullable=False)
    manager_id: Mapped[str] = mapped_column(String(36), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StudentStatus.PENDING.value
    )
    test_result: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StudentTestResult.PENDING.value
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    pack_id: Mapped[str] = mapped_column(String(36), nullable=False)
    certificate_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    certificate_file_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    payment_method: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentMethod.START_VALUE.value
    )
    language: Mapped[str | None] = mapped_column(String(10), nullable=True)
