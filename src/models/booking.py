# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Booking enums and request/response schemas.

Enum values are the strings persisted in the booking database.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderStatus(str, Enum):
    """Lifecycle state of an order. Students are only added while pending."""

    PENDING = "pending"
    PAID = "paid"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class StudentStatus(str, Enum):
    """Attendance state of an enrolled student."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ATTENDED = "attended"
    ABSENT = "absent"


class StudentTestResult(str, Enum):
    """Outcome of the course exam."""

    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    """How the seat of a student is paid for.

    START_VALUE is the sentinel every student is created with.
    """

    START_VALUE = "unset"
    CARD = "card"
    INVOICE = "invoice"
    VOUCHER = "voucher"


class OrderCreateStudentRequest(BaseModel):
    """Personal data and pack selection for a student added to an order."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: str = Field(min_length=1, max_length=32)
    email: str | None = Field(default=None, max_length=255)
    pack_id: str = Field(min_length=1)

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def strip_required(cls, value: str) -> str:
        """Reject values that are blank once surrounding whitespace is removed."""
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class StudentResponse(BaseModel):
    """Student as stored in the booking database."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    order_id: str
    course_id: str
    course_date: datetime
    company_id: str
    manager_id: str
    status: StudentStatus
    test_result: StudentTestResult
    first_name: str
    last_name: str
    phone: str
    email: str
    pack_id: str
    certificate_id: str | None = None
    certificate_file_id: str | None = None
    payment_method: PaymentMethod
    language: str | None = None
    created_at: datetime | None = None
