# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the booking database."""

from src.infrastructure.database.models.base import Base, TimestampMixin
from src.infrastructure.database.models.booking import (
    Company,
    Course,
    Employee,
    Order,
    Pack,
    Student,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "Company",
    "Course",
    "Employee",
    "Order",
    "Pack",
    "Student",
]
