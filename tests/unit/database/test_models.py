# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database models.

Tests model definitions and helper properties.
"""

from src.infrastructure.database.models.base import Base, TimestampMixin
from src.infrastructure.database.models.booking import (
    Company,
    Course,
    Employee,
    Order,
    Pack,
    Student,
)
from src.models.booking import OrderStatus


class TestBase:
    """Test base model functionality."""

    def test_base_inherits_declarative_base(self):
        """Verify Base is a declarative base."""
        assert hasattr(Base, "metadata")
        assert hasattr(Base, "registry")

    def test_timestamp_mixin_has_created_at(self):
        """Verify TimestampMixin has created_at field."""
        assert hasattr(TimestampMixin, "created_at")
        assert hasattr(TimestampMixin, "updated_at")

    def test_all_tables_registered(self):
        assert set(Base.metadata.tables) == {
            "companies",
            "employees",
            "courses",
            "packs",
            "orders",
            "students",
        }


class TestOrderModel:
    """Test Order model."""

    def test_order_model_exists(self):
        assert Order.__tablename__ == "orders"
        assert hasattr(Order, "student_ids")
        assert hasattr(Order, "payment_session_id")

    def test_is_pending(self):
        order = Order(status=OrderStatus.PENDING.value)

        assert order.is_pending

    def test_completed_is_not_pending(self):
        order = Order(status=OrderStatus.COMPLETED.value)

        assert not order.is_pending


class TestStudentModel:
    """Test Student model."""

    def test_student_model_exists(self):
        assert Student.__tablename__ == "students"
        for column in (
            "order_id",
            "course_date",
            "test_result",
            "payment_method",
            "certificate_id",
            "certificate_file_id",
            "language",
        ):
            assert hasattr(Student, column)

    def test_optional_columns_nullable(self):
        columns = Student.__table__.c
        assert columns.certificate_id.nullable
        assert columns.certificate_file_id.nullable
        assert columns.language.nullable
        assert not columns.email.nullable


class TestCatalogModels:
    """Test catalog and directory models."""

    def test_tablenames(self):
        assert Company.__tablename__ == "companies"
        assert Employee.__tablename__ == "employees"
        assert Course.__tablename__ == "courses"
        assert Pack.__tablename__ == "packs"

    def test_employee_company_is_optional(self):
        assert Employee.__table__.c.company_id.nullable
