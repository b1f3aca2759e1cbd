# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student lookups."""

from __future__ import annotations

from src.domains.booking.repositories import StudentRepository
from src.models.booking import StudentResponse


class StudentService:
    """Read access to students as response DTOs."""

    def __init__(self, students: StudentRepository) -> None:
        self._students = students

    async def find_by_id(self, student_id: str) -> StudentResponse | None:
        """Get a student by ID.

        Args:
            student_id: Student identifier.

        Returns:
            The stored student, or None if it does not exist.
        """
        student = await self._students.find_by_id(student_id)
        if student is None:
            return None
        return StudentResponse.model_validate(student)
