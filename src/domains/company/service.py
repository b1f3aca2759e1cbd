# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Company access policy.

Answers two questions for booking operations:
- whether an actor may act for a company at all
- which company an employee acts for
"""

from __future__ import annotations

import logging
from typing import assert_never

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.actors import (
    Actor,
    AdminActor,
    CompanyActor,
    EmployeeActor,
    ManagerActor,
)
from src.domains.errors import AccessError, NotFoundError
from src.infrastructure.database.models.booking import Company, Employee

logger = logging.getLogger(__name__)


class CompanyNotFoundError(NotFoundError):
    """Raised when an employee has no associated company."""

    def __init__(self, employee_id: str) -> None:
        self.employee_id = employee_id
        super().__init__(f"There is no company for employee {employee_id}")


class CompanyAccessService:
    """Resolves company capabilities of acting users.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the access service.

        Args:
            db: Async database session for the booking database.
        """
        self.db = db

    def is_active_company(self, actor: Actor) -> bool:
        """Check whether the actor may operate as an active company.

        Company accounts qualify while active; employees qualify while
        active, acting for their employer.
        """
        match actor:
            case CompanyActor(is_active=is_active):
                return is_active
            case EmployeeActor(is_active=is_active):
                return is_active
            case ManagerActor() | AdminActor():
                return False
            case _:
                assert_never(actor)

    async def find_company_by_employee(self, employee_id: str, actor: Actor) -> Company:
        """Get the company an employee works for.

        Args:
            employee_id: Employee identifier.
            actor: User asking; only the employee themself or an admin.

        Returns:
            The employer company.

        Raises:
            AccessError: If the actor may not look up this employee.
            CompanyNotFoundError: If the employee or its company is inactive,
                or the employee has no company.
        """
        match actor:
            case AdminActor():
                pass
            case EmployeeActor(id=actor_id) if actor_id == employee_id:
                pass
            case CompanyActor() | EmployeeActor() | ManagerActor():
                raise AccessError(f"User {actor.id} may not look up employee {employee_id}")
            case _:
                assert_never(actor)

        query = (
            select(Company)
            .join(Employee, Employee.company_id == Company.id)
            .where(
                Employee.id == employee_id,
                Employee.is_active.is_(True),
                Company.is_active.is_(True),
            )
        )
        result = await self.db.execute(query)
        company = result.scalar_one_or_none()

        if company is None:
            logger.info("Employee without active company: employee=%s", employee_id)
            raise CompanyNotFoundError(employee_id)

        return company
