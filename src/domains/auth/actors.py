# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Acting users.

Authentication resolves every request to exactly one of the actor kinds
below. ``Actor`` is a closed union: services dispatch on it with ``match``
and end with ``assert_never`` so a new kind cannot be silently ignored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class UserRole(str, Enum):
    """Role of an authenticated user."""

    COMPANY = "company"
    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


@dataclass(frozen=True)
class CompanyActor:
    """A company account; its id is the company id."""

    id: str
    is_active: bool = True
    role: ClassVar[UserRole] = UserRole.COMPANY


@dataclass(frozen=True)
class EmployeeActor:
    """A user acting on behalf of the company that employs them."""

    id: str
    is_active: bool = True
    role: ClassVar[UserRole] = UserRole.EMPLOYEE


@dataclass(frozen=True)
class ManagerActor:
    """Platform staff managing orders of client companies."""

    id: str
    role: ClassVar[UserRole] = UserRole.MANAGER


@dataclass(frozen=True)
class AdminActor:
    """Platform administrator."""

    id: str
    role: ClassVar[UserRole] = UserRole.ADMIN


Actor = CompanyActor | EmployeeActor | ManagerActor | AdminActor
