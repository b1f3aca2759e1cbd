# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Acting-user model.

Authentication itself happens in the transport layer; domain services
receive an already resolved Actor.
"""

from src.domains.auth.actors import (
    Actor,
    AdminActor,
    CompanyActor,
    EmployeeActor,
    ManagerActor,
    UserRole,
)

__all__ = [
    "Actor",
    "AdminActor",
    "CompanyActor",
    "EmployeeActor",
    "ManagerActor",
    "UserRole",
]
