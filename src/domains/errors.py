# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error kinds shared by the domain services.

Transport layers map ``kind`` to a response status. Internal invariant
violations are deliberately not part of this hierarchy.
"""


class DomainError(Exception):
    """Base exception for user-facing domain errors."""

    kind: str = "domain"


class AccessError(DomainError):
    """Raised when the acting user may not perform the operation."""

    kind = "access"


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    kind = "not_found"


class NotAllowedError(DomainError):
    """Raised when the current state of an entity forbids the operation."""

    kind = "not_allowed"
