# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Booking service errors."""

from src.domains.errors import AccessError, NotAllowedError, NotFoundError


class PackNotFoundError(NotFoundError):
    """Raised when the selected pack does not exist."""

    def __init__(self, pack_id: str) -> None:
        self.pack_id = pack_id
        super().__init__("There is no pack with provided id")


class OrderLockTimeoutError(NotAllowedError):
    """Raised when an order stays locked by another operation for too long."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} is busy, try again later")


class StudentUnexpectedlyRemovedError(RuntimeError):
    """Raised when a student disappears right after being saved.

    Signals an inconsistent store, not a user error.
    """

    def __init__(self, student_id: str) -> None:
        self.student_id = student_id
        super().__init__(f"Student {student_id} was unexpectedly removed")


__all__ = [
    "AccessError",
    "NotAllowedError",
    "NotFoundError",
    "OrderLockTimeoutError",
    "PackNotFoundError",
    "StudentUnexpectedlyRemovedError",
]
