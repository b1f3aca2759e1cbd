# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Order mutations used by the booking workflows."""

from __future__ import annotations

import logging

from src.domains.booking.repositories import OrderRepository
from src.infrastructure.database.models.booking import Order
from src.infrastructure.payments.checkout_client import CheckoutClient

logger = logging.getLogger(__name__)


class OrderService:
    """Service for order-level changes.

    Callers are expected to hold the order lock.
    """

    def __init__(self, orders: OrderRepository, checkout: CheckoutClient) -> None:
        """Initialize the order service.

        Args:
            orders: Order repository.
            checkout: Payment provider checkout client.
        """
        self._orders = orders
        self._checkout = checkout

    async def update_order_students(self, order: Order, student_ids: list[str]) -> Order:
        """Replace the enrolled student list of an order.

        A new list object is assigned so the JSON column is flagged as
        modified. The change is persisted by the next save.

        Args:
            order: Locked order.
            student_ids: Complete student list in enrollment order.

        Returns:
            The updated order.
        """
        order.student_ids = list(student_ids)
        return order

    async def expire_order_payment_session(self, order: Order) -> Order:
        """Expire the checkout session attached to an order.

        The provider session is expired first; the order only forgets the
        session once the provider has accepted the call.

        Args:
            order: Locked order.

        Returns:
            The saved order without a payment session.

        Raises:
            PaymentProviderError: If the provider call fails.
        """
        session_id = order.payment_session_id
        if not session_id:
            return order

        await self._checkout.expire_session(session_id)

        order.payment_session_id = None
        order = await self._orders.save(order)

        logger.info(
            "Expired order payment session: order=%s, session=%s",
            order.id,
            session_id,
        )
        return order
