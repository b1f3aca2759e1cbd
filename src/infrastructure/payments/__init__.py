# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment provider integration."""

from src.infrastructure.payments.checkout_client import CheckoutClient, PaymentProviderError

__all__ = ["CheckoutClient", "PaymentProviderError"]
