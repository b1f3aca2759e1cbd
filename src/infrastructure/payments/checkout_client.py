# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the payment provider's checkout sessions.

Only the expiry call is needed by the booking core: once an order changes,
any checkout session opened for its previous contents must stop accepting
payments.
"""

import logging
from typing import TYPE_CHECKING, Optional

import httpx

if TYPE_CHECKING:
    from src.core.config.settings import PaymentProviderSettings

logger = logging.getLogger(__name__)

# Session already expired, completed or unknown to the provider
_ALREADY_CLOSED_STATUSES = {404, 409}


class PaymentProviderError(Exception):
    """Exception raised when the payment provider rejects or fails a call.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status returned by the provider, if any.
        original_error: The underlying transport error, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        """Initialize the provider error.

        Args:
            message: Human-readable error description.
            status_code: HTTP status returned by the provider.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class CheckoutClient:
    """Async client for checkout-session operations.

    Example:
        client = CheckoutClient(settings.payment)
        await client.expire_session("cs_test_123")
        await client.close()
    """

    def __init__(
        self,
        settings: "PaymentProviderSettings",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the checkout client.

        Args:
            settings: Payment provider settings.
            transport: Optional httpx transport, used to plug in mocks.
        """
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        """Get the provider API base URL."""
        return self._settings.base_url.rstrip("/")

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._settings.timeout,
                headers=self._settings.auth_headers,
                transport=self._transport,
            )
        return self._client

    async def expire_session(self, session_id: str) -> None:
        """Expire a checkout session.

        A session the provider no longer considers open counts as expired.

        Args:
            session_id: Provider checkout session identifier.

        Raises:
            PaymentProviderError: If the provider fails or rejects the call.
        """
        client = self._get_client()
        try:
            response = await client.post(f"/checkout/sessions/{session_id}/expire")
        except httpx.HTTPError as e:
            raise PaymentProviderError(
                f"Failed to expire checkout session {session_id}",
                original_error=e,
            ) from e

        if response.is_success:
            logger.info("Checkout session expired: session=%s", session_id)
            return

        if response.status_code in _ALREADY_CLOSED_STATUSES:
            logger.info(
                "Checkout session already closed: session=%s, status=%d",
                session_id,
                response.status_code,
            )
            return

        raise PaymentProviderError(
            f"Provider refused to expire checkout session {session_id}: {response.text}",
            status_code=response.status_code,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
