"""
Payment gateway client.

Creates payment intents on the card gateway and hands the client secret
back to the browser, which completes the charge itself. Capture results are
reported to us later through POST /payments.
"""

import logging
from typing import Optional

import httpx

from backend.app.core.exceptions import UpstreamFailure

logger = logging.getLogger("parcel_delivery.payments")


class PaymentProcessor:
    """Thin async client for the gateway's payment-intent endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.stripe.com",
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def create_intent(self, amount: int, currency: str) -> str:
        """
        Create a card payment intent.

        Args:
            amount: Amount in the currency's smallest unit (cents)
            currency: ISO currency code, e.g. "usd"

        Returns:
            The intent's client secret

        Raises:
            UpstreamFailure: on transport errors or a gateway error response
        """
        logger.info("Creating payment intent: amount=%s currency=%s", amount, currency)

        try:
            async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
                response = await client.post(
                    "/v1/payment_intents",
                    data={
                        "amount": str(amount),
                        "currency": currency,
                        "payment_method_types[]": "card",
                    },
                    auth=(self.api_key, ""),
                )
        except httpx.HTTPError as e:
            logger.error("Payment gateway unreachable: %s", e)
            raise UpstreamFailure("Payment gateway unreachable", service="payment_gateway") from e

        if response.is_error:
            message = _gateway_error_message(response)
            logger.error("Payment gateway rejected intent (%s): %s", response.status_code, message)
            raise UpstreamFailure(message, service="payment_gateway")

        client_secret = response.json().get("client_secret")
        if not client_secret:
            raise UpstreamFailure("Payment gateway returned no client secret", service="payment_gateway")
        return client_secret


def _gateway_error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"Payment gateway error ({response.status_code})"
