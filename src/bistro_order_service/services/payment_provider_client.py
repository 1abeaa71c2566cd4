"""Client for the card payment provider's REST API."""

import logging
import time

import httpx

from bistro_order_service.observability.metrics import record_payment_provider_call

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.stripe.com"


class PaymentProviderClient:
    """HTTP client for creating payment intents.

    Speaks the Stripe form-encoded API, authenticating with the secret key as
    the basic-auth username.
    """

    def __init__(self, secret_key: str, base_url: str = DEFAULT_BASE_URL) -> None:
        """Initialize the payment provider client.

        Args:
            secret_key: Provider secret key
            base_url: Base URL of the provider API

        Raises:
            ValueError: If secret_key is empty
        """
        if not secret_key:
            raise ValueError("A payment provider secret key must be provided")

        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")

    async def create_payment_intent(self, amount: int, currency: str = "usd") -> str | None:
        """Create a card payment intent.

        Args:
            amount: Amount in the currency's smallest unit (cents)
            currency: Three-letter ISO currency code

        Returns:
            The intent's client secret, or None on failure
        """
        url = f"{self.base_url}/v1/payment_intents"
        data = {
            "amount": str(amount),
            "currency": currency,
            "payment_method_types[]": "card",
        }

        started = time.monotonic()
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, data=data, auth=(self.secret_key, ""))
                response.raise_for_status()
                client_secret: str | None = response.json().get("client_secret")

        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error(f"Failed to create payment intent for amount {amount}: {e}")
            return None

        finally:
            record_payment_provider_call("create_payment_intent", time.monotonic() - started)

        if not client_secret:
            logger.error("Payment provider response carried no client secret")
            return None

        return client_secret
