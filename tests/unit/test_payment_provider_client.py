"""Unit tests for PaymentProviderClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from bistro_order_service.services.payment_provider_client import PaymentProviderClient


@pytest.fixture
def client() -> PaymentProviderClient:
    return PaymentProviderClient(secret_key="sk_test_123", base_url="https://payments.test/")


@pytest.mark.unit
class TestPaymentProviderClient:
    """Test suite for PaymentProviderClient."""

    def test_init_requires_secret(self) -> None:
        with pytest.raises(ValueError, match="secret key"):
            PaymentProviderClient(secret_key="")

    def test_init_strips_trailing_slash(self, client: PaymentProviderClient) -> None:
        assert client.base_url == "https://payments.test"

    @pytest.mark.asyncio
    async def test_create_payment_intent_success(self, client: PaymentProviderClient) -> None:
        """Test a card intent is created for the amount in cents."""
        mock_response = MagicMock()
        mock_response.json.return_value = {"id": "pi_1", "client_secret": "pi_1_secret_abc"}

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = mock_response

            client_secret = await client.create_payment_intent(1250)

        assert client_secret == "pi_1_secret_abc"
        args, kwargs = mock_post.call_args
        assert args[0] == "https://payments.test/v1/payment_intents"
        assert kwargs["data"] == {
            "amount": "1250",
            "currency": "usd",
            "payment_method_types[]": "card",
        }
        assert kwargs["auth"] == ("sk_test_123", "")

    @pytest.mark.asyncio
    async def test_create_payment_intent_http_error(self, client: PaymentProviderClient) -> None:
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "402 Payment Required",
            request=httpx.Request("POST", "https://payments.test/v1/payment_intents"),
            response=httpx.Response(402),
        )

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = mock_response

            assert await client.create_payment_intent(1250) is None

    @pytest.mark.asyncio
    async def test_create_payment_intent_network_error(self, client: PaymentProviderClient) -> None:
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ConnectError("connection refused")

            assert await client.create_payment_intent(1250) is None

    @pytest.mark.asyncio
    async def test_create_payment_intent_missing_secret(self, client: PaymentProviderClient) -> None:
        mock_response = MagicMock()
        mock_response.json.return_value = {"id": "pi_1"}

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = mock_response

            assert await client.create_payment_intent(1250) is None

    @pytest.mark.asyncio
    async def test_records_latency(self, client: PaymentProviderClient) -> None:
        with (
            patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post,
            patch(
                "bistro_order_service.services.payment_provider_client.record_payment_provider_call"
            ) as mock_record,
        ):
            mock_post.side_effect = httpx.ConnectError("connection refused")

            await client.create_payment_intent(100)

        mock_record.assert_called_once()
        assert mock_record.call_args.args[0] == "create_payment_intent"
