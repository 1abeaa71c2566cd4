"""Unit tests for OrderService."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from bistro_order_service.auth.credentials import Principal
from bistro_order_service.exceptions import Forbidden, UpstreamFailure
from bistro_order_service.models.order_models import CartEntry, CartEntryCreate, Payment, PaymentCreate
from bistro_order_service.models.result_models import DeleteResult, InsertResult
from bistro_order_service.services.order_service import OrderService, to_minor_units
from bistro_order_service.services.payment_provider_client import PaymentProviderClient


@pytest.fixture
def mock_store() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_payment_client() -> MagicMock:
    client = MagicMock(spec=PaymentProviderClient)
    client.create_payment_intent = AsyncMock(return_value="pi_123_secret_456")
    return client


@pytest.fixture
def order_service(mock_store: MagicMock, mock_payment_client: MagicMock) -> OrderService:
    return OrderService(mock_store, mock_payment_client)


@pytest.mark.unit
class TestToMinorUnits:
    def test_whole_amount(self) -> None:
        assert to_minor_units(12.5) == 1250

    def test_rounds_half_up(self) -> None:
        assert to_minor_units(0.005) == 1
        assert to_minor_units(19.994) == 1999


@pytest.mark.unit
class TestCart:
    """Test suite for cart operations."""

    @pytest.mark.asyncio
    async def test_list_cart_by_owner(self, order_service: OrderService, mock_store: MagicMock) -> None:
        mock_store.carts.find_all.return_value = []

        await order_service.list_cart("customer@bistro.test")

        mock_store.carts.find_all.assert_called_once_with({"email": "customer@bistro.test"})

    @pytest.mark.asyncio
    async def test_list_cart_without_email(self, order_service: OrderService, mock_store: MagicMock) -> None:
        assert await order_service.list_cart(None) == []
        mock_store.carts.find_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_to_cart(self, order_service: OrderService, mock_store: MagicMock) -> None:
        mock_store.carts.insert.side_effect = lambda entry: InsertResult(inserted_id=entry.id)

        result = await order_service.add_to_cart(
            CartEntryCreate(email="customer@bistro.test", menu_id="menu_1", price=5)
        )

        stored: CartEntry = mock_store.carts.insert.call_args.args[0]
        assert result.inserted_id == stored.id
        assert stored.menu_id == "menu_1"

    @pytest.mark.asyncio
    async def test_remove_own_entry(self, order_service: OrderService, mock_store: MagicMock) -> None:
        mock_store.carts.find_one.return_value = CartEntry(
            id="cart_1", email="customer@bistro.test", menu_id="menu_1", price=5
        )
        mock_store.carts.delete_one.return_value = DeleteResult(deleted_count=1)

        result = await order_service.remove_from_cart(Principal(email="customer@bistro.test"), "cart_1")

        assert result.deleted_count == 1
        mock_store.carts.delete_one.assert_called_once_with("cart_1")

    @pytest.mark.asyncio
    async def test_remove_someone_elses_entry(self, order_service: OrderService, mock_store: MagicMock) -> None:
        mock_store.carts.find_one.return_value = CartEntry(
            id="cart_1", email="customer@bistro.test", menu_id="menu_1", price=5
        )

        with pytest.raises(Forbidden):
            await order_service.remove_from_cart(Principal(email="intruder@bistro.test"), "cart_1")

        mock_store.carts.delete_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_remove_missing_entry(self, order_service: OrderService, mock_store: MagicMock) -> None:
        mock_store.carts.find_one.return_value = None

        result = await order_service.remove_from_cart(Principal(email="customer@bistro.test"), "gone")

        assert result.deleted_count == 0


@pytest.mark.unit
class TestRecordPayment:
    """Test suite for OrderService.record_payment."""

    @pytest.fixture
    def payment_data(self) -> PaymentCreate:
        return PaymentCreate(
            email="customer@bistro.test",
            price=14,
            transaction_id="txn_1",
            cart_ids=["c1", "c2"],
            menu_item_ids=["menu_1", "menu_3"],
        )

    @pytest.mark.asyncio
    async def test_stores_payment_then_clears_cart(
        self, order_service: OrderService, mock_store: MagicMock, payment_data: PaymentCreate
    ) -> None:
        mock_store.payments.insert.side_effect = lambda payment: InsertResult(inserted_id=payment.id)
        mock_store.carts.delete_many.return_value = DeleteResult(deleted_count=2)

        result = await order_service.record_payment(payment_data)

        stored: Payment = mock_store.payments.insert.call_args.args[0]
        assert stored.date is not None
        assert stored.status == "pending"
        assert result.payment_result.inserted_id == stored.id
        assert result.delete_result.deleted_count == 2
        mock_store.carts.delete_many.assert_called_once_with({"id": ["c1", "c2"], "email": "customer@bistro.test"})

    @pytest.mark.asyncio
    async def test_cart_cleanup_failure_keeps_payment(
        self, order_service: OrderService, mock_store: MagicMock, payment_data: PaymentCreate
    ) -> None:
        """Test a failed cart deletion fails the request without undoing the payment."""
        mock_store.payments.insert.return_value = InsertResult(inserted_id="pay_1")
        mock_store.carts.delete_many.side_effect = UpstreamFailure()

        with patch("bistro_order_service.services.order_service.record_cart_cleanup_failure") as mock_record:
            with pytest.raises(UpstreamFailure):
                await order_service.record_payment(payment_data)

        mock_record.assert_called_once()
        mock_store.payments.insert.assert_called_once()
        mock_store.payments.delete_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_payment_insert_failure_skips_cart(
        self, order_service: OrderService, mock_store: MagicMock, payment_data: PaymentCreate
    ) -> None:
        mock_store.payments.insert.side_effect = UpstreamFailure()

        with pytest.raises(UpstreamFailure):
            await order_service.record_payment(payment_data)

        mock_store.carts.delete_many.assert_not_called()


@pytest.mark.unit
class TestPaymentIntent:
    """Test suite for OrderService.create_payment_intent."""

    @pytest.mark.asyncio
    async def test_converts_price_to_cents(
        self, order_service: OrderService, mock_payment_client: MagicMock
    ) -> None:
        client_secret = await order_service.create_payment_intent(12.5)

        assert client_secret == "pi_123_secret_456"
        mock_payment_client.create_payment_intent.assert_called_once_with(1250)

    @pytest.mark.asyncio
    async def test_provider_failure(self, order_service: OrderService, mock_payment_client: MagicMock) -> None:
        mock_payment_client.create_payment_intent.return_value = None

        with pytest.raises(UpstreamFailure):
            await order_service.create_payment_intent(12.5)

    @pytest.mark.asyncio
    async def test_list_payments_by_owner(self, order_service: OrderService, mock_store: MagicMock) -> None:
        mock_store.payments.find_all.return_value = []

        await order_service.list_payments("customer@bistro.test")

        mock_store.payments.find_all.assert_called_once_with({"email": "customer@bistro.test"})
