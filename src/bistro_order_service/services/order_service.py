"""Carts, payments and payment intents."""

import logging
import uuid
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from bistro_order_service.auth.credentials import Principal
from bistro_order_service.auth.guards import require_owner
from bistro_order_service.exceptions import UpstreamFailure
from bistro_order_service.models.order_models import CartEntry, CartEntryCreate, Payment, PaymentCreate
from bistro_order_service.models.result_models import (
    DeleteResult,
    InsertResult,
    PaymentRecordResult,
)
from bistro_order_service.observability import traced
from bistro_order_service.observability.metrics import (
    record_cart_cleanup_failure,
    record_payment_recorded,
)
from bistro_order_service.repositories.data_store import DataStore
from bistro_order_service.services.payment_provider_client import PaymentProviderClient

logger = logging.getLogger(__name__)


def to_minor_units(price: float) -> int:
    """Convert a price to an integer count of cents, rounding half up."""
    cents = Decimal(str(price)) * 100
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class OrderService:
    """Service for a customer's path from cart to payment.

    Recording a payment is two independent store writes: the payment insert,
    then deletion of the cart entries it consumed. There is no transaction
    and no compensation. If the second write fails the payment stays
    recorded with its cart entries still listed, and the request fails.
    """

    def __init__(self, store: DataStore, payment_client: PaymentProviderClient) -> None:
        """Initialize the OrderService.

        Args:
            store: Shared data-access handle
            payment_client: Client for the card payment provider
        """
        self.store = store
        self.payment_client = payment_client

    async def list_cart(self, email: str | None) -> list[CartEntry]:
        """List cart entries owned by ``email``; no email lists nothing."""
        if not email:
            return []
        return self.store.carts.find_all({"email": email})

    @traced("add_to_cart")
    async def add_to_cart(self, data: CartEntryCreate) -> InsertResult:
        entry = CartEntry(id=uuid.uuid4().hex, **data.model_dump())
        return self.store.carts.insert(entry)

    @traced("remove_from_cart")
    async def remove_from_cart(self, principal: Principal, cart_id: str) -> DeleteResult:
        """Delete one of the caller's own cart entries.

        Raises:
            Forbidden: If the entry belongs to another identity
        """
        entry = self.store.carts.find_one(cart_id)
        if entry is None:
            return DeleteResult(deleted_count=0)

        require_owner(principal, entry.email)
        return self.store.carts.delete_one(cart_id)

    async def list_payments(self, email: str) -> list[Payment]:
        return self.store.payments.find_all({"email": email})

    @traced("record_payment")
    async def record_payment(self, data: PaymentCreate) -> PaymentRecordResult:
        """Store a payment, then delete the payer's cart entries it consumed.

        Only entries owned by the payment's email are removed; ids of other
        owners' entries are left alone.

        Raises:
            UpstreamFailure: If either write fails; a failed cart deletion
                leaves the payment in place
        """
        payment = Payment(
            id=uuid.uuid4().hex,
            **data.model_dump(exclude={"date"}),
            date=data.date or datetime.now(UTC),
        )
        payment_result = self.store.payments.insert(payment)
        record_payment_recorded(len(payment.cart_ids))

        try:
            delete_result = self.store.carts.delete_many({"id": payment.cart_ids, "email": payment.email})
        except UpstreamFailure:
            record_cart_cleanup_failure()
            logger.error(
                f"Payment {payment.id} recorded but cart entries {payment.cart_ids} were not deleted"
            )
            raise

        logger.info(
            f"Recorded payment {payment.id} for {len(payment.menu_item_ids)} item(s), "
            f"removed {delete_result.deleted_count} cart entr(ies)"
        )
        return PaymentRecordResult(payment_result=payment_result, delete_result=delete_result)

    @traced("create_payment_intent")
    async def create_payment_intent(self, price: float) -> str:
        """Create a card payment intent for ``price`` and return its client secret.

        Raises:
            UpstreamFailure: If the payment provider call fails
        """
        amount = to_minor_units(price)
        client_secret = await self.payment_client.create_payment_intent(amount)
        if client_secret is None:
            raise UpstreamFailure("payment provider unavailable")

        logger.info(f"Created payment intent for {amount} cents")
        return client_secret
