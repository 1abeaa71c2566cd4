"""Cart, payment and analytics models."""

from datetime import datetime

from pydantic import Field

from bistro_order_service.models.base import CamelModel, StoredModel


class CartEntry(StoredModel):
    """One menu item placed in a customer's cart.

    Listed per owner through the ``email-index`` global secondary index.
    """

    email: str = Field(..., description="Owner email")
    menu_id: str = Field(..., description="Referenced menu item id")
    name: str | None = Field(None, description="Menu item name at time of adding")
    image: str | None = Field(None, description="Menu item image at time of adding")
    price: float = Field(..., description="Unit price", ge=0)


class CartEntryCreate(CamelModel):
    email: str = Field(..., min_length=1)
    menu_id: str = Field(..., min_length=1)
    name: str | None = None
    image: str | None = None
    price: float = Field(..., ge=0, allow_inf_nan=False)


class Payment(StoredModel):
    """A completed checkout.

    ``cart_ids`` name the cart entries consumed by this payment and
    ``menu_item_ids`` the menu items purchased (one id per line item).
    """

    email: str = Field(..., description="Owner email")
    price: float = Field(..., description="Total charged", ge=0)
    transaction_id: str | None = Field(None, description="Payment provider transaction id")
    date: datetime | None = Field(None, description="Payment timestamp")
    cart_ids: list[str] = Field(default_factory=list)
    menu_item_ids: list[str] = Field(default_factory=list)
    status: str = Field(default="pending", description="pending | served")


class PaymentCreate(CamelModel):
    email: str = Field(..., min_length=1)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    transaction_id: str | None = None
    date: datetime | None = None
    cart_ids: list[str] = Field(default_factory=list)
    menu_item_ids: list[str] = Field(default_factory=list)
    status: str = "pending"


class PaymentIntentRequest(CamelModel):
    price: float = Field(..., description="Amount in major currency units", gt=0, allow_inf_nan=False)


class PaymentIntentResponse(CamelModel):
    client_secret: str


class AdminStats(CamelModel):
    """Revenue summary across the whole store."""

    users: int
    menu_items: int
    orders: int
    revenue: float


class CategoryStats(CamelModel):
    """Units sold and revenue for one menu category."""

    category: str
    quantity: int
    revenue: float
