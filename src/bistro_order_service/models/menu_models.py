"""Menu and review data models."""

from pydantic import Field

from bistro_order_service.models.base import CamelModel, StoredModel


class MenuItem(StoredModel):
    """Menu item model."""

    name: str = Field(..., description="Item name")
    category: str = Field(..., description="Category such as salad, pizza, dessert")
    price: float = Field(..., description="Item price", ge=0)
    recipe: str | None = Field(None, description="Recipe or description")
    image: str | None = Field(None, description="URL to item image")


class MenuItemCreate(CamelModel):
    """Payload for adding a menu item."""

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    recipe: str | None = None
    image: str | None = None


class MenuItemUpdate(CamelModel):
    """Partial update for a menu item; unset fields are left untouched."""

    name: str | None = Field(None, min_length=1)
    category: str | None = Field(None, min_length=1)
    price: float | None = Field(None, ge=0, allow_inf_nan=False)
    recipe: str | None = None
    image: str | None = None


class Review(StoredModel):
    """Customer review, read-only through this service."""

    name: str | None = Field(None, description="Reviewer name")
    details: str | None = Field(None, description="Review text")
    rating: float | None = Field(None, description="Rating out of 5", ge=0, le=5)
