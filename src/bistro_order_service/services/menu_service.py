"""Menu administration and review listing."""

import logging
import uuid

from bistro_order_service.models.menu_models import MenuItem, MenuItemCreate, MenuItemUpdate, Review
from bistro_order_service.models.result_models import DeleteResult, InsertResult, UpdateResult
from bistro_order_service.observability import traced
from bistro_order_service.repositories.data_store import DataStore

logger = logging.getLogger(__name__)


class MenuService:
    """Service for menu items and reviews.

    Menu item ids are opaque strings generated here on insert.
    """

    def __init__(self, store: DataStore) -> None:
        self.store = store

    async def list_menu(self) -> list[MenuItem]:
        return self.store.menu.find_all()

    async def get_menu_item(self, item_id: str) -> MenuItem | None:
        return self.store.menu.find_one(item_id)

    @traced("add_menu_item")
    async def add_menu_item(self, data: MenuItemCreate) -> InsertResult:
        item = MenuItem(id=uuid.uuid4().hex, **data.model_dump())
        result = self.store.menu.insert(item)
        logger.info(f"Added menu item {item.id} in category {item.category}")
        return result

    @traced("update_menu_item")
    async def update_menu_item(self, item_id: str, data: MenuItemUpdate) -> UpdateResult:
        """Apply the fields present in ``data`` to an existing menu item.

        Returns:
            UpdateResult; both counts are 0 for an unknown id
        """
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        return self.store.menu.update_fields(item_id, fields)

    @traced("delete_menu_item")
    async def delete_menu_item(self, item_id: str) -> DeleteResult:
        result = self.store.menu.delete_one(item_id)
        logger.info(f"Deleted menu item {item_id}: {result.deleted_count} record(s)")
        return result

    async def list_reviews(self) -> list[Review]:
        return self.store.reviews.find_all()
