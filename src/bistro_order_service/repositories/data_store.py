"""The data-access handle shared by every service.

One ``DataStore`` is built at process start around a single boto3 DynamoDB
resource and passed to each service. Services run on the application's
event loop and call the store synchronously, so the resource is never used
from two threads at once.
"""

import logging
from collections import defaultdict
from decimal import Decimal

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource

from bistro_order_service.models.order_models import AdminStats, CategoryStats
from bistro_order_service.repositories.restaurant_repositories import (
    CartRepository,
    MenuRepository,
    PaymentRepository,
    ReviewRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAMES = {
    "users": "bistro-users",
    "menu": "bistro-menu",
    "reviews": "bistro-reviews",
    "carts": "bistro-carts",
    "payments": "bistro-payments",
}


class DataStore:
    """Repositories for all collections plus the two read-only aggregations."""

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_names: dict[str, str] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_names: Overrides for the default table names, keyed by collection
        """
        names = {**DEFAULT_TABLE_NAMES, **(table_names or {})}
        self.dynamodb = dynamodb_resource
        self.table_names = names

        self.users = UserRepository(dynamodb_resource, names["users"])
        self.menu = MenuRepository(dynamodb_resource, names["menu"])
        self.reviews = ReviewRepository(dynamodb_resource, names["reviews"])
        self.carts = CartRepository(dynamodb_resource, names["carts"])
        self.payments = PaymentRepository(dynamodb_resource, names["payments"])

    def check_tables(self) -> None:
        """Fail fast when any table is missing or the store is unreachable.

        Raises:
            UpstreamFailure: For the first table that cannot be described
        """
        for repository in (self.users, self.menu, self.reviews, self.carts, self.payments):
            repository.check_table()
        logger.info(f"All tables reachable: {', '.join(self.table_names.values())}")

    def revenue_summary(self) -> AdminStats:
        """Sum payment prices and count users, menu items and payments."""
        payments = self.payments.find_all()
        revenue = sum((Decimal(str(p.price)) for p in payments), Decimal("0"))

        return AdminStats(
            users=self.users.count(),
            menu_items=self.menu.count(),
            orders=len(payments),
            revenue=float(revenue),
        )

    def order_stats_by_category(self) -> list[CategoryStats]:
        """Units sold and revenue per menu category.

        Each id in a payment's ``menu_item_ids`` is one line item, joined to
        the current menu for its category and price. Ids that no longer
        resolve to a menu item are skipped. Group order is unspecified.
        """
        menu_by_id = {item.id: item for item in self.menu.find_all()}

        quantity: dict[str, int] = defaultdict(int)
        revenue: dict[str, Decimal] = defaultdict(Decimal)
        for payment in self.payments.find_all():
            for menu_item_id in payment.menu_item_ids:
                item = menu_by_id.get(menu_item_id)
                if item is None:
                    continue
                quantity[item.category] += 1
                revenue[item.category] += Decimal(str(item.price))

        return [
            CategoryStats(category=category, quantity=count, revenue=float(revenue[category]))
            for category, count in quantity.items()
        ]
