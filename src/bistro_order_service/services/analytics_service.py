"""Revenue and sales analytics for administrators."""

from bistro_order_service.models.order_models import AdminStats, CategoryStats
from bistro_order_service.observability import traced
from bistro_order_service.repositories.data_store import DataStore


class AnalyticsService:
    def __init__(self, store: DataStore) -> None:
        self.store = store

    @traced("revenue_summary")
    async def revenue_summary(self) -> AdminStats:
        return self.store.revenue_summary()

    @traced("order_stats")
    async def order_stats(self) -> list[CategoryStats]:
        return self.store.order_stats_by_category()
