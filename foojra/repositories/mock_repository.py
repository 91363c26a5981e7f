"""Bundle of every collection store sharing one storage handle."""
from __future__ import annotations

from foojra.core.config import Settings, get_settings
from foojra.repositories.collections import (
    MenuItemReviewStore,
    MenuItemStore,
    OrderStore,
    ReviewStore,
    ShopStore,
    UserStore,
)
from foojra.repositories.json_storage import BaseStorage, JsonStorage


class MockDataRepository:
    """Entry point handed to services and routers (no module-level instance)."""

    def __init__(self, storage: BaseStorage) -> None:
        self.storage = storage
        self.users = UserStore(storage)
        self.shops = ShopStore(storage)
        self.menu_items = MenuItemStore(storage)
        self.orders = OrderStore(storage)
        self.reviews = ReviewStore(storage)
        self.menu_item_reviews = MenuItemReviewStore(storage)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "MockDataRepository":
        settings = settings or get_settings()
        return cls(JsonStorage(settings.data_dir))
