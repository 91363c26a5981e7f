"""CRUD helpers for the marketplace collections, backed by a storage handle."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from foojra.core.utils import utc_timestamp
from foojra.domain.filters import (
    MenuItemFilter,
    MenuItemReviewFilter,
    OrderFilter,
    RecordFilter,
    ReviewFilter,
    ShopFilter,
    UserFilter,
    build_predicate,
)
from foojra.domain.ids import menu_item_review_id, next_id
from foojra.repositories.json_storage import BaseStorage

logger = logging.getLogger(__name__)

PROTECTED_FIELDS = ("_id", "createdAt", "updatedAt")


class RepositoryError(Exception):
    """Base class for data-layer exceptions."""


class DuplicateRecordError(RepositoryError):
    def __init__(self, collection: str, field: str, value: Any):
        super().__init__(f"{collection}: {field} {value!r} already exists")
        self.collection = collection
        self.field = field
        self.value = value


class CollectionStore:
    """Load-filter-mutate-save over one collection.

    Subclasses set `collection`, `forced` (values stamped on every new record)
    and `filter_type`.
    """

    collection: str = ""
    forced: Mapping[str, Any] = {}
    filter_type: type[RecordFilter] = RecordFilter

    def __init__(
        self,
        storage: BaseStorage,
        *,
        id_factory: Callable[[], str] = next_id,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self.storage = storage
        self.id_factory = id_factory
        self.clock = clock

    # -------------------------------------- helpers --------------------------------------
    def _load(self) -> list[dict]:
        return self.storage.load(self.collection)

    def _persist(self, records: list[dict]) -> bool:
        ok = self.storage.save(self.collection, records)
        if not ok:
            # callers still get the record back; the change is lost on disk
            logger.error("%s: save failed, change not persisted", self.collection)
        return ok

    def _view(self, record: dict) -> dict:
        return record

    def _check_new(self, records: list[dict], data: Mapping[str, Any]) -> None:
        pass

    @staticmethod
    def _index_of(records: list[dict], record_id: str) -> int:
        for idx, record in enumerate(records):
            if record.get("_id") == record_id:
                return idx
        return -1

    # -------------------------------------- operations --------------------------------------
    def create(self, data: Mapping[str, Any]) -> dict:
        with self.storage.lock(self.collection):
            records = self._load()
            self._check_new(records, data)
            now = self.clock()
            record = {"_id": self.id_factory()}
            record.update({k: v for k, v in data.items() if k not in PROTECTED_FIELDS})
            record.update(self.forced)
            record["createdAt"] = now
            record["updatedAt"] = now
            records.append(record)
            self._persist(records)
        return self._view(record)

    def find_all(self, filters: Optional[RecordFilter] = None) -> list[dict]:
        if filters is not None and not isinstance(filters, self.filter_type):
            raise TypeError(f"{self.collection} expects {self.filter_type.__name__}")
        predicate = build_predicate(filters.constraints() if filters else {})
        return [self._view(r) for r in self._load() if predicate(r)]

    def find_by_id(self, record_id: str) -> Optional[dict]:
        return self.find_one(lambda r: r.get("_id") == record_id)

    def find_one(self, predicate: Callable[[dict], bool]) -> Optional[dict]:
        for record in self._load():
            if predicate(record):
                return self._view(record)
        return None

    def update(self, record_id: str, changes: Mapping[str, Any]) -> Optional[dict]:
        with self.storage.lock(self.collection):
            records = self._load()
            idx = self._index_of(records, record_id)
            if idx == -1:
                return None
            merged = dict(records[idx])
            merged.update({k: v for k, v in changes.items() if k not in PROTECTED_FIELDS})
            merged["updatedAt"] = self.clock()
            records[idx] = merged
            self._persist(records)
        return self._view(merged)

    def _delete(self, record_id: str) -> bool:
        with self.storage.lock(self.collection):
            remaining = [r for r in self._load() if r.get("_id") != record_id]
            self._persist(remaining)
        # reports success whether or not anything matched
        return True


class UserStore(CollectionStore):
    collection = "users"
    filter_type = UserFilter

    def _view(self, record: dict) -> dict:
        return {k: v for k, v in record.items() if k != "password"}

    def _check_new(self, records: list[dict], data: Mapping[str, Any]) -> None:
        email = data.get("email")
        if any(r.get("email") == email for r in records):
            raise DuplicateRecordError(self.collection, "email", email)

    def update(self, record_id: str, changes: Mapping[str, Any]) -> Optional[dict]:
        email = changes.get("email")
        with self.storage.lock(self.collection):
            if email is not None:
                records = self._load()
                if self._index_of(records, record_id) == -1:
                    return None
                if any(r.get("email") == email and r.get("_id") != record_id for r in records):
                    raise DuplicateRecordError(self.collection, "email", email)
            return super().update(record_id, changes)

    def find_by_email(self, email: str) -> Optional[dict]:
        """Raw record including the password hash; for credential checks only."""
        for record in self._load():
            if record.get("email") == email:
                return record
        return None


class ShopStore(CollectionStore):
    collection = "shops"
    forced = {"isApproved": False, "rating": 0, "totalReviews": 0}
    filter_type = ShopFilter

    def set_approval(self, shop_id: str, approved: bool) -> Optional[dict]:
        return self.update(shop_id, {"isApproved": bool(approved)})


class MenuItemStore(CollectionStore):
    collection = "menuItems"
    forced = {"isAvailable": True}
    filter_type = MenuItemFilter

    def by_shop(self, shop_id: str) -> list[dict]:
        return [r for r in self._load() if r.get("shop") == shop_id]

    def set_availability(self, item_id: str, available: bool) -> Optional[dict]:
        return self.update(item_id, {"isAvailable": bool(available)})

    def delete(self, item_id: str) -> bool:
        return self._delete(item_id)


class OrderStore(CollectionStore):
    collection = "orders"
    forced = {"status": "pending", "paymentStatus": "pending"}
    filter_type = OrderFilter

    def set_status(self, order_id: str, status: str) -> Optional[dict]:
        return self.update(order_id, {"status": status})


class ReviewStore(CollectionStore):
    collection = "reviews"
    filter_type = ReviewFilter


class MenuItemReviewStore(CollectionStore):
    """Menu-item reviews kept apart from shop reviews, with their own id format.

    The split collection and timestamp ids are inherited behavior; two reviews
    created in the same millisecond share an id.
    """

    collection = "menuItemReviews"
    forced = {"isVerified": True}
    filter_type = MenuItemReviewFilter

    def __init__(self, storage: BaseStorage, **kwargs: Any) -> None:
        kwargs.setdefault("id_factory", menu_item_review_id)
        super().__init__(storage, **kwargs)
