from __future__ import annotations

import threading

import pytest

from foojra.domain.filters import (
    MenuItemFilter,
    OrderFilter,
    ReviewFilter,
    ShopFilter,
    UserFilter,
    build_predicate,
)
from foojra.domain.ids import next_id
from foojra.repositories.collections import DuplicateRecordError
from foojra.repositories.json_storage import JsonStorage, MemoryStorage
from foojra.repositories.mock_repository import MockDataRepository


def _ticking_clock():
    ticks = iter(f"2024-01-01T00:00:{n:02d}.000Z" for n in range(60))
    return lambda: next(ticks)


def test_ids_are_non_empty_and_distinct(repo):
    ids = [repo.orders.create({"customer": "u1", "shop": "s1"})["_id"] for _ in range(50)]
    ids += [next_id() for _ in range(200)]
    assert all(ids)
    assert len(set(ids)) == len(ids)


def test_create_shop_applies_defaults():
    storage = MemoryStorage()
    shops = MockDataRepository(storage).shops

    shop = shops.create({"owner": "u1", "name": "Cafe"})

    assert shop["_id"]
    assert shop["isApproved"] is False
    assert shop["rating"] == 0
    assert shop["totalReviews"] == 0
    assert shop["createdAt"] == shop["updatedAt"]
    assert storage.load("shops") == [shop]


def test_create_forces_defaults_and_ignores_protected_fields(repo):
    shop = repo.shops.create({"owner": "u1", "isApproved": True, "rating": 5, "_id": "mine"})
    assert shop["isApproved"] is False
    assert shop["rating"] == 0
    assert shop["_id"] != "mine"

    item = repo.menu_items.create({"shop": "s1", "isAvailable": False})
    assert item["isAvailable"] is True

    order = repo.orders.create({"customer": "u1", "shop": "s1", "status": "delivered"})
    assert order["status"] == "pending"
    assert order["paymentStatus"] == "pending"


def test_find_all_is_conjunctive(repo):
    repo.menu_items.create({"shop": "s1", "category": "main_course", "name": "Biryani"})
    repo.menu_items.create({"shop": "s1", "category": "desserts", "name": "Kheer"})
    repo.menu_items.create({"shop": "s2", "category": "desserts", "name": "Gulab Jamun"})

    assert [i["name"] for i in repo.menu_items.find_all(MenuItemFilter(shop="s1", category="desserts"))] == ["Kheer"]
    assert len(repo.menu_items.find_all(MenuItemFilter(category="desserts"))) == 2
    assert repo.menu_items.find_all(MenuItemFilter(shop="s3")) == []


def test_menu_item_category_mismatch_returns_empty(repo):
    repo.menu_items.create({"shop": "s1", "category": "main_course"})
    assert repo.menu_items.find_all(MenuItemFilter(shop="s1", category="desserts")) == []


def test_find_all_without_filter_is_idempotent(repo):
    for n in range(3):
        repo.orders.create({"customer": f"u{n}", "shop": "s1"})
    first = repo.orders.find_all()
    repo.orders.find_all(OrderFilter(customer="u1"))
    assert repo.orders.find_all() == first
    assert len(first) == 3


def test_shop_filter_on_approval_and_owner(repo):
    a = repo.shops.create({"owner": "u1"})
    repo.shops.create({"owner": "u2"})
    repo.shops.set_approval(a["_id"], True)

    approved = repo.shops.find_all(ShopFilter(is_approved=True))
    assert [s["_id"] for s in approved] == [a["_id"]]
    assert len(repo.shops.find_all(ShopFilter(is_approved=False))) == 1
    assert repo.shops.find_all(ShopFilter(is_approved=True, owner="u2")) == []


def test_find_all_rejects_filter_of_another_entity(repo):
    with pytest.raises(TypeError):
        repo.shops.find_all(OrderFilter(shop="s1"))


def test_predicate_is_strict_about_types():
    predicate = build_predicate(ShopFilter(is_approved=True).constraints())
    assert predicate({"isApproved": True})
    assert not predicate({"isApproved": 1})
    assert not predicate({})
    assert build_predicate({})({"anything": 1})


def test_empty_string_filter_means_no_constraint(repo):
    repo.reviews.create({"shop": "s1"})
    assert len(repo.reviews.find_all(ReviewFilter(shop=""))) == 1


def test_update_with_empty_changes_only_touches_updated_at():
    storage = MemoryStorage()
    repo = MockDataRepository(storage)
    repo.shops.clock = _ticking_clock()
    shop = repo.shops.create({"owner": "u1", "name": "Cafe"})

    updated = repo.shops.update(shop["_id"], {})

    assert updated["updatedAt"] != shop["updatedAt"]
    assert {k: v for k, v in updated.items() if k != "updatedAt"} == {
        k: v for k, v in shop.items() if k != "updatedAt"
    }


def test_update_merges_shallowly_and_protects_identity(repo):
    item = repo.menu_items.create({"shop": "s1", "name": "Tea", "price": 50, "tags": ["hot"]})
    updated = repo.menu_items.update(item["_id"], {"price": 60, "tags": [], "_id": "x", "createdAt": "then"})

    assert updated["price"] == 60
    assert updated["tags"] == []
    assert updated["name"] == "Tea"
    assert updated["_id"] == item["_id"]
    assert updated["createdAt"] == item["createdAt"]
    assert repo.menu_items.find_by_id(item["_id"]) == updated


@pytest.mark.parametrize("store", ["users", "shops", "menu_items", "orders", "reviews", "menu_item_reviews"])
def test_update_missing_id_returns_none_without_writing(store):
    storage = MemoryStorage({"shops": [{"_id": "s1"}]})
    repo = MockDataRepository(storage)

    assert getattr(repo, store).update("missing-id", {"name": "x"}) is None
    assert storage.writes == 0
    assert storage.load("shops") == [{"_id": "s1"}]


def test_delete_menu_item(repo):
    keep = repo.menu_items.create({"shop": "s1", "name": "Tea"})
    gone = repo.menu_items.create({"shop": "s1", "name": "Coffee"})

    assert repo.menu_items.delete(gone["_id"]) is True
    assert repo.menu_items.find_by_id(gone["_id"]) is None
    assert repo.menu_items.find_all() == [keep]


def test_delete_nonexistent_menu_item_still_reports_success(repo, memory_storage):
    item = repo.menu_items.create({"shop": "s1"})
    before = memory_storage.load("menuItems")

    assert repo.menu_items.delete("nonexistent") is True
    assert memory_storage.load("menuItems") == before == [item]


def test_only_menu_items_expose_delete(repo):
    assert not hasattr(repo.shops, "delete")
    assert not hasattr(repo.orders, "delete")


def test_users_are_redacted_except_lookup_by_email(repo):
    created = repo.users.create({"email": "a@example.com", "password": "hash", "role": "customer"})
    assert "password" not in created
    assert "password" not in repo.users.find_by_id(created["_id"])
    assert all("password" not in u for u in repo.users.find_all(UserFilter(role="customer")))
    assert "password" not in repo.users.update(created["_id"], {"name": "A"})
    assert repo.users.find_by_email("a@example.com")["password"] == "hash"


def test_user_store_rejects_duplicate_email(repo, memory_storage):
    repo.users.create({"email": "a@example.com", "password": "hash"})
    with pytest.raises(DuplicateRecordError):
        repo.users.create({"email": "a@example.com", "password": "other"})
    assert len(memory_storage.load("users")) == 1


def test_user_update_rejects_email_of_another_user(repo, memory_storage):
    repo.users.create({"email": "a@example.com", "password": "hash"})
    b = repo.users.create({"email": "b@example.com", "password": "hash"})
    writes = memory_storage.writes

    with pytest.raises(DuplicateRecordError):
        repo.users.update(b["_id"], {"email": "a@example.com"})

    assert memory_storage.writes == writes
    assert [u["email"] for u in memory_storage.load("users")] == ["a@example.com", "b@example.com"]
    # keeping one's own address is not a conflict
    assert repo.users.update(b["_id"], {"email": "b@example.com", "name": "B"})["name"] == "B"


def test_concurrent_creates_on_json_storage_keep_every_order(json_storage):
    repo = MockDataRepository(json_storage)
    errors = []

    def place(n):
        try:
            repo.orders.create({"customer": f"u{n}", "shop": "s1"})
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=place, args=(n,)) for n in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    orders = json_storage.load("orders")
    assert len(orders) == 20
    assert {o["customer"] for o in orders} == {f"u{n}" for n in range(20)}
    assert len({o["_id"] for o in orders}) == 20


def test_menu_item_reviews_use_their_own_collection_and_ids(repo, memory_storage):
    review = repo.menu_item_reviews.create({"menuItem": "m1", "rating": 4})

    assert review["_id"].startswith("menuItemReview")
    assert review["_id"][len("menuItemReview"):].isdigit()
    assert review["isVerified"] is True
    assert memory_storage.load("menuItemReviews") == [review]
    assert memory_storage.load("reviews") == []


def test_failed_save_still_returns_record(caplog):
    class BrokenStorage(MemoryStorage):
        def save(self, collection, records):
            return False

    repo = MockDataRepository(BrokenStorage())
    shop = repo.shops.create({"owner": "u1"})
    assert shop["_id"]
    assert repo.shops.find_all() == []
    assert "save failed" in caplog.text


def test_stores_persist_to_json_files(json_storage):
    repo = MockDataRepository(json_storage)
    shop = repo.shops.create({"owner": "u1", "name": "Cafe"})

    reopened = MockDataRepository(JsonStorage(json_storage.data_dir))
    assert reopened.shops.find_by_id(shop["_id"]) == shop
    assert json_storage.path_for("shops").exists()
