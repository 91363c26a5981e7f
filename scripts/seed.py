#!/usr/bin/env python3
"""
Seed the JSON data directory with demo users, shops, menu items and an order.

Usage:
  python scripts/seed.py [--data-dir ./data] [--reset]
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Make the foojra package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from foojra.core.config import get_settings  # noqa: E402
from foojra.core.logging import configure_logging  # noqa: E402
from foojra.domain.filters import MenuItemFilter, OrderFilter, ShopFilter  # noqa: E402
from foojra.repositories.json_storage import COLLECTION_FILES, JsonStorage  # noqa: E402
from foojra.repositories.mock_repository import MockDataRepository  # noqa: E402
from foojra.services.auth_service import AccountExistsError, AuthService  # noqa: E402

logger = logging.getLogger("foojra.seed")

USERS = [
    {"name": "Admin User", "email": "admin@foojra.com", "password": "admin123", "role": "admin",
     "phone": "03001234567", "address": "Admin Street, Central Area, Gojra, 35250"},
    {"name": "Shop Owner 1", "email": "owner1@foojra.com", "password": "owner123", "role": "shopOwner",
     "phone": "03001234568", "address": "Shop Street 1, Market Area, Gojra, 35250"},
    {"name": "Shop Owner 2", "email": "owner2@foojra.com", "password": "owner123", "role": "shopOwner",
     "phone": "03001234569", "address": "Shop Street 2, Commercial Area, Gojra, 35250"},
    {"name": "Customer 1", "email": "customer1@foojra.com", "password": "customer123", "role": "customer",
     "phone": "03001234570", "address": "Customer Street 1, Residential Area, Gojra, 35250"},
    {"name": "Customer 2", "email": "customer2@foojra.com", "password": "customer123", "role": "customer",
     "phone": "03001234571", "address": "Customer Street 2, Housing Society, Gojra, 35250"},
]

SHOPS = {
    "owner1@foojra.com": {
        "name": "Delicious Bites",
        "description": "Authentic Pakistani cuisine with a modern twist",
        "cuisine": "Pakistani",
        "category": "Restaurant",
        "phone": "+923001111111",
        "menu": [
            {"name": "Chicken Biryani", "category": "Main Course", "price": 450},
            {"name": "Seekh Kebab", "category": "Appetizer", "price": 300},
            {"name": "Kheer", "category": "Dessert", "price": 150},
        ],
    },
    "owner2@foojra.com": {
        "name": "Pizza Corner",
        "description": "Fresh pizzas baked to order",
        "cuisine": "Italian",
        "category": "Fast Food",
        "phone": "+923002222222",
        "menu": [
            {"name": "Margherita", "category": "Main Course", "price": 900},
            {"name": "Garlic Bread", "category": "Appetizer", "price": 250},
        ],
    },
}


def reset(storage: JsonStorage) -> None:
    for name in COLLECTION_FILES:
        storage.save(name, [])


def seed(repo: MockDataRepository) -> None:
    auth = AuthService(users=repo.users)
    users = {}
    for data in USERS:
        try:
            users[data["email"]] = auth.create_user(data)
        except AccountExistsError:
            logger.info("user %s already present, skipping", data["email"])
            users[data["email"]] = repo.users.find_one(lambda r, e=data["email"]: r.get("email") == e)

    first_item = None
    for owner_email, meta in SHOPS.items():
        owner = users[owner_email]
        existing = repo.shops.find_all(ShopFilter(owner=owner["_id"]))
        if existing:
            logger.info("shop for %s already present, skipping", owner_email)
            shop = existing[0]
        else:
            shop_data = {k: v for k, v in meta.items() if k != "menu"}
            shop = repo.shops.create({**shop_data, "owner": owner["_id"]})
            repo.shops.set_approval(shop["_id"], True)
        present = {i.get("name") for i in repo.menu_items.find_all(MenuItemFilter(shop=shop["_id"]))}
        for item in meta["menu"]:
            if item["name"] in present:
                continue
            repo.menu_items.create({**item, "shop": shop["_id"]})
        first_item = first_item or next(iter(repo.menu_items.by_shop(shop["_id"])), None)

    customer = users["customer1@foojra.com"]
    if first_item and not repo.orders.find_all(OrderFilter(customer=customer["_id"])):
        repo.orders.create({
            "customer": customer["_id"],
            "shop": first_item["shop"],
            "orderItems": [{"menuItem": first_item["_id"], "name": first_item["name"],
                            "price": first_item["price"], "quantity": 2}],
            "totalAmount": first_item["price"] * 2,
            "paymentMethod": "Cash on Delivery",
        })


def main() -> None:
    ap = argparse.ArgumentParser(description="Fill the data directory with demo records")
    ap.add_argument("--data-dir", help="Directory holding the JSON files (default: DATA_DIR)")
    ap.add_argument("--reset", action="store_true", help="Empty every collection before seeding")
    args = ap.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    storage = JsonStorage(args.data_dir or settings.data_dir)
    if args.reset:
        reset(storage)
    seed(MockDataRepository(storage))
    print(f"OK: demo data written to {storage.data_dir}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI use
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
