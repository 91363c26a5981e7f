from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from foojra.domain.filters import OrderFilter
from foojra.repositories.mock_repository import MockDataRepository
from foojra.routers.deps import current_user, get_repository, owned_shop, require_role

router = APIRouter(prefix="/api/orders", tags=["orders"])

ORDER_STATUSES = (
    "pending",
    "confirmed",
    "preparing",
    "ready",
    "out_for_delivery",
    "delivered",
    "cancelled",
    "refunded",
)


def _order_total(items: list) -> float:
    total = 0.0
    for line in items:
        try:
            total += float(line.get("price", 0)) * int(line.get("quantity", 1))
        except (AttributeError, TypeError, ValueError):
            raise HTTPException(400, "Invalid order item")
    return round(total, 2)


@router.post("", status_code=201)
def create_order(
    payload: dict,
    customer: dict = Depends(require_role("customer")),
    repo: MockDataRepository = Depends(get_repository),
):
    items = payload.get("orderItems") or []
    if not isinstance(items, list) or not items:
        raise HTTPException(400, "No order items")
    shop = repo.shops.find_by_id(payload.get("shop") or "")
    if not shop or not shop.get("isApproved"):
        raise HTTPException(404, "Shop not found")
    data = {**payload, "customer": customer["_id"], "shop": shop["_id"]}
    data.setdefault("totalAmount", _order_total(items))
    return repo.orders.create(data)


@router.get("/myorders")
def my_orders(
    user: dict = Depends(current_user),
    repo: MockDataRepository = Depends(get_repository),
):
    return repo.orders.find_all(OrderFilter(customer=user["_id"]))


@router.get("/shop")
def shop_orders(
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    return repo.orders.find_all(OrderFilter(shop=owned_shop(owner, repo)["_id"]))


@router.get("/{order_id}")
def get_order(
    order_id: str,
    user: dict = Depends(current_user),
    repo: MockDataRepository = Depends(get_repository),
):
    order = repo.orders.find_by_id(order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    if user.get("role") == "admin" or order.get("customer") == user["_id"]:
        return order
    if user.get("role") == "shopOwner" and order.get("shop") == owned_shop(user, repo)["_id"]:
        return order
    raise HTTPException(403, "Not authorized to view this order")


@router.put("/{order_id}/status")
def update_order_status(
    order_id: str,
    payload: dict,
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    status = payload.get("status")
    if status not in ORDER_STATUSES:
        raise HTTPException(400, "Invalid order status")
    order = repo.orders.find_by_id(order_id)
    if not order or order.get("shop") != owned_shop(owner, repo)["_id"]:
        raise HTTPException(404, "Order not found")
    return repo.orders.set_status(order_id, status)
