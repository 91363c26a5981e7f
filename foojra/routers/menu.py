from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from foojra.domain.filters import MenuItemFilter
from foojra.repositories.mock_repository import MockDataRepository
from foojra.routers.deps import get_repository, owned_shop, require_role

router = APIRouter(prefix="/api/menu-items", tags=["menu"])


def _owned_item(item_id: str, owner: dict, repo: MockDataRepository) -> dict:
    item = repo.menu_items.find_by_id(item_id)
    if not item:
        raise HTTPException(404, "Menu item not found")
    if item.get("shop") != owned_shop(owner, repo)["_id"]:
        raise HTTPException(403, "Not authorized to modify this item")
    return item


@router.get("/shop/{shop_id}")
def shop_menu(shop_id: str, category: str | None = None, repo: MockDataRepository = Depends(get_repository)):
    return repo.menu_items.find_all(MenuItemFilter(shop=shop_id, category=category))


@router.get("/shop/{shop_id}/categories")
def shop_categories(shop_id: str, repo: MockDataRepository = Depends(get_repository)):
    categories = {item.get("category") for item in repo.menu_items.by_shop(shop_id)}
    return sorted(c for c in categories if c)


@router.get("/my-items")
def my_items(
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    return repo.menu_items.by_shop(owned_shop(owner, repo)["_id"])


@router.get("/{item_id}")
def get_item(item_id: str, repo: MockDataRepository = Depends(get_repository)):
    item = repo.menu_items.find_by_id(item_id)
    if not item:
        raise HTTPException(404, "Menu item not found")
    return item


@router.post("", status_code=201)
def create_item(
    payload: dict,
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    if not (payload.get("name") or "").strip():
        raise HTTPException(400, "Menu item name is required")
    shop = owned_shop(owner, repo)
    return repo.menu_items.create({**payload, "shop": shop["_id"]})


@router.put("/{item_id}")
def update_item(
    item_id: str,
    payload: dict,
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    _owned_item(item_id, owner, repo)
    changes = {k: v for k, v in payload.items() if k != "shop"}
    return repo.menu_items.update(item_id, changes)


@router.patch("/{item_id}/availability")
def toggle_availability(
    item_id: str,
    payload: dict | None = None,
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    item = _owned_item(item_id, owner, repo)
    wanted = (payload or {}).get("isAvailable")
    if wanted is None:
        wanted = not item.get("isAvailable", True)
    return repo.menu_items.set_availability(item_id, wanted)


@router.delete("/{item_id}")
def delete_item(
    item_id: str,
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    _owned_item(item_id, owner, repo)
    repo.menu_items.delete(item_id)
    return {"message": "Menu item removed"}
