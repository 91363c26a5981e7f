from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from foojra.domain.filters import ShopFilter
from foojra.repositories.mock_repository import MockDataRepository
from foojra.routers.deps import get_repository, owned_shop, require_role

router = APIRouter(prefix="/api/shops", tags=["shops"])

# approval and rating are written by admins and reviews, never by the owner
OWNER_LOCKED_FIELDS = {"owner", "isApproved", "rating", "totalReviews"}


def _owner_fields(payload: dict) -> dict:
    return {k: v for k, v in payload.items() if k not in OWNER_LOCKED_FIELDS}


@router.get("/approved")
def approved_shops(repo: MockDataRepository = Depends(get_repository)):
    return repo.shops.find_all(ShopFilter(is_approved=True))


@router.post("/register", status_code=201)
def register_shop(
    payload: dict,
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    if not (payload.get("name") or "").strip():
        raise HTTPException(400, "Shop name is required")
    if repo.shops.find_all(ShopFilter(owner=owner["_id"])):
        raise HTTPException(400, "You already have a registered shop")
    return repo.shops.create({**_owner_fields(payload), "owner": owner["_id"]})


@router.get("/my-shop")
def my_shop(
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    return owned_shop(owner, repo)


@router.put("/my-shop")
def update_my_shop(
    payload: dict,
    owner: dict = Depends(require_role("shopOwner")),
    repo: MockDataRepository = Depends(get_repository),
):
    shop = owned_shop(owner, repo)
    return repo.shops.update(shop["_id"], _owner_fields(payload))


@router.get("/admin/pending")
def pending_shops(
    _admin: dict = Depends(require_role("admin")),
    repo: MockDataRepository = Depends(get_repository),
):
    return repo.shops.find_all(ShopFilter(is_approved=False))


@router.put("/admin/{shop_id}/approve")
def approve_shop(
    shop_id: str,
    _admin: dict = Depends(require_role("admin")),
    repo: MockDataRepository = Depends(get_repository),
):
    shop = repo.shops.set_approval(shop_id, True)
    if not shop:
        raise HTTPException(404, "Shop not found")
    return shop


@router.put("/admin/{shop_id}/reject")
def reject_shop(
    shop_id: str,
    _admin: dict = Depends(require_role("admin")),
    repo: MockDataRepository = Depends(get_repository),
):
    shop = repo.shops.set_approval(shop_id, False)
    if not shop:
        raise HTTPException(404, "Shop not found")
    return shop


@router.get("/{shop_id}")
def get_shop(shop_id: str, repo: MockDataRepository = Depends(get_repository)):
    shop = repo.shops.find_by_id(shop_id)
    if not shop:
        raise HTTPException(404, "Shop not found")
    return shop
