from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from foojra.domain.filters import MenuItemReviewFilter, ReviewFilter
from foojra.repositories.mock_repository import MockDataRepository
from foojra.routers.deps import current_user, get_repository

router = APIRouter(prefix="/api/reviews", tags=["reviews"])
item_router = APIRouter(prefix="/api/menu-item-reviews", tags=["reviews"])


def _rating(payload: dict) -> int:
    try:
        rating = int(payload.get("rating"))
    except (TypeError, ValueError):
        raise HTTPException(400, "Rating must be a number between 1 and 5")
    if not 1 <= rating <= 5:
        raise HTTPException(400, "Rating must be a number between 1 and 5")
    return rating


def _refresh_shop_rating(repo: MockDataRepository, shop_id: str) -> None:
    reviews = repo.reviews.find_all(ReviewFilter(shop=shop_id))
    ratings = [r["rating"] for r in reviews if isinstance(r.get("rating"), int)]
    average = round(sum(ratings) / len(ratings), 1) if ratings else 0
    repo.shops.update(shop_id, {"rating": average, "totalReviews": len(reviews)})


@router.get("/shop/{shop_id}")
def shop_reviews(shop_id: str, repo: MockDataRepository = Depends(get_repository)):
    return repo.reviews.find_all(ReviewFilter(shop=shop_id))


@router.post("", status_code=201)
def create_review(
    payload: dict,
    user: dict = Depends(current_user),
    repo: MockDataRepository = Depends(get_repository),
):
    shop_id = payload.get("shop") or ""
    if not repo.shops.find_by_id(shop_id):
        raise HTTPException(404, "Shop not found")
    review = repo.reviews.create({**payload, "rating": _rating(payload), "user": user["_id"]})
    _refresh_shop_rating(repo, shop_id)
    return review


@item_router.get("/item/{menu_item_id}")
def menu_item_reviews(menu_item_id: str, repo: MockDataRepository = Depends(get_repository)):
    return repo.menu_item_reviews.find_all(MenuItemReviewFilter(menu_item=menu_item_id))


@item_router.post("", status_code=201)
def create_menu_item_review(
    payload: dict,
    user: dict = Depends(current_user),
    repo: MockDataRepository = Depends(get_repository),
):
    item = repo.menu_items.find_by_id(payload.get("menuItem") or "")
    if not item:
        raise HTTPException(404, "Menu item not found")
    data = {**payload, "rating": _rating(payload), "user": user["_id"], "shop": item.get("shop")}
    return repo.menu_item_reviews.create(data)
