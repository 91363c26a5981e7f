"""Request-scoped helpers shared by the routers (repository lookup, auth guards)."""
from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from foojra.domain.filters import ShopFilter
from foojra.repositories.mock_repository import MockDataRepository
from foojra.services.auth_service import AuthService, TokenInvalidError
from foojra.services.session_service import bearer_token, decode_token


def get_repository(request: Request) -> MockDataRepository:
    repo = getattr(getattr(request.app, "state", None), "repository", None)
    if not repo:
        raise RuntimeError("Repository not configured")
    return repo


def get_auth_service(repo: MockDataRepository = Depends(get_repository)) -> AuthService:
    return AuthService(users=repo.users)


def current_user(request: Request, auth: AuthService = Depends(get_auth_service)) -> dict:
    token = bearer_token(request)
    if not token:
        raise HTTPException(401, "Not authorized, no token")
    user_id = decode_token(token)
    if not user_id:
        raise HTTPException(401, "Not authorized, token failed")
    try:
        return auth.resolve_user(user_id)
    except TokenInvalidError:
        raise HTTPException(401, "User not found")


def require_role(role: str):
    def _guard(user: dict = Depends(current_user)) -> dict:
        if user.get("role") != role:
            raise HTTPException(403, f"Not authorized as {role}")
        return user

    return _guard


def owned_shop(user: dict, repo: MockDataRepository) -> dict:
    """The caller's shop; 404 when the owner has not registered one."""
    shops = repo.shops.find_all(ShopFilter(owner=user["_id"]))
    if not shops:
        raise HTTPException(404, "Shop not found")
    return shops[0]
