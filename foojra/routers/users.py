from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from foojra.domain.filters import UserFilter
from foojra.repositories.collections import DuplicateRecordError
from foojra.repositories.mock_repository import MockDataRepository
from foojra.routers.deps import current_user, get_auth_service, get_repository, require_role
from foojra.services.auth_service import (
    AccountExistsError,
    AuthService,
    InvalidCredentialsError,
    RegistrationError,
)

router = APIRouter(prefix="/api/users", tags=["users"])

PROFILE_FIELDS = ("name", "email", "phone", "address")


@router.post("", status_code=201)
def register_user(payload: dict, auth: AuthService = Depends(get_auth_service)):
    try:
        user = auth.create_user(payload)
    except AccountExistsError:
        raise HTTPException(409, "User already exists")
    except RegistrationError as exc:
        raise HTTPException(400, exc.message)
    return {**user, "token": auth.issue_token(user["_id"])}


@router.post("/login")
def login_user(payload: dict, auth: AuthService = Depends(get_auth_service)):
    try:
        result = auth.login(payload.get("email", ""), payload.get("password", ""))
    except InvalidCredentialsError:
        raise HTTPException(401, "Invalid email or password")
    return {**result.user, "token": result.token}


@router.get("/profile")
def get_profile(user: dict = Depends(current_user)):
    return user


@router.put("/profile")
def update_profile(
    payload: dict,
    user: dict = Depends(current_user),
    auth: AuthService = Depends(get_auth_service),
):
    changes = {k: payload[k] for k in PROFILE_FIELDS if payload.get(k)}
    try:
        updated = auth.users.update(user["_id"], changes)
    except DuplicateRecordError:
        raise HTTPException(409, "Email already in use")
    if payload.get("password"):
        updated = auth.change_password(user["_id"], payload["password"])
    if not updated:
        raise HTTPException(404, "User not found")
    return {**updated, "token": auth.issue_token(updated["_id"])}


@router.get("/admin/all")
def list_users(
    role: str | None = None,
    _admin: dict = Depends(require_role("admin")),
    repo: MockDataRepository = Depends(get_repository),
):
    return repo.users.find_all(UserFilter(role=role))
