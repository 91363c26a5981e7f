"""
Authentication and identity related use cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import logging

from foojra.core.security import hash_password, verify_password
from foojra.repositories.collections import DuplicateRecordError, UserStore
from foojra.services.session_service import issue_token

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "customer"
ROLES = ("customer", "shopOwner", "admin")


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class RegistrationError(AuthError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


class TokenInvalidError(AuthError):
    pass


@dataclass
class LoginSuccess:
    user: dict
    token: str


@dataclass
class AuthService:
    """Handles signup, password checks, login and token issuance."""

    users: UserStore

    def create_user(self, user_data: Mapping[str, Any]) -> dict:
        email = (user_data.get("email") or "").strip()
        password = user_data.get("password") or ""
        if not email or not password:
            raise RegistrationError("email and password are required")
        if self.users.find_by_email(email):
            raise AccountExistsError(email)
        role = user_data.get("role") or DEFAULT_ROLE
        if role not in ROLES:
            raise RegistrationError(f"unknown role {role!r}")
        data = dict(user_data)
        data.update(email=email, role=role, password=hash_password(password))
        try:
            user = self.users.create(data)
        except DuplicateRecordError as exc:
            # lost the race against a concurrent signup
            raise AccountExistsError(email) from exc
        logger.info("user created id=%s role=%s", user["_id"], role)
        return user

    def validate_password(self, entered: str, stored_hash: Optional[str]) -> bool:
        return verify_password(entered, stored_hash)

    def issue_token(self, user_id: str) -> str:
        return issue_token(user_id)

    def login(self, email: str, password: str) -> LoginSuccess:
        record = self.users.find_by_email((email or "").strip())
        if not record or not self.validate_password(password, record.get("password")):
            raise InvalidCredentialsError("invalid email or password")
        user = {k: v for k, v in record.items() if k != "password"}
        return LoginSuccess(user=user, token=self.issue_token(user["_id"]))

    def resolve_user(self, user_id: Optional[str]) -> dict:
        """Redacted user for a token's id; TokenInvalidError when it no longer exists."""
        user = self.users.find_by_id(user_id) if user_id else None
        if not user:
            raise TokenInvalidError("user not found")
        return user

    def change_password(self, user_id: str, new_password: str) -> Optional[dict]:
        if not new_password:
            raise RegistrationError("password is required")
        return self.users.update(user_id, {"password": hash_password(new_password)})
