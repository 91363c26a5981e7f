"""Session helpers (issue bearer tokens, read them back from requests)."""
from __future__ import annotations

import time

from fastapi import Request
from jose import JWTError, jwt

from foojra.core.config import get_settings

ALGORITHM = "HS256"
AUTH_SCHEME = "bearer"


def issue_token(user_id: str) -> str:
    """Signed, time-limited token whose only identity claim is the user id."""
    settings = get_settings()
    now = int(time.time())
    claims = {"id": user_id, "iat": now, "exp": now + max(60, settings.jwt_expire_seconds)}
    return jwt.encode(claims, settings.jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str | None) -> str | None:
    """Return the user id from a valid token, or None when missing/expired/forged."""
    if not token:
        return None
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    user_id = claims.get("id")
    return user_id if isinstance(user_id, str) and user_id else None


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != AUTH_SCHEME or not token.strip():
        return None
    return token.strip()


def current_user_id(request: Request) -> str | None:
    """Return the user id carried by the request's bearer token, if any."""
    return decode_token(bearer_token(request))
