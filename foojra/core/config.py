"""
Configuration helpers for the Foojra backend.

Every value comes from the environment and is read once per process; routers,
services and the seed script call get_settings() instead of touching os.environ.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    jwt_secret: str
    jwt_expire_seconds: int
    password_hash_time_cost: int
    log_level: str
    frontend_url: str


def parse_duration(value: str | None, default: int) -> int:
    """Turn "30d", "12h", "45m", "90s" or "3600" into seconds."""
    raw = (value or "").strip().lower()
    if not raw:
        return default
    unit = _DURATION_UNITS.get(raw[-1])
    number = raw[:-1] if unit else raw
    try:
        amount = int(number)
    except ValueError:
        return default
    return amount * (unit or 1)


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    data_dir = os.getenv("DATA_DIR")
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        jwt_secret=os.getenv("JWT_SECRET", "dev-secret-change-me"),
        jwt_expire_seconds=parse_duration(os.getenv("JWT_EXPIRE"), 30 * 86400),
        password_hash_time_cost=max(1, _int(os.getenv("PASSWORD_HASH_TIME_COST", "3"), 3)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000").rstrip("/"),
    )
