"""Record identifier generation."""
from __future__ import annotations

import secrets
import string
import time

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_SUFFIX_LENGTH = 9
MENU_ITEM_REVIEW_PREFIX = "menuItemReview"


def _millis() -> int:
    return int(time.time() * 1000)


def next_id() -> str:
    """Epoch milliseconds followed by random base-36 characters.

    Collisions are not excluded, only made very unlikely.
    """
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{_millis()}{suffix}"


def menu_item_review_id() -> str:
    """Legacy id for menu-item reviews; collides within the same millisecond."""
    return f"{MENU_ITEM_REVIEW_PREFIX}{_millis()}"
