"""Per-entity filters for find_all and the predicate builder behind them."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Mapping, Optional

Predicate = Callable[[Mapping[str, Any]], bool]


class RecordFilter:
    """Base for filter dataclasses.

    Each field declares the record key it constrains in its metadata. A None
    value (or an empty string) leaves that key unconstrained.
    """

    def constraints(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is None or value == "":
                continue
            out[f.metadata.get("key", f.name)] = value
        return out


def _key(name: str):
    return field(default=None, metadata={"key": name})


@dataclass(frozen=True)
class UserFilter(RecordFilter):
    role: Optional[str] = _key("role")


@dataclass(frozen=True)
class ShopFilter(RecordFilter):
    is_approved: Optional[bool] = _key("isApproved")
    owner: Optional[str] = _key("owner")


@dataclass(frozen=True)
class MenuItemFilter(RecordFilter):
    shop: Optional[str] = _key("shop")
    category: Optional[str] = _key("category")


@dataclass(frozen=True)
class OrderFilter(RecordFilter):
    customer: Optional[str] = _key("customer")
    shop: Optional[str] = _key("shop")


@dataclass(frozen=True)
class ReviewFilter(RecordFilter):
    shop: Optional[str] = _key("shop")


@dataclass(frozen=True)
class MenuItemReviewFilter(RecordFilter):
    menu_item: Optional[str] = _key("menuItem")
    user: Optional[str] = _key("user")


def build_predicate(constraints: Mapping[str, Any]) -> Predicate:
    """Conjunction of field-equality checks; no constraints matches everything."""
    items = tuple(constraints.items())

    def _matches(record: Mapping[str, Any]) -> bool:
        # strict: True must not match 1, "1" must not match 1
        return all(key in record and record[key] == value and type(record[key]) is type(value)
                   for key, value in items)

    return _matches
