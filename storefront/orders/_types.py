"""
Order model and listing.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from storefront._types import OrderNumber
from storefront.checkout import LineRequest


class OrderStatus(Enum):
    PENDING = "pending"
    PAYMENT = "payment"
    SHIPPING = "shipping"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class SortField(Enum):
    TOTAL = "total"
    STATUS = "status"
    UPDATED_AT = "updated_at"


@dataclass(frozen=True, slots=True)
class PlacedOrder:
    number: OrderNumber
    status: OrderStatus
    lines: tuple[LineRequest, ...]
    total: Decimal | None = None
    updated_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True, slots=True)
class OrderQuery:
    page: int = 1
    per_page: int = 20
    status: OrderStatus | None = None
    sort_by: SortField = SortField.UPDATED_AT
    descending: bool = True


@dataclass(frozen=True, slots=True)
class OrderPage:
    orders: tuple[PlacedOrder, ...]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page > 0 else 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def _sort_key(sort_by: SortField):
    match sort_by:
        case SortField.TOTAL:
            return lambda order: order.total if order.total is not None else Decimal(0)
        case SortField.STATUS:
            return lambda order: order.status.value
        case SortField.UPDATED_AT:
            return lambda order: order.updated_at


def paginate(orders: Iterable[PlacedOrder], query: OrderQuery) -> OrderPage:
    """Filter by status, sort, then slice out one page (pages start at 1)."""
    matching = [o for o in orders if query.status is None or o.status is query.status]
    matching.sort(key=_sort_key(query.sort_by), reverse=query.descending)

    page = max(1, query.page)
    per_page = max(1, query.per_page)
    start = (page - 1) * per_page
    return OrderPage(
        orders=tuple(matching[start : start + per_page]),
        total=len(matching),
        page=page,
        per_page=per_page,
    )


__all__ = (
    "OrderStatus",
    "SortField",
    "PlacedOrder",
    "OrderQuery",
    "OrderPage",
    "paginate",
)
