"""
Cart types.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from decimal import Decimal

from storefront._types import CustomerId, ItemId, LineId, SkuId


@dataclass(frozen=True, slots=True)
class CartLine:
    """A SKU and quantity held for one customer."""

    line_id: LineId
    customer: CustomerId
    item_id: ItemId
    sku_id: SkuId
    quantity: int

    def with_quantity(self, quantity: int) -> CartLine:
        return replace(self, quantity=quantity)


type CartSnapshot = tuple[CartLine, ...]


def cart_total(lines: Iterable[CartLine], prices: Mapping[SkuId, Decimal]) -> Decimal:
    """Sum of unit price × quantity; lines without a known price count as zero."""
    return sum(
        (prices.get(line.sku_id, Decimal(0)) * line.quantity for line in lines),
        Decimal(0),
    )


__all__ = ("CartLine", "CartSnapshot", "cart_total")
