"""
HTTP request and response bodies for the cart service.
"""

from __future__ import annotations

from typing import Any

from kungfu import Result
from pydantic import BaseModel

from storefront.cart import CartLine
from storefront.service._ops import AddToCart, GetCart, RemoveFromCart, UpdateCartQuantity
from storefront.wire import Envelope


class CartLineBody(BaseModel):
    line_id: str
    item_id: str
    sku_id: str
    quantity: int

    @classmethod
    def of(cls, line: CartLine) -> CartLineBody:
        return cls(line_id=line.line_id, item_id=line.item_id, sku_id=line.sku_id, quantity=line.quantity)


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class GetCartIn(BaseModel):
    def to_domain(self) -> GetCart:
        return GetCart()


class AddToCartIn(BaseModel):
    item_id: str
    sku_id: str
    quantity: int = 1

    def to_domain(self) -> AddToCart:
        return AddToCart(item_id=self.item_id, sku_id=self.sku_id, quantity=self.quantity)


class UpdateQuantityIn(BaseModel):
    sku_id: str
    quantity: int

    def to_domain(self) -> UpdateCartQuantity:
        return UpdateCartQuantity(sku_id=self.sku_id, quantity=self.quantity)


class RemoveIn(BaseModel):
    sku_id: str

    def to_domain(self) -> RemoveFromCart:
        return RemoveFromCart(sku_id=self.sku_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class CartOut(Envelope[list[CartLineBody]]):
    @classmethod
    def from_domain(cls, dom: Result[tuple[CartLine, ...], Any]) -> CartOut:
        return cls.of(dom, lambda lines: [CartLineBody.of(line) for line in lines])


class LineOut(Envelope[CartLineBody]):
    @classmethod
    def from_domain(cls, dom: Result[CartLine, Any]) -> LineOut:
        return cls.of(dom, CartLineBody.of)


__all__ = (
    "CartLineBody",
    "GetCartIn",
    "AddToCartIn",
    "UpdateQuantityIn",
    "RemoveIn",
    "CartOut",
    "LineOut",
)
