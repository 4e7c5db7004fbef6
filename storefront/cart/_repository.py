"""
Cart repository — async, SKU-keyed access used by the cart service.
"""

from __future__ import annotations

from typing import Protocol

from kungfu import Result, Ok, Error

from storefront._types import CustomerId, ItemId, SkuId
from storefront.errors import NotFoundError, StorefrontError
from storefront.cart._types import CartLine
from storefront.cart._store import CartStore


class CartRepository(Protocol):
    """
    Customer carts addressed by SKU.

    Implementations: MemoryCartRepository, SQLAlchemyCartRepository.
    """

    async def lines(self, customer: CustomerId) -> Result[tuple[CartLine, ...], StorefrontError]:
        ...

    async def add(
        self,
        customer: CustomerId,
        item_id: ItemId,
        sku_id: SkuId,
        quantity: int,
    ) -> Result[CartLine, StorefrontError]:
        ...

    async def set_quantity(
        self,
        customer: CustomerId,
        sku_id: SkuId,
        quantity: int,
    ) -> Result[CartLine, StorefrontError]:
        ...

    async def remove(self, customer: CustomerId, sku_id: SkuId) -> Result[CartLine, StorefrontError]:
        ...


class MemoryCartRepository:
    """CartRepository over a CartStore."""

    def __init__(self, store: CartStore | None = None) -> None:
        self.store = store if store is not None else CartStore()

    async def lines(self, customer: CustomerId) -> Result[tuple[CartLine, ...], StorefrontError]:
        return Ok(self.store.lines(customer))

    async def add(
        self,
        customer: CustomerId,
        item_id: ItemId,
        sku_id: SkuId,
        quantity: int,
    ) -> Result[CartLine, StorefrontError]:
        return self.store.add(customer, item_id, sku_id, quantity)

    async def set_quantity(
        self,
        customer: CustomerId,
        sku_id: SkuId,
        quantity: int,
    ) -> Result[CartLine, StorefrontError]:
        line = self.store.find_sku(customer, sku_id)
        if line is None:
            return Error(NotFoundError("cart line", sku_id))
        return self.store.set_quantity(customer, line.line_id, quantity)

    async def remove(self, customer: CustomerId, sku_id: SkuId) -> Result[CartLine, StorefrontError]:
        line = self.store.find_sku(customer, sku_id)
        if line is None:
            return Error(NotFoundError("cart line", sku_id))
        return self.store.remove(customer, line.line_id)


__all__ = ("CartRepository", "MemoryCartRepository")
