"""
Cart — line items held before checkout.

    from storefront import cart as Cart

    store = Cart.CartStore()
    store.add(customer, item_id, sku_id, 2)

    optimistic = Cart.OptimisticCart(store, customer, remote)
    await optimistic.set_quantity(line_id, 3)   # rolled back if remote fails
"""

from storefront.cart._types import CartLine, CartSnapshot, cart_total
from storefront.cart._store import CartStore
from storefront.cart._repository import CartRepository, MemoryCartRepository
from storefront.cart._optimistic import CartService, OptimisticCart
from storefront.cart._sqlalchemy import (
    CartBase,
    CartLineRow,
    create_schema,
    SQLAlchemyCartRepository,
)

__all__ = (
    "CartLine",
    "CartSnapshot",
    "cart_total",
    "CartStore",
    "CartRepository",
    "MemoryCartRepository",
    "CartService",
    "OptimisticCart",
    "CartBase",
    "CartLineRow",
    "create_schema",
    "SQLAlchemyCartRepository",
)
