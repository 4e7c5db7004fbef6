"""
Cart service operations and their handlers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kungfu import Result, Error

from storefront import ops as O
from storefront._types import CustomerId, ItemId, SkuId
from storefront.cart import CartLine, CartRepository
from storefront.errors import StorefrontError, ValidationError
from storefront.wire import Principal

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Operations
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class GetCart(O.Returning[tuple[CartLine, ...], StorefrontError]):
    pass


@dataclass(frozen=True, slots=True)
class AddToCart(O.Returning[CartLine, StorefrontError]):
    item_id: ItemId
    sku_id: SkuId
    quantity: int


@dataclass(frozen=True, slots=True)
class UpdateCartQuantity(O.Returning[CartLine, StorefrontError]):
    sku_id: SkuId
    quantity: int


@dataclass(frozen=True, slots=True)
class RemoveFromCart(O.Returning[CartLine, StorefrontError]):
    sku_id: SkuId


# ═══════════════════════════════════════════════════════════════════════════════
# Handlers
# ═══════════════════════════════════════════════════════════════════════════════


def _anonymous() -> Error[ValidationError]:
    return Error(ValidationError("customer credentials required"))


async def get_cart(
    req: GetCart, carts: CartRepository, who: Principal
) -> Result[tuple[CartLine, ...], StorefrontError]:
    if who.customer is None:
        return _anonymous()
    return await carts.lines(who.customer)


async def add_to_cart(req: AddToCart, carts: CartRepository, who: Principal) -> Result[CartLine, StorefrontError]:
    if who.customer is None:
        return _anonymous()
    result = await carts.add(who.customer, req.item_id, req.sku_id, req.quantity)
    _log("add", who.customer, req.sku_id, result)
    return result


async def update_cart_quantity(
    req: UpdateCartQuantity, carts: CartRepository, who: Principal
) -> Result[CartLine, StorefrontError]:
    if who.customer is None:
        return _anonymous()
    result = await carts.set_quantity(who.customer, req.sku_id, req.quantity)
    _log("update", who.customer, req.sku_id, result)
    return result


async def remove_from_cart(
    req: RemoveFromCart, carts: CartRepository, who: Principal
) -> Result[CartLine, StorefrontError]:
    if who.customer is None:
        return _anonymous()
    result = await carts.remove(who.customer, req.sku_id)
    _log("remove", who.customer, req.sku_id, result)
    return result


def _log(action: str, customer: CustomerId, sku_id: SkuId, result: Result[CartLine, StorefrontError]) -> None:
    if result:
        logger.info("cart %s: %s sku %s", customer, action, sku_id)


def cart_ops() -> O.OpsBuilder:
    return (
        O.ops()
        .on(GetCart, get_cart)
        .on(AddToCart, add_to_cart)
        .on(UpdateCartQuantity, update_cart_quantity)
        .on(RemoveFromCart, remove_from_cart)
    )


__all__ = (
    "GetCart",
    "AddToCart",
    "UpdateCartQuantity",
    "RemoveFromCart",
    "get_cart",
    "add_to_cart",
    "update_cart_quantity",
    "remove_from_cart",
    "cart_ops",
)
