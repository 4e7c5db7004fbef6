"""
Service — the cart contract over HTTP.

    GET    /cart                               → lines
    POST   /cart   {item_id, sku_id, quantity} → line
    PATCH  /cart   {sku_id, quantity}          → line
    DELETE /cart   {sku_id}                    → removed line

Every route needs X-API-Key and Authorization: Bearer <token>; bodies come
back as {success, message, data}.
"""

from storefront.service._ops import (
    GetCart,
    AddToCart,
    UpdateCartQuantity,
    RemoveFromCart,
    cart_ops,
)
from storefront.service._models import (
    CartLineBody,
    GetCartIn,
    AddToCartIn,
    UpdateQuantityIn,
    RemoveIn,
    CartOut,
    LineOut,
)
from storefront.service._app import cart_endpoint, create_app, app_from_settings

__all__ = (
    # Ops
    "GetCart",
    "AddToCart",
    "UpdateCartQuantity",
    "RemoveFromCart",
    "cart_ops",
    # Bodies
    "CartLineBody",
    "GetCartIn",
    "AddToCartIn",
    "UpdateQuantityIn",
    "RemoveIn",
    "CartOut",
    "LineOut",
    # App
    "cart_endpoint",
    "create_app",
    "app_from_settings",
)
