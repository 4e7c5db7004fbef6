"""
FastAPI application serving the cart contract.
"""

from __future__ import annotations

from collections.abc import Mapping

import fastapi

from storefront import wire as W
from storefront._types import CustomerId
from storefront.cart import CartRepository
from storefront.config import Settings
from storefront.service._models import AddToCartIn, CartOut, GetCartIn, LineOut, RemoveIn, UpdateQuantityIn
from storefront.service._ops import cart_ops


def cart_endpoint(repository: CartRepository) -> W.Endpoint:
    runner = cart_ops().compile().inject(CartRepository, repository)
    return (
        W.endpoint(runner)
        .expose(W.customer_route("GET", "/cart"), W.RequestResponseCodec(GetCartIn, CartOut))
        .expose(W.customer_route("POST", "/cart"), W.RequestResponseCodec(AddToCartIn, LineOut))
        .expose(W.customer_route("PATCH", "/cart"), W.RequestResponseCodec(UpdateQuantityIn, LineOut))
        .expose(W.customer_route("DELETE", "/cart"), W.RequestResponseCodec(RemoveIn, LineOut))
    )


def create_app(repository: CartRepository, guard: W.Guard) -> fastapi.FastAPI:
    """
    Example:
        app = create_app(MemoryCartRepository(), W.StaticGuard("secret", {"tok-1": "c1"}))
        # uvicorn.run(app)
    """
    application = W.application(guard, title="storefront cart").mount(cart_endpoint(repository))
    return W.contrib.fastapi.from_application(application)


def app_from_settings(
    settings: Settings,
    repository: CartRepository,
    tokens: Mapping[str, CustomerId],
) -> fastapi.FastAPI:
    """Serve with the configured API key; tokens maps bearer tokens to customers."""
    return create_app(repository, W.StaticGuard(settings.api_key, tokens))


__all__ = ("cart_endpoint", "create_app", "app_from_settings")
