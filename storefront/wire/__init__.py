"""
Wire — expose ops via triggers and codecs.

    from storefront import ops as O
    from storefront import wire as W

    runner = O.ops().on(AddToCart, add_to_cart).compile().inject(CartRepository, repo)
    endp = W.endpoint(runner).expose(
        W.customer_route("POST", "/cart"),
        W.RequestResponseCodec(AddToCartIn, CartOut),
    )
    app = W.application(W.StaticGuard(api_key, tokens)).mount(endp)
    fastapi_app = W.contrib.fastapi.from_application(app)
"""

from storefront.wire._endpoint import (
    Endpoint,
    endpoint,
)
from storefront.wire._app import Application, application
from storefront.wire._auth import Principal, Guard, StaticGuard, bearer_token
from storefront.wire._types import (
    Trigger,
    Codec,
    Exposure,
)

# Common codecs and triggers
from storefront.wire.codecs.rrc import RequestResponseCodec
from storefront.wire.codecs.envelope import Envelope
from storefront.wire.triggers.http import (
    HTTPRouteTrigger,
    customer_route,
    API_KEY,
    AUTHORIZATION,
    Method,
    Path,
    Header,
    Headers,
)

# Subpackages
from storefront.wire import codecs, triggers, contrib

__all__ = (
    # Core API
    "Endpoint",
    "endpoint",
    "Application",
    "application",
    "Trigger",
    "Codec",
    "Exposure",
    # Credentials
    "Principal",
    "Guard",
    "StaticGuard",
    "bearer_token",
    # Built-ins
    "RequestResponseCodec",
    "Envelope",
    "HTTPRouteTrigger",
    "customer_route",
    "API_KEY",
    "AUTHORIZATION",
    "Method",
    "Path",
    "Header",
    "Headers",
    # Subpackages
    "codecs",
    "triggers",
    "contrib",
)
