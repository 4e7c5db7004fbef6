"""
storefront — product variants, cart, checkout reconciliation and order commit.

Errors are values (kungfu Result); async calls are lazy (LazyCoroResult).

    from storefront import catalog as K, checkout as CO, orders as O
    from storefront.cart import CartStore, OptimisticCart
    from storefront.client import MarketplaceClient

    groups = K.build_groups(product)
    selection = K.toggle(K.Selection(), "Color", "Red")
    match K.resolve(product, groups, selection):
        case K.Resolved(sku):
            ...
        case K.Unresolved(missing):
            ...

    reconciler = CO.CheckoutReconciler(OptimisticCart(store, customer, session), session)
    await reconciler.checkout(line_ids)
    await O.OrderCommitter(reconciler, session).commit()
"""

from storefront import (
    cache,
    cart,
    catalog,
    checkout,
    client,
    config,
    errors,
    graph,
    idempotency,
    lift,
    ops,
    orders,
    saga,
    service,
    wire,
)
from storefront.config import Settings
from storefront.errors import NotFoundError, StorefrontError, TransportError, ValidationError

__version__ = "0.1.0"

__all__ = (
    # Subpackages
    "cache",
    "cart",
    "catalog",
    "checkout",
    "client",
    "config",
    "errors",
    "graph",
    "idempotency",
    "lift",
    "ops",
    "orders",
    "saga",
    "service",
    "wire",
    # Shortcuts
    "Settings",
    "ValidationError",
    "NotFoundError",
    "TransportError",
    "StorefrontError",
    "__version__",
)
