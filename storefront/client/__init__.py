"""
Client — the marketplace API behind every collaborator protocol.

    from storefront.client import MarketplaceClient

    async with MarketplaceClient(settings) as client:
        catalog = K.CatalogLookup.from_settings(client, settings)
        session = client.session(token)

        cart = OptimisticCart(store, customer, session)          # CartService
        reconciler = CheckoutReconciler(cart, session)            # PricingOracle
        committer = OrderCommitter(reconciler, session)          # OrderService
"""

from storefront.client._client import MarketplaceClient, CustomerSession, decode
from storefront.client import _wire as wire

__all__ = (
    "MarketplaceClient",
    "CustomerSession",
    "decode",
    "wire",
)
