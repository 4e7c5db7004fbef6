"""
Catalog lookup — product snapshots behind an LRU cache.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Protocol

from kungfu import LazyCoroResult

from storefront import cache as C
from storefront._types import ItemId
from storefront.config import Settings
from storefront.errors import StorefrontError
from storefront.catalog._types import Product


class CatalogSource(Protocol):
    """Anything that can fetch a product with its SKU list."""

    def fetch_product(self, item_id: ItemId) -> LazyCoroResult[Product, StorefrontError]:
        ...


def product_key(item_id: ItemId) -> str:
    return f"product:{item_id}"


class CatalogLookup:
    """
    Cached catalog lookup.

    Failed fetches are not cached, so a transient error is retried on the
    next lookup.

    Example:
        catalog = CatalogLookup(client, max_size=256, ttl=timedelta(minutes=1))
        product = await catalog.product("123").unwrap()
    """

    def __init__(
        self,
        source: CatalogSource,
        max_size: int = 256,
        ttl: timedelta | None = None,
    ) -> None:
        self._products = (
            C.cache(product_key, source.fetch_product)
            .tier(C.LocalTier[Product](max_size=max_size, ttl=ttl))
            .build()
        )

    @classmethod
    def from_settings(cls, source: CatalogSource, settings: Settings) -> CatalogLookup:
        return cls(source, max_size=settings.catalog_cache_size, ttl=settings.catalog_ttl)

    def product(self, item_id: ItemId) -> LazyCoroResult[Product, StorefrontError]:
        return self._products.get(item_id).map(lambda found: found.value)

    async def invalidate(self, item_id: ItemId) -> bool:
        return await self._products.invalidate(item_id)


__all__ = ("CatalogSource", "CatalogLookup", "product_key")
