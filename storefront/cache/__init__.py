"""
Cache — tiered caching of fetched values.

    from storefront import cache as C

    products = C.cache(make_key, fetch_product).tier(C.LocalTier(max_size=256)).build()
    result = await products.get(item_id)
"""

from __future__ import annotations

from storefront.cache._types import (
    Tier,
    LocalTier,
    CacheResult,
)
from storefront.cache._builder import cache, Cache, CacheExecutor

__all__ = (
    "Tier",
    "LocalTier",
    "CacheResult",
    "cache",
    "Cache",
    "CacheExecutor",
)
