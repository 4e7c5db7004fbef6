"""
Cache builder — fluent API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from collections.abc import Callable

from kungfu import LazyCoroResult, Result, Ok, Error

from storefront.cache._types import Tier, CacheResult

logger = logging.getLogger(__name__)

type KeyFn[K] = Callable[[K], str]


# ═══════════════════════════════════════════════════════════════════════════════
# Cache Builder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Cache[K, T, E]:
    """
    Fluent cache builder.

    Type parameters:
        K: Key input type
        T: Value type
        E: Error type from fetch

    Example:
        products = (
            C.cache(lambda item_id: f"product:{item_id}", source.fetch_product)
            .tier(C.LocalTier(max_size=256))
            .build()
        )
    """

    _key_fn: KeyFn[K]
    _fetch: Callable[[K], LazyCoroResult[T, E]]
    _tiers: tuple[Tier[T], ...]

    def tier(self, t: Tier[T]) -> Cache[K, T, E]:
        """Add cache tier. Tiers are tried in the order they were added."""
        return Cache(
            _key_fn=self._key_fn,
            _fetch=self._fetch,
            _tiers=(*self._tiers, t),
        )

    def build(self) -> CacheExecutor[K, T, E]:
        return CacheExecutor(
            key_fn=self._key_fn,
            tiers=self._tiers,
            fetch=self._fetch,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Cache Executor
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class CacheExecutor[K, T, E]:
    """Compiled cache executor."""

    key_fn: KeyFn[K]
    tiers: tuple[Tier[T], ...]
    fetch: Callable[[K], LazyCoroResult[T, E]]

    def get(self, key: K) -> LazyCoroResult[CacheResult[T], E]:
        """
        Get value from cache.

        Tries tiers in order, then falls back to fetch. A successful fetch
        populates every tier; failed fetches are never cached.
        """
        cache_key = self.key_fn(key)
        tiers = self.tiers
        fetch_fn = self.fetch

        async def execute() -> Result[CacheResult[T], E]:
            for t in tiers:
                value = await t.get(cache_key)
                if value is not None:
                    logger.debug("cache hit %s in %s", cache_key, t.name)
                    return Ok(CacheResult(value=value, hit=True, tier=t.name))

            logger.debug("cache miss %s", cache_key)
            match await fetch_fn(key):
                case Ok(value):
                    for t in tiers:
                        await t.set(cache_key, value)
                    return Ok(CacheResult(value=value, hit=False, tier=None))
                case Error(e):
                    return Error(e)

        return LazyCoroResult(execute)

    async def invalidate(self, key: K) -> bool:
        """Invalidate key in all tiers. True if any tier held it."""
        cache_key = self.key_fn(key)
        deleted = False
        for t in self.tiers:
            if await t.delete(cache_key):
                deleted = True
        return deleted


# ═══════════════════════════════════════════════════════════════════════════════
# cache() — Entry Point
# ═══════════════════════════════════════════════════════════════════════════════


def cache[K, T, E](
    key: KeyFn[K],
    fetch: Callable[[K], LazyCoroResult[T, E]],
) -> Cache[K, T, E]:
    """
    Create cache builder with key function and fetch.

    Types are inferred from arguments.
    """
    return Cache(_key_fn=key, _fetch=fetch, _tiers=())


__all__ = ("Cache", "CacheExecutor", "cache")
