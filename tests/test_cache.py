import asyncio
from datetime import timedelta

from kungfu import Error

from storefront import cache as C
from storefront import lift as L
from storefront.catalog import CatalogLookup, Product
from storefront.config import Settings
from storefront.errors import NotFoundError

from conftest import FakeCatalog


class Squares:
    def __init__(self) -> None:
        self.fetched: list[int] = []

    def __call__(self, n: int):
        self.fetched.append(n)
        if n < 0:
            return L.fail(NotFoundError("square", str(n)))
        return L.pure(n * n)


def squares_cache(fetch: Squares, tier: C.LocalTier[int]) -> C.CacheExecutor:
    return C.cache(lambda n: f"sq:{n}", fetch).tier(tier).build()


async def test_miss_then_hit():
    fetch = Squares()
    squares = squares_cache(fetch, C.LocalTier[int]())

    miss = (await squares.get(3)).unwrap()
    hit = (await squares.get(3)).unwrap()

    assert (miss.value, miss.hit, miss.tier) == (9, False, None)
    assert (hit.value, hit.hit, hit.tier) == (9, True, "local")
    assert fetch.fetched == [3]


async def test_failed_fetch_is_not_cached():
    fetch = Squares()
    squares = squares_cache(fetch, C.LocalTier[int]())

    assert await squares.get(-1) == Error(NotFoundError("square", "-1"))
    await squares.get(-1)

    assert fetch.fetched == [-1, -1]


async def test_least_recently_used_entry_is_evicted():
    tier = C.LocalTier[int](max_size=2)
    await tier.set("a", 1)
    await tier.set("b", 2)
    await tier.get("a")
    await tier.set("c", 3)

    assert await tier.get("b") is None
    assert await tier.get("a") == 1
    assert len(tier) == 2


async def test_entries_expire():
    tier = C.LocalTier[int](ttl=timedelta(milliseconds=20))
    await tier.set("a", 1)

    await asyncio.sleep(0.05)

    assert await tier.get("a") is None
    assert len(tier) == 0


async def test_invalidate():
    fetch = Squares()
    squares = squares_cache(fetch, C.LocalTier[int]())
    await squares.get(2)
    await squares.get(4)

    assert await squares.invalidate(2)
    assert not await squares.invalidate(2)

    await squares.get(2)
    await squares.get(4)
    assert fetch.fetched == [2, 4, 2]


# ═══════════════════════════════════════════════════════════════════════════════
# CatalogLookup
# ═══════════════════════════════════════════════════════════════════════════════


async def test_catalog_lookup_fetches_once(catalog_source, apparel):
    catalog = CatalogLookup(catalog_source)

    first = (await catalog.product("100")).unwrap()
    second = (await catalog.product("100")).unwrap()

    assert first == second == apparel
    assert catalog_source.fetches == ["100"]


async def test_catalog_lookup_refetches_after_invalidate(catalog_source):
    catalog = CatalogLookup(catalog_source)

    await catalog.product("100")
    assert await catalog.invalidate("100")
    await catalog.product("100")

    assert catalog_source.fetches == ["100", "100"]


async def test_catalog_lookup_retries_after_error(catalog_source, transport_down):
    catalog = CatalogLookup(catalog_source)
    catalog_source.failure = transport_down

    assert await catalog.product("100") == Error(transport_down)

    catalog_source.failure = None
    assert isinstance((await catalog.product("100")).unwrap(), Product)
    assert catalog_source.fetches == ["100", "100"]


async def test_catalog_lookup_size_from_settings():
    source = FakeCatalog(*(Product(str(i)) for i in range(3)))
    catalog = CatalogLookup.from_settings(source, Settings().with_catalog_cache_size(2))

    for item_id in ("0", "1", "2", "0"):
        await catalog.product(item_id)

    assert source.fetches == ["0", "1", "2", "0"]


async def test_catalog_lookup_ttl_from_settings(catalog_source):
    settings = Settings().with_catalog_ttl(delta=timedelta(milliseconds=20))
    catalog = CatalogLookup.from_settings(catalog_source, settings)

    await catalog.product("100")
    await catalog.product("100")
    await asyncio.sleep(0.05)
    await catalog.product("100")

    assert catalog_source.fetches == ["100", "100"]
