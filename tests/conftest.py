from __future__ import annotations

import asyncio
from collections.abc import Mapping
from decimal import Decimal

import pytest
from kungfu import LazyCoroResult

from storefront import lift as L
from storefront.cart import CartStore, OptimisticCart
from storefront.catalog import Product, PropertyImage, Sku, SkuProperty
from storefront.checkout import LineRequest, QuoteLine, ReconciliationResult
from storefront.errors import NotFoundError, StorefrontError, TransportError


def color(name: str) -> SkuProperty:
    return SkuProperty(1, "Color", {"Red": 10, "Blue": 11}[name], name)


def size(name: str) -> SkuProperty:
    return SkuProperty(2, "Size", {"S": 20, "M": 21}[name], name)


def make_apparel() -> Product:
    return Product(
        item_id="100",
        title="Shirt",
        skus=(
            Sku("1", (color("Red"), size("S")), price=Decimal("10"), quantity=0),
            Sku("2", (color("Red"), size("M")), price=Decimal("12"), promotion_price=Decimal("9"), quantity=5),
            Sku("3", (color("Blue"), size("S")), price=Decimal("10"), quantity=3, pic_url="blue-s.jpg"),
            Sku("4", (color("Blue"), size("M")), price=Decimal("10"), quantity=2),
        ),
        property_images=(
            PropertyImage("1:10", "red.jpg"),
            PropertyImage("1:11", "blue.jpg"),
        ),
        main_image="main.jpg",
    )


@pytest.fixture
def apparel() -> Product:
    """Color × Size shirt; Red/S is out of stock."""
    return make_apparel()


@pytest.fixture
def store() -> CartStore:
    return CartStore()


# ═══════════════════════════════════════════════════════════════════════════════
# Fakes
# ═══════════════════════════════════════════════════════════════════════════════


class FakeOracle:
    """
    Quotes lines from a stock and price table.

    A SKU missing from stock has nothing left. Set failure to fail every call,
    or gate to hold calls until the event is set.
    """

    def __init__(
        self,
        stock: Mapping[str, int],
        prices: Mapping[str, Decimal] | None = None,
        shipping: Decimal = Decimal(0),
    ) -> None:
        self.stock = dict(stock)
        self.prices = dict(prices or {})
        self.shipping = shipping
        self.requests: list[tuple[LineRequest, ...]] = []
        self.failure: StorefrontError | None = None
        self.gate: asyncio.Event | None = None

    def quote(self, line: LineRequest) -> QuoteLine:
        stock = self.stock.get(line.sku_id, 0)
        price = self.prices.get(line.sku_id, Decimal(1))
        return QuoteLine(
            sku_id=line.sku_id,
            requested=line.quantity,
            available_quantity=stock,
            is_available=stock >= line.quantity,
            unit_price=price,
            subtotal=price * line.quantity,
        )

    def render_order(self, lines: tuple[LineRequest, ...]) -> LazyCoroResult[ReconciliationResult, StorefrontError]:
        self.requests.append(lines)

        async def answer():
            if self.gate is not None:
                await self.gate.wait()
            if self.failure is not None:
                return await L.fail(self.failure)
            return await L.pure(ReconciliationResult(tuple(self.quote(line) for line in lines), self.shipping))

        return LazyCoroResult(answer)


class FakeCartService:
    """Remote cart that records calls and fails them while failure is set."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.failure: StorefrontError | None = None

    def _answer(self, *call: str) -> LazyCoroResult[None, StorefrontError]:
        self.calls.append(call)
        if self.failure is not None:
            return L.fail(self.failure)
        return L.pure(None)

    def add_item(self, item_id: str, sku_id: str, quantity: int) -> LazyCoroResult[None, StorefrontError]:
        return self._answer("add", item_id, sku_id, str(quantity))

    def update_quantity(self, sku_id: str, quantity: int) -> LazyCoroResult[None, StorefrontError]:
        return self._answer("update", sku_id, str(quantity))

    def remove_item(self, sku_id: str) -> LazyCoroResult[None, StorefrontError]:
        return self._answer("remove", sku_id)


class FakeCatalog:
    """CatalogSource over a dict, counting fetches."""

    def __init__(self, *products: Product) -> None:
        self.products = {p.item_id: p for p in products}
        self.fetches: list[str] = []
        self.failure: StorefrontError | None = None

    def fetch_product(self, item_id: str) -> LazyCoroResult[Product, StorefrontError]:
        self.fetches.append(item_id)
        if self.failure is not None:
            return L.fail(self.failure)
        product = self.products.get(item_id)
        if product is None:
            return L.fail(NotFoundError("product", item_id))
        return L.pure(product)


@pytest.fixture
def cart_service() -> FakeCartService:
    return FakeCartService()


@pytest.fixture
def cart(store: CartStore, cart_service: FakeCartService) -> OptimisticCart:
    """c1's cart, mirrored to the fake remote cart."""
    return OptimisticCart(store, "c1", cart_service)


@pytest.fixture
def catalog_source(apparel: Product) -> FakeCatalog:
    return FakeCatalog(apparel)


@pytest.fixture
def transport_down() -> TransportError:
    return TransportError("service unavailable", 503)
