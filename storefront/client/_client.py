"""
Marketplace HTTP client — catalog, cart, render-order and order calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Self

import httpx
import pydantic
from kungfu import Result, Ok, Error, LazyCoroResult

from storefront import lift as L
from storefront._types import ItemId, SkuId
from storefront.catalog import Product
from storefront.checkout import LineRequest, OrderIntent, ReconciliationResult
from storefront.config import Settings
from storefront.errors import NotFoundError, StorefrontError, TransportError
from storefront.orders import OrderPage, OrderQuery, PlacedOrder
from storefront.wire import Envelope
from storefront.client._wire import OrderBody, OrdersBody, ProductBody, RenderOrderBody

logger = logging.getLogger(__name__)


def decode[T](
    response: httpx.Response,
    decoder: Callable[[Any], T],
    not_found: NotFoundError | None = None,
) -> Result[T, StorefrontError]:
    """Unwrap the {success, message, data} envelope of a marketplace response."""
    if response.status_code == 404 and not_found is not None:
        return Error(not_found)

    try:
        envelope = Envelope[Any].model_validate_json(response.content)
    except pydantic.ValidationError:
        return Error(TransportError(f"undecodable response (HTTP {response.status_code})", response.status_code))

    if not response.is_success or not envelope.success:
        message = envelope.message or f"HTTP {response.status_code}"
        return Error(TransportError(message, response.status_code))

    try:
        return Ok(decoder(envelope.data))
    except pydantic.ValidationError as exc:
        return Error(TransportError(f"unexpected response body: {exc.error_count()} error(s)", response.status_code))


def _lines(lines: tuple[LineRequest, ...]) -> list[dict[str, Any]]:
    return [{"sku_id": line.sku_id, "quantity": line.quantity} for line in lines]


class MarketplaceClient:
    """
    Async client for the marketplace API.

    Implements CatalogSource; session(token) gives the customer-scoped side.

    Example:
        async with MarketplaceClient(Settings.from_env()) as client:
            product = await client.fetch_product("6512345678")
            session = client.session(token)
            await session.add_item("6512345678", "5123", 2)
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._http = http if http is not None else httpx.AsyncClient(timeout=settings.timeout.total_seconds())

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def request[T](
        self,
        method: str,
        path: str,
        decoder: Callable[[Any], T],
        *,
        bearer: str | None = None,
        params: dict[str, Any] | None = None,
        json: Any = None,
        not_found: NotFoundError | None = None,
    ) -> LazyCoroResult[T, StorefrontError]:
        url = f"{self.settings.base_url}{path}"

        async def send() -> httpx.Response:
            return await self._http.request(
                method,
                url,
                params=params,
                json=json,
                headers=self.settings.headers(bearer),
            )

        def settle(response: httpx.Response) -> LazyCoroResult[T, StorefrontError]:
            result = decode(response, decoder, not_found)
            if isinstance(result, Error):
                logger.warning("%s %s failed: %s", method, path, result.error.message)
            return L.from_result(result)

        return L.transport(send).then(settle)

    # ───────────────────────────────────────────────────────────────────────────
    # Catalog
    # ───────────────────────────────────────────────────────────────────────────

    def fetch_product(self, item_id: ItemId) -> LazyCoroResult[Product, StorefrontError]:
        return self.request(
            "GET",
            "/item-detail",
            lambda data: ProductBody.model_validate(data).to_domain(),
            params={"id": item_id, "language": self.settings.language},
            not_found=NotFoundError("product", item_id),
        )

    def session(self, token: str) -> CustomerSession:
        return CustomerSession(self, token)


class CustomerSession:
    """
    Customer-scoped calls: cart service, pricing oracle and order service.
    """

    def __init__(self, client: MarketplaceClient, token: str) -> None:
        self._client = client
        self._token = token

    # CartService

    def add_item(self, item_id: ItemId, sku_id: SkuId, quantity: int) -> LazyCoroResult[None, StorefrontError]:
        body = {"itemId": item_id, "skuId": sku_id, "quantity": quantity}
        return self._client.request("POST", "/cart", lambda _: None, bearer=self._token, json=body)

    def update_quantity(self, sku_id: SkuId, quantity: int) -> LazyCoroResult[None, StorefrontError]:
        return self._client.request(
            "PATCH",
            "/cart",
            lambda _: None,
            bearer=self._token,
            json={"skuId": sku_id, "quantity": quantity},
            not_found=NotFoundError("cart line", sku_id),
        )

    def remove_item(self, sku_id: SkuId) -> LazyCoroResult[None, StorefrontError]:
        return self._client.request(
            "DELETE",
            "/cart",
            lambda _: None,
            bearer=self._token,
            json={"skuId": sku_id},
            not_found=NotFoundError("cart line", sku_id),
        )

    # PricingOracle

    def render_order(self, lines: tuple[LineRequest, ...]) -> LazyCoroResult[ReconciliationResult, StorefrontError]:
        return self._client.request(
            "POST",
            "/render-order",
            lambda data: RenderOrderBody.model_validate(data).to_domain(),
            bearer=self._token,
            json={"items": _lines(lines)},
        )

    # OrderService

    def create_order(self, intent: OrderIntent) -> LazyCoroResult[PlacedOrder, StorefrontError]:
        return self._client.request(
            "POST",
            "/orders",
            lambda data: OrderBody.model_validate(data).to_domain(fallback=intent.lines),
            bearer=self._token,
            json={"items": _lines(intent.lines)},
        )

    def list_orders(self, query: OrderQuery) -> LazyCoroResult[OrderPage, StorefrontError]:
        params: dict[str, Any] = {
            "page": query.page,
            "per_page": query.per_page,
            "sort_by": query.sort_by.value,
            "sort_order": "desc" if query.descending else "asc",
        }
        if query.status is not None:
            params["status"] = query.status.value
        return self._client.request(
            "GET",
            "/orders",
            lambda data: OrdersBody.model_validate(data).to_domain(),
            bearer=self._token,
            params=params,
        )


__all__ = (
    "decode",
    "MarketplaceClient",
    "CustomerSession",
)
