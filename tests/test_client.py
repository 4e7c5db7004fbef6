import json
from decimal import Decimal

import httpx
import pytest
from kungfu import Error

from storefront import checkout as CO
from storefront import orders as O
from storefront.cart import CartStore, OptimisticCart
from storefront.catalog import build_groups
from storefront.client import MarketplaceClient, decode
from storefront.config import Settings
from storefront.errors import NotFoundError, TransportError

SETTINGS = Settings(api_url="https://market.test", api_key="k-123")


class Recorder:
    """MockTransport handler answering from a queue of (status, body)."""

    def __init__(self, *answers: tuple[int, object]) -> None:
        self.answers = list(answers)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.answers.pop(0)
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> object:
        return json.loads(self.last.content)


def ok(data: object) -> tuple[int, object]:
    return 200, {"success": True, "message": "ok", "data": data}


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
async def client(recorder):
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    async with MarketplaceClient(SETTINGS, http) as client:
        yield client


PRODUCT = {
    "item_id": 6512345678,
    "title": "原标题",
    "pic_urls": ["https://img.test/main.jpg"],
    "sku_list": [
        {
            "sku_id": 1,
            "price_usd": "12.50",
            "promotion_price_usd": "9.99",
            "quantity": 4,
            "properties": [
                {"prop_id": 1, "prop_name": "颜色", "value_id": 10, "value_name": "红"},
                {"prop_id": 2, "prop_name": "尺码", "value_id": 20, "value_name": "S"},
            ],
        },
        {
            "sku_id": 2,
            "price_usd": 12.5,
            "quantity": 0,
            "pic_url": "",
            "properties": [
                {"prop_id": 1, "prop_name": "颜色", "value_id": 11, "value_name": "蓝"},
                {"prop_id": 2, "prop_name": "尺码", "value_id": 20, "value_name": "S"},
            ],
        },
    ],
    "property_image_list": [
        {"properties": "1:10", "image_url": "https://img.test/red.jpg"},
        {"properties": "1:11", "image_url": ""},
    ],
    "multi_language_info": {
        "title": "Shirt",
        "sku_properties": [
            {
                "sku_id": 1,
                "properties": [
                    {"prop_id": 1, "prop_name": "Color", "value_id": 10, "value_name": "Red"},
                    {"prop_id": 2, "prop_name": "Size", "value_id": 20, "value_name": "S"},
                ],
            },
            {
                "sku_id": 2,
                "properties": [
                    {"prop_id": 1, "prop_name": "Color", "value_id": 11, "value_name": "Blue"},
                    {"prop_id": 2, "prop_name": "Size", "value_id": 20, "value_name": "S"},
                ],
            },
        ],
    },
}


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


async def test_fetch_product(client, recorder):
    recorder.answers.append(ok(PRODUCT))

    product = (await client.fetch_product("6512345678")).unwrap()

    request = recorder.last
    assert request.method == "GET"
    assert request.url.path == "/api/v1/taobao/item-detail"
    assert request.url.params["id"] == "6512345678"
    assert request.url.params["language"] == "en"
    assert request.headers["X-API-Key"] == "k-123"
    assert "Authorization" not in request.headers

    assert product.item_id == "6512345678"
    assert product.title == "Shirt"
    assert product.main_image == "https://img.test/main.jpg"
    assert len(product.property_images) == 1
    assert product.skus[0].price == Decimal("12.50")
    assert product.skus[0].promotion_price == Decimal("9.99")
    assert product.skus[1].pic_url is None
    assert [g.name for g in build_groups(product)] == ["Size", "Color"]


async def test_missing_product(client, recorder):
    recorder.answers.append((404, {"success": False, "message": "not found"}))

    assert await client.fetch_product("1") == Error(NotFoundError("product", "1"))


async def test_unsuccessful_envelope(client, recorder):
    recorder.answers.append((200, {"success": False, "message": "quota exceeded"}))

    assert await client.fetch_product("1") == Error(TransportError("quota exceeded", 200))


async def test_server_error_without_message(client, recorder):
    recorder.answers.append((500, {"success": False}))

    assert await client.fetch_product("1") == Error(TransportError("HTTP 500", 500))


async def test_undecodable_body(client, recorder):
    recorder.answers.append((502, b"<html>bad gateway</html>"))

    assert await client.fetch_product("1") == Error(TransportError("undecodable response (HTTP 502)", 502))


async def test_unexpected_data_shape(client, recorder):
    recorder.answers.append(ok({"title": "no item id"}))

    match await client.fetch_product("1"):
        case Error(TransportError(message=message, status=200)):
            assert message.startswith("unexpected response body")
        case other:
            pytest.fail(f"expected a transport error, got {other}")


async def test_network_failure():
    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    http = httpx.AsyncClient(transport=httpx.MockTransport(unreachable))
    async with MarketplaceClient(SETTINGS, http) as client:
        assert await client.fetch_product("1") == Error(TransportError("connection refused"))


def test_decode_keeps_data():
    response = httpx.Response(200, json={"success": True, "data": [1, 2]})

    assert decode(response, list).unwrap() == [1, 2]


# ═══════════════════════════════════════════════════════════════════════════════
# Customer session
# ═══════════════════════════════════════════════════════════════════════════════


async def test_cart_calls_use_bearer_and_camel_case(client, recorder):
    recorder.answers.extend([ok(None), ok(None), ok(None)])
    session = client.session("tok")

    await session.add_item("10", "77", 2)
    assert recorder.last.method == "POST"
    assert recorder.last.headers["Authorization"] == "Bearer tok"
    assert recorder.last_json() == {"itemId": "10", "skuId": "77", "quantity": 2}

    await session.update_quantity("77", 3)
    assert recorder.last.method == "PATCH"
    assert recorder.last_json() == {"skuId": "77", "quantity": 3}

    await session.remove_item("77")
    assert recorder.last.method == "DELETE"
    assert recorder.last_json() == {"skuId": "77"}
    assert {r.url.path for r in recorder.requests} == {"/api/v1/taobao/cart"}


async def test_update_of_missing_line(client, recorder):
    recorder.answers.append((404, {"success": False, "message": "gone"}))

    assert await client.session("tok").update_quantity("77", 3) == Error(NotFoundError("cart line", "77"))


RENDERED = {
    "summary": {"total_shipping_fee_usd": "4.00"},
    "items": [
        {
            "sku_id": "a",
            "item_id": "10",
            "item_title": "Shirt",
            "quantity": 2,
            "price_usd": "5",
            "subtotal_usd": "10",
            "is_available": True,
            "available_quantity": 7,
        },
        {
            "sku_id": "b",
            "quantity": 3,
            "is_available": False,
            "available_quantity": 1,
            "unavailable_reason": "low stock",
        },
        {"sku_id": "c", "quantity": 1, "is_available": False, "available_quantity": None},
    ],
}


async def test_render_order(client, recorder):
    recorder.answers.append(ok(RENDERED))
    lines = (CO.LineRequest("a", 2), CO.LineRequest("b", 3), CO.LineRequest("c", 1))

    result = (await client.session("tok").render_order(lines)).unwrap()

    assert recorder.last.url.path == "/api/v1/taobao/render-order"
    assert recorder.last_json() == {
        "items": [{"sku_id": "a", "quantity": 2}, {"sku_id": "b", "quantity": 3}, {"sku_id": "c", "quantity": 1}]
    }
    assert [q.verdict for q in result.lines] == [
        CO.Verdict.AVAILABLE,
        CO.Verdict.INSUFFICIENT,
        CO.Verdict.UNAVAILABLE,
    ]
    assert result.line("b").reason == "low stock"
    assert result.total == Decimal("14.00")


async def test_session_drives_the_reconciler(client, recorder):
    recorder.answers.append(ok(RENDERED))
    store = CartStore()
    ids = [store.add("c1", "10", sku, qty).unwrap().line_id for sku, qty in (("a", 2), ("b", 3), ("c", 1))]
    session = client.session("tok")
    reconciler = CO.CheckoutReconciler(OptimisticCart(store, "c1", session), session)

    reviewing = (await reconciler.checkout(ids)).unwrap()

    assert CO.headline(reviewing.result) == "1 item(s) have insufficient stock, 1 item(s) unavailable"


async def test_create_order_collects_sub_order_lines(client, recorder):
    recorder.answers.append(
        ok(
            {
                "number": "SO123",
                "status": "payment",
                "total": "20.5",
                "updatedAt": "2026-03-01T10:00:00",
                "sub_orders": [{"line_items": [{"skuId": "a", "quantity": 2}]}],
            }
        )
    )
    intent = CO.OrderIntent((CO.LineRequest("a", 2),))

    order = (await client.session("tok").create_order(intent)).unwrap()

    assert recorder.last.url.path == "/api/v1/taobao/orders"
    assert recorder.last_json() == {"items": [{"sku_id": "a", "quantity": 2}]}
    assert order.number == "SO123"
    assert order.status is O.OrderStatus.PAYMENT
    assert order.total == Decimal("20.5")
    assert order.lines == (CO.LineRequest("a", 2),)
    assert order.updated_at.year == 2026


async def test_create_order_falls_back_to_intent_lines(client, recorder):
    recorder.answers.append(ok({"number": "SO124"}))
    intent = CO.OrderIntent((CO.LineRequest("z", 1),))

    order = (await client.session("tok").create_order(intent)).unwrap()

    assert order.lines == intent.lines
    assert order.status is O.OrderStatus.PENDING


async def test_list_orders(client, recorder):
    recorder.answers.append(
        ok(
            {
                "orders": [{"number": "SO1", "status": "shipping"}],
                "pagination": {"total": 41, "page": 3, "per_page": 20, "total_pages": 3},
            }
        )
    )
    query = O.OrderQuery(page=3, status=O.OrderStatus.SHIPPING, sort_by=O.SortField.TOTAL, descending=False)

    page = (await client.session("tok").list_orders(query)).unwrap()

    params = recorder.last.url.params
    assert params["page"] == "3"
    assert params["per_page"] == "20"
    assert params["status"] == "shipping"
    assert params["sort_by"] == "total"
    assert params["sort_order"] == "asc"
    assert [o.number for o in page.orders] == ["SO1"]
    assert page.total_pages == 3
    assert not page.has_next
