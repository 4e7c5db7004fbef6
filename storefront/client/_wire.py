"""
Marketplace response bodies, decoded with pydantic and mapped onto domain types.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from storefront.catalog import Product, PropertyImage, Sku, SkuProperty
from storefront.checkout import LineRequest, QuoteLine, ReconciliationResult
from storefront.orders import OrderPage, OrderStatus, PlacedOrder


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


class PropertyBody(_Body):
    prop_id: int = 0
    prop_name: str
    value_id: int = 0
    value_name: str

    def to_domain(self) -> SkuProperty:
        return SkuProperty(self.prop_id, self.prop_name, self.value_id, self.value_name)


class SkuBody(_Body):
    sku_id: str
    properties: list[PropertyBody] = []
    price_usd: Decimal = Decimal(0)
    promotion_price_usd: Decimal | None = None
    quantity: int = 0
    pic_url: str | None = None

    def to_domain(self) -> Sku:
        return Sku(
            sku_id=self.sku_id,
            properties=tuple(p.to_domain() for p in self.properties),
            price=self.price_usd,
            promotion_price=self.promotion_price_usd,
            quantity=self.quantity,
            pic_url=self.pic_url or None,
        )


class PropertyImageBody(_Body):
    properties: str = ""
    image_url: str = ""


class SkuPropertiesBody(_Body):
    sku_id: str
    properties: list[PropertyBody] = []


class MultiLanguageBody(_Body):
    title: str | None = None
    main_image_url: str | None = None
    sku_properties: list[SkuPropertiesBody] = []


class ProductBody(_Body):
    item_id: str
    title: str = ""
    sku_list: list[SkuBody] = []
    property_image_list: list[PropertyImageBody] = []
    multi_language_info: MultiLanguageBody | None = None
    pic_urls: list[str] = []

    def to_domain(self) -> Product:
        localized = self.multi_language_info or MultiLanguageBody()
        return Product(
            item_id=self.item_id,
            title=localized.title or self.title,
            skus=tuple(sku.to_domain() for sku in self.sku_list),
            property_images=tuple(
                PropertyImage(image.properties, image.image_url)
                for image in self.property_image_list
                if image.properties and image.image_url
            ),
            main_image=localized.main_image_url or next(iter(self.pic_urls), None),
            localized_properties={
                entry.sku_id: tuple(p.to_domain() for p in entry.properties)
                for entry in localized.sku_properties
                if entry.properties
            },
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Render order
# ═══════════════════════════════════════════════════════════════════════════════


class QuoteItemBody(_Body):
    sku_id: str
    item_id: str = ""
    item_title: str = ""
    quantity: int
    price_usd: Decimal = Decimal(0)
    promotion_price_usd: Decimal | None = None
    subtotal_usd: Decimal = Decimal(0)
    is_available: bool = False
    available_quantity: int | None = None
    unavailable_reason: str | None = None

    def to_domain(self) -> QuoteLine:
        return QuoteLine(
            sku_id=self.sku_id,
            requested=self.quantity,
            available_quantity=self.available_quantity,
            is_available=self.is_available,
            unit_price=self.price_usd,
            promotion_price=self.promotion_price_usd,
            subtotal=self.subtotal_usd,
            item_id=self.item_id,
            title=self.item_title,
            reason=self.unavailable_reason,
        )


class QuoteSummaryBody(_Body):
    total_shipping_fee_usd: Decimal = Decimal(0)


class RenderOrderBody(_Body):
    summary: QuoteSummaryBody = QuoteSummaryBody()
    items: list[QuoteItemBody] = []

    def to_domain(self) -> ReconciliationResult:
        return ReconciliationResult(
            lines=tuple(item.to_domain() for item in self.items),
            shipping_fee=self.summary.total_shipping_fee_usd,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class OrderLineBody(_Body):
    sku_id: str = Field(alias="skuId")
    quantity: int


class SubOrderBody(_Body):
    line_items: list[OrderLineBody] = []


class OrderBody(_Body):
    number: str
    status: OrderStatus = OrderStatus.PENDING
    total: Decimal | None = None
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    line_items: list[OrderLineBody] = []
    sub_orders: list[SubOrderBody] = []

    def to_domain(self, fallback: tuple[LineRequest, ...] = ()) -> PlacedOrder:
        lines = [*self.line_items, *(line for sub in self.sub_orders for line in sub.line_items)]
        return PlacedOrder(
            number=self.number,
            status=self.status,
            lines=tuple(LineRequest(line.sku_id, line.quantity) for line in lines) or fallback,
            total=self.total,
            updated_at=self.updated_at or datetime.now(),
        )


class PaginationBody(_Body):
    total: int = 0
    page: int = 1
    per_page: int = 20


class OrdersBody(_Body):
    orders: list[OrderBody] = []
    pagination: PaginationBody = PaginationBody()

    def to_domain(self) -> OrderPage:
        return OrderPage(
            orders=tuple(order.to_domain() for order in self.orders),
            total=self.pagination.total,
            page=self.pagination.page,
            per_page=self.pagination.per_page,
        )


__all__ = (
    "PropertyBody",
    "SkuBody",
    "PropertyImageBody",
    "SkuPropertiesBody",
    "MultiLanguageBody",
    "ProductBody",
    "QuoteItemBody",
    "QuoteSummaryBody",
    "RenderOrderBody",
    "OrderLineBody",
    "SubOrderBody",
    "OrderBody",
    "PaginationBody",
    "OrdersBody",
)
