"""
Price display and add-to-cart quantity guard.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from kungfu import Result, Ok, Error

from storefront.errors import ValidationError
from storefront.catalog._types import Sku


@dataclass(frozen=True, slots=True)
class PriceDisplay:
    """What the buyer pays, and what they would have paid."""

    price: Decimal
    original: Decimal | None
    discount_percent: int | None

    @property
    def on_promotion(self) -> bool:
        return self.original is not None


def price_display(sku: Sku) -> PriceDisplay:
    """
    Promotional price applies only when it is positive and below the price.

    Example:
        price_display(Sku("1", price=Decimal("100"), promotion_price=Decimal("75")))
        # PriceDisplay(price=75, original=100, discount_percent=25)
    """
    promo = sku.promotion_price
    if promo is None or promo <= 0 or promo >= sku.price:
        return PriceDisplay(price=sku.price, original=None, discount_percent=None)

    ratio = (1 - promo / sku.price) * 100
    percent = int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return PriceDisplay(price=promo, original=sku.price, discount_percent=percent)


def unit_price(sku: Sku) -> Decimal:
    return price_display(sku).price


def purchasable_quantity(sku: Sku, requested: int) -> Result[int, ValidationError]:
    """Clamp requested quantity to [1, stock]; out of stock cannot be added."""
    if not sku.in_stock:
        return Error(ValidationError(f"SKU {sku.sku_id} is out of stock"))
    return Ok(max(1, min(requested, sku.quantity)))


__all__ = ("PriceDisplay", "price_display", "unit_price", "purchasable_quantity")
