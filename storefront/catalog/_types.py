"""
Catalog types — SKUs, products and the derived option groups.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from storefront._types import ItemId, SkuId

# ═══════════════════════════════════════════════════════════════════════════════
# Source Data — as delivered by the catalog lookup
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SkuProperty:
    """One (property, value) pair carried by a SKU, e.g. Color=Red."""

    prop_id: int
    prop_name: str
    value_id: int
    value_name: str

    @property
    def image_key(self) -> str:
        """Canonical "pid:vid" key used by property image tables."""
        return f"{self.prop_id}:{self.value_id}"


@dataclass(frozen=True, slots=True)
class Sku:
    """
    A purchasable variant.

    Within one product no two SKUs share an identical property-value set.
    """

    sku_id: SkuId
    properties: tuple[SkuProperty, ...] = ()
    price: Decimal = Decimal(0)
    promotion_price: Decimal | None = None
    quantity: int = 0
    pic_url: str | None = None

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0


@dataclass(frozen=True, slots=True)
class PropertyImage:
    """
    Image for a property combination.

    properties is the marketplace "pid:vid;pid:vid" string.
    """

    properties: str
    image_url: str

    @property
    def pairs(self) -> tuple[str, ...]:
        return tuple(p.strip() for p in self.properties.split(";") if p.strip())


@dataclass(frozen=True, slots=True)
class Product:
    """A catalog item with its SKU list."""

    item_id: ItemId
    title: str = ""
    skus: tuple[Sku, ...] = ()
    property_images: tuple[PropertyImage, ...] = ()
    main_image: str | None = None
    # Localized properties replace a SKU's own properties everywhere they are read.
    localized_properties: Mapping[SkuId, tuple[SkuProperty, ...]] = field(
        default_factory=dict
    )

    def properties_of(self, sku: Sku) -> tuple[SkuProperty, ...]:
        return self.localized_properties.get(sku.sku_id) or sku.properties

    def sku(self, sku_id: SkuId) -> Sku | None:
        return next((s for s in self.skus if s.sku_id == sku_id), None)


# ═══════════════════════════════════════════════════════════════════════════════
# Derived — rebuilt whenever the SKU list changes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Option:
    """One selectable value within a PropertyGroup."""

    value_name: str
    value_id: int
    image: str | None
    sku_ids: frozenset[SkuId]


@dataclass(frozen=True, slots=True)
class PropertyGroup:
    """
    One facet of variation with its options in first-seen order.

    visual: render options as thumbnails (at least two distinct images).
    """

    name: str
    prop_id: int
    options: tuple[Option, ...]
    visual: bool

    def option(self, value_name: str) -> Option | None:
        return next((o for o in self.options if o.value_name == value_name), None)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "SkuProperty",
    "Sku",
    "PropertyImage",
    "Product",
    "Option",
    "PropertyGroup",
)
